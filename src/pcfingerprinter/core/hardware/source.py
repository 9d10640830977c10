"""Hardware sources --- where snapshots come from.

``HardwareSource`` is the capability the lifecycle orchestrator consumes.
Two implementations ship:

- ``SystemHardwareSource`` queries the running machine with psutil,
  py-cpuinfo, the platform module, ``/sys/class/dmi`` on Linux, ``ioreg``
  and ``system_profiler`` on macOS, and WMI (``wmi``) on Windows.
- ``StaticHardwareSource`` returns a fixed snapshot. It backs tests and
  lets a snapshot captured elsewhere be replayed.

Collection Algorithm:
    1. Submit every independent sub-query to a thread pool.
    2. Wait for all of them. A sub-query that raises is logged and its
       fields stay absent; the snapshot is still produced.
    3. Assemble the snapshot and stamp it with the capture time.
"""

from __future__ import annotations

import copy
import json
import logging
import platform
import socket
import subprocess
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

import cpuinfo
import psutil

from pcfingerprinter.core.hardware.models import (
    BaseboardInfo,
    BiosInfo,
    CpuInfo,
    DiskInfo,
    HardwareSnapshot,
    NetworkInterface,
    OsInfo,
    utc_isoformat,
)

logger = logging.getLogger(__name__)

_COMMAND_TIMEOUT: float = 10.0

_DMI_ROOT = Path("/sys/class/dmi/id")
_SYS_BLOCK = Path("/sys/block")
_MACHINE_ID_PATHS = (Path("/etc/machine-id"), Path("/var/lib/dbus/machine-id"))

# Block device prefixes that are never the primary physical disk.
_VIRTUAL_BLOCK_PREFIXES = ("loop", "ram", "zram", "dm-", "md", "sr", "fd")

# Placeholder strings firmware vendors use instead of a real value.
_PLACEHOLDERS = {
    "", "none", "n/a", "default string", "to be filled by o.e.m.",
    "system serial number", "not specified", "not applicable", "0",
}


class HardwareSource(ABC):
    """Provider of hardware snapshots."""

    @abstractmethod
    def collect(self) -> HardwareSnapshot:
        """Capture a snapshot of the current hardware state."""


class StaticHardwareSource(HardwareSource):
    """Returns a deep copy of a fixed snapshot on every call."""

    def __init__(self, snapshot: HardwareSnapshot) -> None:
        self._snapshot = snapshot

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StaticHardwareSource:
        return cls(HardwareSnapshot.from_dict(data))

    def collect(self) -> HardwareSnapshot:
        return copy.deepcopy(self._snapshot)


def _clean(value: Any) -> str | None:
    """Strip a firmware string, mapping vendor placeholders to None."""
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in _PLACEHOLDERS:
        return None
    return text


def _read_text(path: Path) -> str | None:
    try:
        return _clean(path.read_text(encoding="utf-8", errors="replace"))
    except OSError:
        return None


def _run_command(args: list[str]) -> str | None:
    try:
        completed = subprocess.run(
            args, capture_output=True, text=True,
            timeout=_COMMAND_TIMEOUT, check=False,
        )
    except (OSError, subprocess.SubprocessError):
        logger.debug("Command failed: %s", args[0], exc_info=True)
        return None
    if completed.returncode != 0:
        return None
    return completed.stdout


def _wmi_first(wmi_class: str, properties: list[str]) -> dict[str, Any]:
    """Return the first instance of a Windows WMI class as a dict.

    Sub-queries run on pool threads, so COM is initialized per call.
    """
    import pythoncom
    import wmi

    pythoncom.CoInitialize()
    try:
        for row in getattr(wmi.WMI(), wmi_class)():
            return {name: getattr(row, name, None) for name in properties}
        return {}
    finally:
        pythoncom.CoUninitialize()


def _storage_profile() -> dict[str, Any]:
    """Return the first drive ``system_profiler`` reports with a serial."""
    out = _run_command(
        ["system_profiler", "-json", "SPNVMeDataType", "SPSerialATADataType"]
    )
    if not out:
        return {}
    pending: list[Any] = [json.loads(out)]
    while pending:
        node = pending.pop(0)
        if isinstance(node, dict):
            if node.get("device_serial"):
                return node
            pending.extend(node.values())
        elif isinstance(node, list):
            pending.extend(node)
    return {}


def _ioreg_value(key: str) -> str | None:
    out = _run_command(["ioreg", "-rd1", "-c", "IOPlatformExpertDevice"])
    if not out:
        return None
    for line in out.splitlines():
        if f'"{key}"' in line and "=" in line:
            return _clean(line.split("=", 1)[1].strip().strip('"'))
    return None


class SystemHardwareSource(HardwareSource):
    """Collects a snapshot from the machine this process runs on.

    Args:
        max_workers: Thread pool size for the concurrent sub-queries.
    """

    def __init__(self, max_workers: int = 8) -> None:
        self._max_workers = max_workers
        self._platform = sys.platform

    # -- Sub-queries ------------------------------------------------------

    def machine_id(self) -> str | None:
        """Return the OS installation's stable machine identifier."""
        if self._platform.startswith("linux"):
            for path in _MACHINE_ID_PATHS:
                value = _read_text(path)
                if value:
                    return value
            return _read_text(_DMI_ROOT / "product_uuid")
        if self._platform == "darwin":
            return _ioreg_value("IOPlatformUUID")
        if self._platform == "win32":
            import winreg

            with winreg.OpenKey(
                winreg.HKEY_LOCAL_MACHINE, r"SOFTWARE\Microsoft\Cryptography"
            ) as key:
                value, _ = winreg.QueryValueEx(key, "MachineGuid")
            return _clean(value)
        return None

    def cpu(self) -> CpuInfo:
        info = cpuinfo.get_cpu_info()
        hz = info.get("hz_advertised") or info.get("hz_actual")
        speed = None
        if isinstance(hz, (list, tuple)) and hz and hz[0]:
            speed = round(hz[0] / 1e9, 2)
        return CpuInfo(
            manufacturer=_clean(info.get("vendor_id_raw")),
            brand=_clean(info.get("brand_raw")),
            speed=speed,
            physical_cores=psutil.cpu_count(logical=False),
            cores=psutil.cpu_count(logical=True),
        )

    def bios(self) -> BiosInfo:
        if self._platform.startswith("linux"):
            return BiosInfo(
                vendor=_read_text(_DMI_ROOT / "bios_vendor"),
                version=_read_text(_DMI_ROOT / "bios_version"),
                release_date=_read_text(_DMI_ROOT / "bios_date"),
                serial=_read_text(_DMI_ROOT / "product_serial"),
            )
        if self._platform == "darwin":
            return BiosInfo(
                vendor="Apple Inc.",
                serial=_ioreg_value("IOPlatformSerialNumber"),
            )
        if self._platform == "win32":
            data = _wmi_first(
                "Win32_BIOS",
                ["Manufacturer", "SMBIOSBIOSVersion", "ReleaseDate", "SerialNumber"],
            )
            return BiosInfo(
                vendor=_clean(data.get("Manufacturer")),
                version=_clean(data.get("SMBIOSBIOSVersion")),
                release_date=_clean(data.get("ReleaseDate")),
                serial=_clean(data.get("SerialNumber")),
            )
        return BiosInfo()

    def baseboard(self) -> BaseboardInfo:
        if self._platform.startswith("linux"):
            return BaseboardInfo(
                manufacturer=_read_text(_DMI_ROOT / "board_vendor"),
                model=_read_text(_DMI_ROOT / "board_name"),
                serial=_read_text(_DMI_ROOT / "board_serial"),
            )
        if self._platform == "darwin":
            return BaseboardInfo(
                manufacturer="Apple Inc.",
                model=_ioreg_value("model"),
                serial=_ioreg_value("IOPlatformSerialNumber"),
            )
        if self._platform == "win32":
            data = _wmi_first(
                "Win32_BaseBoard", ["Manufacturer", "Product", "SerialNumber"]
            )
            return BaseboardInfo(
                manufacturer=_clean(data.get("Manufacturer")),
                model=_clean(data.get("Product")),
                serial=_clean(data.get("SerialNumber")),
            )
        return BaseboardInfo()

    def disk(self) -> DiskInfo | None:
        """Return the first physical disk, or None if none is found."""
        if self._platform.startswith("linux"):
            try:
                devices = sorted(p for p in _SYS_BLOCK.iterdir())
            except OSError:
                return None
            for dev in devices:
                if dev.name.startswith(_VIRTUAL_BLOCK_PREFIXES):
                    continue
                sectors = _read_text(dev / "size")
                return DiskInfo(
                    vendor=_read_text(dev / "device" / "vendor"),
                    name=_read_text(dev / "device" / "model") or dev.name,
                    size=int(sectors) * 512 if sectors and sectors.isdigit() else None,
                    serial=(
                        _read_text(dev / "device" / "serial")
                        or _read_text(dev / "serial")
                    ),
                )
            return None
        if self._platform == "darwin":
            data = _storage_profile()
            if not data:
                return None
            size = data.get("size_in_bytes")
            return DiskInfo(
                name=_clean(data.get("device_model") or data.get("_name")),
                size=int(size) if size is not None else None,
                serial=_clean(data.get("device_serial")),
            )
        if self._platform == "win32":
            data = _wmi_first(
                "Win32_DiskDrive",
                ["Manufacturer", "Model", "Size", "SerialNumber"],
            )
            if not data:
                return None
            size = data.get("Size")
            return DiskInfo(
                vendor=_clean(data.get("Manufacturer")),
                name=_clean(data.get("Model")),
                size=int(size) if size is not None else None,
                serial=_clean(data.get("SerialNumber")),
            )
        return None

    def network(self) -> list[NetworkInterface]:
        """Return non-loopback interfaces in name order."""
        stats = psutil.net_if_stats()
        interfaces: list[NetworkInterface] = []
        for name, addrs in sorted(psutil.net_if_addrs().items()):
            stat = stats.get(name)
            flags = getattr(stat, "flags", "") or ""
            if "loopback" in flags.split(",") or name == "lo":
                continue
            entry = NetworkInterface(iface=name)
            for addr in addrs:
                if addr.family == psutil.AF_LINK:
                    entry.mac = addr.address.replace("-", ":").lower()
                elif addr.family == socket.AF_INET and entry.ip4 is None:
                    entry.ip4 = addr.address
                elif addr.family == socket.AF_INET6 and entry.ip6 is None:
                    entry.ip6 = addr.address.split("%", 1)[0]
            if entry.ip4 and entry.ip4.startswith("127."):
                continue
            interfaces.append(entry)
        return interfaces

    def memory_gb(self) -> int:
        return int(psutil.virtual_memory().total / 1024 ** 3 + 0.5)

    def os_info(self) -> OsInfo:
        distro = None
        if self._platform.startswith("linux"):
            try:
                distro = platform.freedesktop_os_release().get("PRETTY_NAME")
            except OSError:
                distro = None
        elif self._platform == "darwin":
            distro = f"macOS {platform.mac_ver()[0]}".strip()
        elif self._platform == "win32":
            distro = f"Windows {platform.win32_ver()[0]}".strip()
        return OsInfo(
            platform=self._platform,
            distro=distro,
            release=platform.release() or None,
        )

    # -- Assembly -----------------------------------------------------------

    def _queries(self) -> dict[str, Callable[[], Any]]:
        return {
            "machine_id": self.machine_id,
            "cpu": self.cpu,
            "bios": self.bios,
            "baseboard": self.baseboard,
            "disk": self.disk,
            "net": self.network,
            "memory_gb": self.memory_gb,
            "os": self.os_info,
        }

    def collect(self) -> HardwareSnapshot:
        """Run every sub-query concurrently and assemble the snapshot."""
        results: dict[str, Any] = {}
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            futures = {
                name: pool.submit(query) for name, query in self._queries().items()
            }
            for name, future in futures.items():
                try:
                    results[name] = future.result()
                except Exception:
                    logger.debug("Hardware query %r failed", name, exc_info=True)

        snapshot = HardwareSnapshot(
            machine_id=results.get("machine_id"),
            platform=self._platform,
            arch=platform.machine() or None,
            hostname=socket.gethostname() or None,
            disk=results.get("disk"),
            net=results.get("net") or [],
            memory_gb=results.get("memory_gb"),
            timestamp=utc_isoformat(),
        )
        if results.get("cpu") is not None:
            snapshot.cpu = results["cpu"]
        if results.get("bios") is not None:
            snapshot.bios = results["bios"]
        if results.get("baseboard") is not None:
            snapshot.baseboard = results["baseboard"]
        if results.get("os") is not None:
            snapshot.os = results["os"]
        return snapshot
