"""Hardware snapshot data models.

Pure data holders for a point-in-time capture of hardware-identifying
attributes. Every attribute is best-effort: any of them may be None when
the underlying provider cannot supply it (missing privileges, virtual
machines, unsupported platforms).

The on-disk JSON keys are camelCase (``machineId``, ``physicalCores``,
``memoryGB``...). ``to_dict``/``from_dict`` translate between the two and
``from_dict`` tolerates missing or mistyped sections, since a stored
snapshot may come from an older or foreign producer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utc_isoformat(moment: datetime | None = None) -> str:
    """Render a UTC instant as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Naive datetimes are taken to be UTC already.
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _section(data: Any, key: str) -> dict[str, Any]:
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, dict) else {}


@dataclass
class CpuInfo:
    """CPU descriptor. ``speed`` is the base clock in GHz."""

    manufacturer: str | None = None
    brand: str | None = None
    speed: float | None = None
    physical_cores: int | None = None
    cores: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "manufacturer": self.manufacturer,
            "brand": self.brand,
            "speed": self.speed,
            "physicalCores": self.physical_cores,
            "cores": self.cores,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CpuInfo:
        return cls(
            manufacturer=data.get("manufacturer"),
            brand=data.get("brand"),
            speed=data.get("speed"),
            physical_cores=data.get("physicalCores"),
            cores=data.get("cores"),
        )


@dataclass
class BiosInfo:
    """BIOS / firmware descriptor."""

    vendor: str | None = None
    version: str | None = None
    release_date: str | None = None
    serial: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "vendor": self.vendor,
            "version": self.version,
            "releaseDate": self.release_date,
            "serial": self.serial,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BiosInfo:
        return cls(
            vendor=data.get("vendor"),
            version=data.get("version"),
            release_date=data.get("releaseDate"),
            serial=data.get("serial"),
        )


@dataclass
class BaseboardInfo:
    """Motherboard descriptor."""

    manufacturer: str | None = None
    model: str | None = None
    serial: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "manufacturer": self.manufacturer,
            "model": self.model,
            "serial": self.serial,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BaseboardInfo:
        return cls(
            manufacturer=data.get("manufacturer"),
            model=data.get("model"),
            serial=data.get("serial"),
        )


@dataclass
class DiskInfo:
    """Primary disk descriptor. ``size`` is in bytes."""

    vendor: str | None = None
    name: str | None = None
    size: int | None = None
    serial: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "vendor": self.vendor,
            "name": self.name,
            "size": self.size,
            "serial": self.serial,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DiskInfo:
        return cls(
            vendor=data.get("vendor"),
            name=data.get("name"),
            size=data.get("size"),
            serial=data.get("serial"),
        )


@dataclass
class NetworkInterface:
    """A single non-loopback network interface."""

    iface: str | None = None
    mac: str | None = None
    ip4: str | None = None
    ip6: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "iface": self.iface,
            "mac": self.mac,
            "ip4": self.ip4,
            "ip6": self.ip6,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NetworkInterface:
        return cls(
            iface=data.get("iface"),
            mac=data.get("mac"),
            ip4=data.get("ip4"),
            ip6=data.get("ip6"),
        )


@dataclass
class OsInfo:
    """Operating system descriptor."""

    platform: str | None = None
    distro: str | None = None
    release: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "platform": self.platform,
            "distro": self.distro,
            "release": self.release,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OsInfo:
        return cls(
            platform=data.get("platform"),
            distro=data.get("distro"),
            release=data.get("release"),
        )


@dataclass
class HardwareSnapshot:
    """Point-in-time capture of hardware-identifying attributes.

    Attributes:
        machine_id: Stable OS-level machine identifier.
        platform: Python-style platform name ("linux", "win32", "darwin").
        arch: Machine architecture (e.g., "x86_64").
        hostname: Network host name. Volatile, never compared.
        cpu: CPU descriptor.
        bios: BIOS descriptor.
        baseboard: Motherboard descriptor.
        disk: Primary disk descriptor, or None when no disk was found.
        net: Non-internal network interfaces, in provider order.
        memory_gb: Total memory rounded to whole gigabytes.
        os: Operating system descriptor.
        timestamp: Capture time, ISO-8601 UTC.
    """

    machine_id: str | None = None
    platform: str | None = None
    arch: str | None = None
    hostname: str | None = None
    cpu: CpuInfo = field(default_factory=CpuInfo)
    bios: BiosInfo = field(default_factory=BiosInfo)
    baseboard: BaseboardInfo = field(default_factory=BaseboardInfo)
    disk: DiskInfo | None = None
    net: list[NetworkInterface] = field(default_factory=list)
    memory_gb: int | None = None
    os: OsInfo = field(default_factory=OsInfo)
    timestamp: str | None = None

    @property
    def macs(self) -> list[str]:
        """Normalized (trimmed, lower-cased), sorted MAC addresses.

        Interfaces without a MAC (VPN and tunnel devices) are skipped.
        """
        return sorted(
            n.mac.strip().lower() for n in self.net if n.mac and n.mac.strip()
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "machineId": self.machine_id,
            "platform": self.platform,
            "arch": self.arch,
            "hostname": self.hostname,
            "cpu": self.cpu.to_dict(),
            "bios": self.bios.to_dict(),
            "baseboard": self.baseboard.to_dict(),
            "disk": self.disk.to_dict() if self.disk is not None else None,
            "net": [n.to_dict() for n in self.net],
            "memoryGB": self.memory_gb,
            "os": self.os.to_dict(),
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HardwareSnapshot:
        """Build a snapshot from its stored JSON form.

        Missing sections become empty descriptors; non-object network
        entries are skipped.
        """
        if not isinstance(data, dict):
            data = {}
        disk = data.get("disk")
        net = data.get("net")
        return cls(
            machine_id=data.get("machineId"),
            platform=data.get("platform"),
            arch=data.get("arch"),
            hostname=data.get("hostname"),
            cpu=CpuInfo.from_dict(_section(data, "cpu")),
            bios=BiosInfo.from_dict(_section(data, "bios")),
            baseboard=BaseboardInfo.from_dict(_section(data, "baseboard")),
            disk=DiskInfo.from_dict(disk) if isinstance(disk, dict) else None,
            net=[
                NetworkInterface.from_dict(n)
                for n in (net if isinstance(net, list) else [])
                if isinstance(n, dict)
            ],
            memory_gb=data.get("memoryGB"),
            os=OsInfo.from_dict(_section(data, "os")),
            timestamp=data.get("timestamp"),
        )
