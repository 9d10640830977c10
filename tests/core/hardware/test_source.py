"""Tests for hardware sources.

``SystemHardwareSource`` is exercised against the real machine only for
shape (any field may legitimately be absent in CI); sub-query failure
handling is tested by patching individual queries.
"""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

import pcfingerprinter.core.hardware.source as source_module
from pcfingerprinter.core.hardware import (
    BaseboardInfo,
    BiosInfo,
    CpuInfo,
    DiskInfo,
    HardwareSnapshot,
    StaticHardwareSource,
    SystemHardwareSource,
)


class TestStaticHardwareSource:

    def test_returns_equal_snapshot(self, sample_snapshot) -> None:
        assert StaticHardwareSource(sample_snapshot).collect() == sample_snapshot

    def test_returns_independent_copies(self, sample_snapshot) -> None:
        source = StaticHardwareSource(sample_snapshot)
        first = source.collect()
        first.cpu.brand = "mutated"
        assert source.collect().cpu.brand == sample_snapshot.cpu.brand

    def test_from_dict(self, sample_snapshot) -> None:
        source = StaticHardwareSource.from_dict(sample_snapshot.to_dict())
        assert source.collect() == sample_snapshot


class TestSystemHardwareSource:

    def test_collect_produces_snapshot(self) -> None:
        snapshot = SystemHardwareSource().collect()
        assert isinstance(snapshot, HardwareSnapshot)
        assert snapshot.platform
        assert snapshot.timestamp and snapshot.timestamp.endswith("Z")

    def test_network_excludes_loopback(self) -> None:
        names = [n.iface for n in SystemHardwareSource().network()]
        assert "lo" not in names

    def test_memory_is_whole_gigabytes(self) -> None:
        assert isinstance(SystemHardwareSource().memory_gb(), int)

    def test_failing_query_leaves_fields_absent(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        source = SystemHardwareSource()

        def boom():
            raise RuntimeError("no access")

        monkeypatch.setattr(source, "cpu", boom)
        monkeypatch.setattr(source, "machine_id", boom)
        snapshot = source.collect()
        assert snapshot.cpu == CpuInfo()
        assert snapshot.machine_id is None
        assert snapshot.timestamp is not None

    def test_all_queries_failing_still_yields_snapshot(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        source = SystemHardwareSource()

        def boom():
            raise OSError("denied")

        for name in ("machine_id", "cpu", "bios", "baseboard", "disk",
                     "network", "memory_gb", "os_info"):
            monkeypatch.setattr(source, name, boom)
        snapshot = source.collect()
        assert snapshot.net == []
        assert snapshot.disk is None
        assert snapshot.memory_gb is None

    def test_memory_rounds_half_up(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            source_module.psutil, "virtual_memory",
            lambda: SimpleNamespace(total=int(6.5 * 1024 ** 3)),
        )
        assert SystemHardwareSource().memory_gb() == 7


WMI_ROWS = {
    "Win32_BIOS": {
        "Manufacturer": "American Megatrends Inc.",
        "SMBIOSBIOSVersion": "1.20",
        "ReleaseDate": "20230314000000.000000+000",
        "SerialNumber": "BIOS-SN-0001",
    },
    "Win32_BaseBoard": {
        "Manufacturer": "ASUSTeK COMPUTER INC.",
        "Product": "PRIME Z690-P",
        "SerialNumber": "Default string",
    },
    "Win32_DiskDrive": {
        "Manufacturer": "(Standard disk drives)",
        "Model": "Samsung SSD 980 PRO 1TB",
        "Size": "1000202273280",
        "SerialNumber": " S5GXNF0R123456 ",
    },
}


@pytest.fixture
def windows_source(monkeypatch: pytest.MonkeyPatch) -> SystemHardwareSource:
    """A system source on win32 whose WMI queries return fixed rows."""
    queried: list[str] = []

    def fake_wmi_first(wmi_class, properties):
        queried.append(wmi_class)
        row = WMI_ROWS.get(wmi_class, {})
        return {name: row.get(name) for name in properties} if row else {}

    monkeypatch.setattr(source_module, "_wmi_first", fake_wmi_first)
    source = SystemHardwareSource()
    source._platform = "win32"
    source.queried = queried
    return source


class TestWindowsQueries:

    def test_bios(self, windows_source: SystemHardwareSource) -> None:
        assert windows_source.bios() == BiosInfo(
            vendor="American Megatrends Inc.",
            version="1.20",
            release_date="20230314000000.000000+000",
            serial="BIOS-SN-0001",
        )
        assert windows_source.queried == ["Win32_BIOS"]

    def test_baseboard_placeholder_serial(self, windows_source: SystemHardwareSource) -> None:
        assert windows_source.baseboard() == BaseboardInfo(
            manufacturer="ASUSTeK COMPUTER INC.",
            model="PRIME Z690-P",
            serial=None,
        )

    def test_disk(self, windows_source: SystemHardwareSource) -> None:
        disk = windows_source.disk()
        assert disk.serial == "S5GXNF0R123456"
        assert disk.size == 1000202273280
        assert disk.name == "Samsung SSD 980 PRO 1TB"

    def test_no_disk(self, windows_source: SystemHardwareSource, monkeypatch) -> None:
        monkeypatch.setitem(WMI_ROWS, "Win32_DiskDrive", {})
        assert windows_source.disk() is None


SYSTEM_PROFILER_OUTPUT = {
    "SPNVMeDataType": [
        {
            "_name": "Generic SSD Controller",
            "_items": [
                {
                    "_name": "APPLE SSD AP0512Z",
                    "bsd_name": "disk0",
                    "device_model": "APPLE SSD AP0512Z",
                    "device_serial": "0ba0123456789abc",
                    "size_in_bytes": 500277790720,
                }
            ],
        }
    ],
    "SPSerialATADataType": [],
}


class TestMacDiskQuery:

    def test_disk_from_system_profiler(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[list[str]] = []

        def fake_run(args):
            calls.append(args)
            return json.dumps(SYSTEM_PROFILER_OUTPUT)

        monkeypatch.setattr(source_module, "_run_command", fake_run)
        source = SystemHardwareSource()
        source._platform = "darwin"
        assert source.disk() == DiskInfo(
            name="APPLE SSD AP0512Z",
            size=500277790720,
            serial="0ba0123456789abc",
        )
        assert calls[0][0] == "system_profiler"

    def test_no_drive_reported(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            source_module, "_run_command", lambda args: '{"SPNVMeDataType": []}'
        )
        source = SystemHardwareSource()
        source._platform = "darwin"
        assert source.disk() is None

    def test_command_unavailable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(source_module, "_run_command", lambda args: None)
        source = SystemHardwareSource()
        source._platform = "darwin"
        assert source.disk() is None
