"""Hardware snapshots, sources, and the fixed-field comparator.

Submodules:
    models      -- HardwareSnapshot and its descriptor dataclasses
    source      -- HardwareSource, SystemHardwareSource, StaticHardwareSource
    comparator  -- compare_hardware

All public names are re-exported here.
"""

from pcfingerprinter.core.hardware.comparator import (
    FIELD_LABELS,
    MISSING_SNAPSHOT,
    compare_hardware,
    render_value,
)
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
from pcfingerprinter.core.hardware.source import (
    HardwareSource,
    StaticHardwareSource,
    SystemHardwareSource,
)

__all__ = [
    "BaseboardInfo",
    "BiosInfo",
    "CpuInfo",
    "DiskInfo",
    "FIELD_LABELS",
    "HardwareSnapshot",
    "HardwareSource",
    "MISSING_SNAPSHOT",
    "NetworkInterface",
    "OsInfo",
    "StaticHardwareSource",
    "SystemHardwareSource",
    "compare_hardware",
    "render_value",
    "utc_isoformat",
]
