"""Hardware comparator --- fixed-field diff of two snapshots.

This is deliberately not a generic deep diff. Only fields chosen for their
stability participate, in a fixed order so that output is reproducible:

    machineId, cpu.brand, cpu.physicalCores, bios.serial,
    baseboard.serial, disk.serial, net.macs, memoryGB

Volatile fields (timestamps, hostnames, IP addresses, clock speed) never
participate, so they cannot produce false positives.

Absence policy:
    - both sides absent: unknown, not conflicting; nothing is reported.
    - exactly one side absent, or the string forms differ: one entry.

A serial that disappears is reported exactly like a serial that changed;
there is no separate "newly absent" category.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pcfingerprinter.core.hardware.models import HardwareSnapshot

MISSING_SNAPSHOT = "Missing snapshot or current data"

# (label, accessor) pairs, in reporting order.
_FIELDS: list[tuple[str, Callable[[HardwareSnapshot], Any]]] = [
    ("machineId", lambda s: s.machine_id),
    ("cpu.brand", lambda s: s.cpu.brand),
    ("cpu.physicalCores", lambda s: s.cpu.physical_cores),
    ("bios.serial", lambda s: s.bios.serial),
    ("baseboard.serial", lambda s: s.baseboard.serial),
    ("disk.serial", lambda s: s.disk.serial if s.disk is not None else None),
    ("net.macs", lambda s: ",".join(s.macs) or None),
    ("memoryGB", lambda s: s.memory_gb),
]

FIELD_LABELS: tuple[str, ...] = tuple(label for label, _ in _FIELDS)


def render_value(value: Any) -> str:
    """Render a field value the way it is compared and reported.

    None renders as ``null``, booleans as ``true``/``false``, and integral
    floats without a fractional part (so ``8`` and ``8.0`` compare equal).
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_snapshot(value: HardwareSnapshot | dict[str, Any] | None) -> HardwareSnapshot | None:
    if value is None or isinstance(value, HardwareSnapshot):
        return value
    if isinstance(value, dict):
        return HardwareSnapshot.from_dict(value)
    return None


def compare_hardware(
    saved: HardwareSnapshot | dict[str, Any] | None,
    current: HardwareSnapshot | dict[str, Any] | None,
) -> list[str]:
    """Compare a saved snapshot with a freshly collected one.

    Args:
        saved: Snapshot stored in the fingerprint (typed or raw JSON dict).
        current: Snapshot collected now (typed or raw JSON dict).

    Returns:
        Human-readable mismatch descriptions in checklist order, each of
        the form ``"<field>: saved=<a> current=<b>"``. Empty when nothing
        differs. If either snapshot is missing entirely, the single entry
        ``MISSING_SNAPSHOT`` is returned.
    """
    saved_snap = _as_snapshot(saved)
    current_snap = _as_snapshot(current)
    if saved_snap is None or current_snap is None:
        return [MISSING_SNAPSHOT]

    mismatches: list[str] = []
    for label, accessor in _FIELDS:
        a = accessor(saved_snap)
        b = accessor(current_snap)
        if a is None and b is None:
            continue
        if a is None or b is None or render_value(a) != render_value(b):
            mismatches.append(
                f"{label}: saved={render_value(a)} current={render_value(b)}"
            )
    return mismatches
