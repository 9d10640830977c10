"""Canonical encoder --- deterministic bytes for any JSON-like value.

Two values that are semantically equal (same keys and values, regardless of
the order in which mapping keys were inserted) always encode to the same
byte sequence. This byte sequence is the signing input for every envelope.

Algorithm:
    1. Recursively rebuild every mapping with its keys sorted by code point.
       Python compares ``str`` by code point, which matches the byte-wise
       order of the UTF-8 encoding.
    2. Leave sequence order untouched (order is significant in arrays).
    3. Pass scalars (None, bool, int, float, str) through unchanged.
    4. Serialize the finished structure in a single compact JSON pass.

The verifier never trusts the key order produced by a JSON parser: it always
re-runs ``canonical_bytes`` on the parsed payload before checking a signature.
"""

from __future__ import annotations

import json
import math
from typing import Any

from pcfingerprinter.exceptions import FormatError

_SEPARATORS = (",", ":")


def canonicalize(value: Any) -> Any:
    """Return a copy of ``value`` with every mapping's keys sorted.

    Args:
        value: None, bool, int, float, str, a list/tuple of such values, or a
            mapping of string keys to such values.

    Returns:
        An equivalent structure built from ``dict`` and ``list`` whose dict
        insertion order is sorted. Tuples become lists.

    Raises:
        FormatError: If a mapping key is not a string, a float is NaN or
            infinite, or a value has no JSON representation.
    """
    if value is None or isinstance(value, (bool, str, int)):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise FormatError(f"Cannot canonicalize non-finite number: {value!r}")
        return value
    if isinstance(value, (list, tuple)):
        return [canonicalize(item) for item in value]
    if isinstance(value, dict):
        for key in value:
            if not isinstance(key, str):
                raise FormatError(
                    f"Mapping keys must be strings, got {type(key).__name__}: {key!r}"
                )
        return {key: canonicalize(value[key]) for key in sorted(value)}
    raise FormatError(
        f"Value of type {type(value).__name__} has no canonical JSON form"
    )


def canonical_json(value: Any) -> str:
    """Encode ``value`` as canonical, compact JSON text.

    Non-ASCII characters are emitted literally rather than ``\\u`` escaped.
    """
    return json.dumps(
        canonicalize(value),
        separators=_SEPARATORS,
        ensure_ascii=False,
        allow_nan=False,
    )


def canonical_bytes(value: Any) -> bytes:
    """Encode ``value`` as the UTF-8 bytes of its canonical JSON text.

    This is the exact byte sequence that gets signed and verified.
    """
    return canonical_json(value).encode("utf-8")
