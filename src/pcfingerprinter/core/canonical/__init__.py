"""Canonical JSON encoding for signed payloads.

Submodules:
    encoder  -- ``canonicalize`` and ``canonical_bytes``

All public names are re-exported here so that callers can write
``from pcfingerprinter.core.canonical import canonical_bytes``.
"""

from pcfingerprinter.core.canonical.encoder import (
    canonical_bytes,
    canonical_json,
    canonicalize,
)

__all__ = [
    "canonical_bytes",
    "canonical_json",
    "canonicalize",
]
