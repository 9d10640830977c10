"""Envelope operations --- deserialization from dicts, JSON text, and disk.

Attached to the ``Envelope`` class at import time (in ``__init__.py``) so
callers see one API: ``Envelope.from_dict``, ``Envelope.from_json`` and
``Envelope.read``.

Deserialization is lenient about the payload (any JSON object, in any key
order, is accepted; canonicalization is reapplied before verification) and
strict about the envelope shape: ``signer``, ``payload`` and ``signature``
must all be present.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pcfingerprinter.core.envelope.envelope import REQUIRED_FIELDS
from pcfingerprinter.exceptions import FormatError, NotFoundError


def _from_dict(cls: type, data: Any) -> Any:
    """Build an envelope from parsed JSON.

    Raises:
        FormatError: If ``data`` is not an object, a required field is
            absent, the signer is not a non-empty string, or the payload is
            not an object.
    """
    if not isinstance(data, dict):
        raise FormatError(
            f"Envelope must be a JSON object, got {type(data).__name__}"
        )
    missing = [name for name in REQUIRED_FIELDS if name not in data]
    if missing:
        raise FormatError(
            f"Envelope is missing required field(s): {', '.join(missing)}"
        )
    signer = data["signer"]
    if not isinstance(signer, str) or not signer.strip():
        raise FormatError("Envelope signer must be a non-empty string")
    payload = data["payload"]
    if not isinstance(payload, dict):
        raise FormatError(
            f"Envelope payload must be a JSON object, got {type(payload).__name__}"
        )
    return cls(signer=signer, payload=payload, signature=data["signature"])


def _from_json(cls: type, text: str) -> Any:
    """Deserialize from JSON text.

    Raises:
        FormatError: If the text is not valid JSON or not an envelope.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FormatError(f"Fingerprint is not valid JSON: {exc}") from exc
    return cls.from_dict(data)


def _read(cls: type, path: Path) -> Any:
    """Read an envelope from disk.

    Raises:
        NotFoundError: If no file exists at ``path``.
        FormatError: If the file cannot be decoded or is not an envelope.
    """
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(f"Fingerprint not found at {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(f"Fingerprint at {path} is not UTF-8 text") from exc
    except FileNotFoundError as exc:
        raise NotFoundError(f"Fingerprint not found at {path}") from exc
    return cls.from_json(text)
