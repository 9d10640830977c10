"""Envelope core class --- the signed, persisted fingerprint container.

The ``Envelope`` is the only artifact this tool persists. It provides:

- **Assembly:** ``seal`` canonicalizes a payload and signs it.
- **Signing input:** ``signed_bytes`` recomputes the canonical bytes from
  the stored payload, never trusting the key order of a JSON parser.
- **Typed views:** ``buyer``, ``meta`` and ``hardware_snapshot``.
- **Serialization:** ``to_dict``, ``to_json`` and ``write``.

An envelope is immutable once created. ``show`` and ``verify`` only read.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pcfingerprinter.core.canonical import canonical_bytes, canonicalize
from pcfingerprinter.core.envelope.models import BuyerInfo, Payload, PayloadMeta
from pcfingerprinter.core.hardware import HardwareSnapshot
from pcfingerprinter.core.signing import sign_payload, verify_signature
from pcfingerprinter.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Owner and group read-write, no world access.
DEFAULT_FILE_MODE: int = 0o640

REQUIRED_FIELDS: tuple[str, ...] = ("signer", "payload", "signature")


@dataclass(frozen=True)
class Envelope:
    """Signed fingerprint: signer label, canonical payload, base64 signature.

    Example::

        envelope = Envelope.seal("Acme PCs", payload, private_key_pem)
        envelope.write(Path("/var/lib/PC-Fingerprinter/fingerprint.json"))
    """

    signer: str
    payload: dict[str, Any]
    signature: str

    def __post_init__(self) -> None:
        if not isinstance(self.signer, str) or not self.signer.strip():
            raise ValidationError("Envelope signer label must not be empty")

    # -- Assembly -----------------------------------------------------------

    @classmethod
    def seal(
        cls,
        signer: str,
        payload: Payload | dict[str, Any],
        private_key_pem: str | bytes,
    ) -> Envelope:
        """Canonicalize ``payload``, sign it, and wrap it in an envelope.

        Raises:
            KeyMaterialError: If the private key cannot be parsed.
            SignatureError: If signing fails.
            FormatError: If the payload has no canonical JSON form.
        """
        raw = payload.to_dict() if isinstance(payload, Payload) else payload
        canonical = canonicalize(raw)
        signature = sign_payload(private_key_pem, canonical_bytes(canonical))
        return cls(signer=signer, payload=canonical, signature=signature)

    # -- Signing input and verification -------------------------------------

    def signed_bytes(self) -> bytes:
        """Return the canonical bytes the signature is expected to cover."""
        return canonical_bytes(self.payload)

    def verify(self, public_key_pem: str | bytes) -> bool:
        """Check the stored signature against ``public_key_pem``.

        Raises:
            KeyMaterialError: If the public key is unusable.
            FormatError: If the stored signature is not valid base64.
        """
        return verify_signature(public_key_pem, self.signed_bytes(), self.signature)

    # -- Typed views ----------------------------------------------------------

    @property
    def meta(self) -> PayloadMeta:
        meta = self.payload.get("meta")
        return PayloadMeta.from_dict(meta if isinstance(meta, dict) else {})

    @property
    def buyer(self) -> BuyerInfo:
        return BuyerInfo.from_dict(self.payload.get("buyer"))

    @property
    def parts(self) -> Any:
        return self.payload.get("parts")

    @property
    def hardware_snapshot(self) -> HardwareSnapshot | None:
        """The stored snapshot, or None if the payload carries none."""
        snapshot = self.payload.get("hardwareSnapshot")
        if not isinstance(snapshot, dict):
            return None
        return HardwareSnapshot.from_dict(snapshot)

    # -- Serialization ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "signer": self.signer,
            "payload": self.payload,
            "signature": self.signature,
        }

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize to JSON text. The payload keeps its canonical order."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def write(self, path: Path, mode: int = DEFAULT_FILE_MODE) -> None:
        """Write the envelope to ``path``, replacing any previous file.

        Creates parent directories if they do not exist and applies
        ``mode`` to the file regardless of the process umask.

        Args:
            path: Destination file.
            mode: Permission bits for the written file.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(self.to_json())
            fh.write("\n")
        os.chmod(path, mode)
        logger.info("Fingerprint written to %s", path)
