"""Fingerprint lifecycle orchestrator --- create, show, verify.

``FingerprintManager`` ties the canonical encoder, signer, envelope model,
hardware source and comparator together. It holds no state between calls
beyond its injected collaborators; the fingerprint file is the only thing
that persists.

Lifecycle::

    Uncreated --create--> Created (valid) | Created (invalid-signature)

``create`` always writes a fresh envelope (overwriting any previous one) or
fails. ``show`` and ``verify`` never write.

Data flow for ``create``:
    hardware source -> snapshot -> merged with buyer/meta/parts ->
    canonicalized -> signed -> envelope -> written with mode 0o640

Data flow for ``verify``:
    envelope read -> payload re-canonicalized -> signature checked ->
    stored snapshot compared with a fresh snapshot -> result
"""

from __future__ import annotations

import getpass
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from pcfingerprinter.core.canonical import canonicalize
from pcfingerprinter.core.envelope import (
    DEFAULT_WARRANTY_DAYS,
    BuyerInfo,
    Envelope,
    Payload,
    PayloadMeta,
)
from pcfingerprinter.core.hardware import (
    HardwareSource,
    SystemHardwareSource,
    compare_hardware,
    utc_isoformat,
)
from pcfingerprinter.core.signing import FileKeyStore, KeyStore
from pcfingerprinter.exceptions import FormatError
from pcfingerprinter.lifecycle.config import FingerprintConfig
from pcfingerprinter.lifecycle.models import CreateResult, VerificationResult

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _PartsLoader(yaml.SafeLoader):
    """SafeLoader that leaves dates and timestamps as plain strings."""


_PartsLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _current_user() -> str | None:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return None


def load_parts(parts_file: str | Path | None) -> tuple[Any, str | None]:
    """Read an optional parts list file.

    JSON by default; ``.yaml``/``.yml`` files are read with PyYAML, keeping
    dates as the strings written in the file. A
    missing or malformed file is not an error: the parts list degrades to
    None and the reason is returned (and logged) as a warning.

    Returns:
        ``(parts, warning)`` where ``warning`` is None on success.
    """
    if parts_file is None:
        return None, None
    path = Path(parts_file)
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in _YAML_SUFFIXES:
            parts = yaml.load(text, Loader=_PartsLoader)
        else:
            parts = json.loads(text)
        parts = canonicalize(parts)
    except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError, FormatError) as exc:
        logger.warning("Could not read partsFile %s: %s", path, exc)
        warning = f"Could not read partsFile {path}: {exc}"
        return None, warning
    return parts, None


class FingerprintManager:
    """Creates, shows, and verifies signed hardware fingerprints.

    Args:
        config: Paths and labels. Defaults to the platform defaults.
        hardware_source: Snapshot provider. Defaults to the live system.
        key_store: Key material loader. Defaults to a ``FileKeyStore``
            whose bundled public key comes from ``config``.

    Example::

        manager = FingerprintManager(FingerprintConfig.default())
        manager.create("Jane Doe", "2025-09-18", 90,
                       private_key_path=Path("private.pem"))
        result = manager.verify()
    """

    def __init__(
        self,
        config: FingerprintConfig | None = None,
        hardware_source: HardwareSource | None = None,
        key_store: KeyStore | None = None,
    ) -> None:
        self.config = config or FingerprintConfig.default()
        self.hardware_source = hardware_source or SystemHardwareSource()
        self.key_store = key_store or FileKeyStore(self.config.public_key_path)

    def _resolve_path(self, path: str | Path | None) -> Path:
        return Path(path) if path else self.config.fingerprint_path

    # -- create ---------------------------------------------------------------

    def build_payload(
        self,
        buyer: BuyerInfo,
        parts: Any = None,
    ) -> Payload:
        """Collect a snapshot and assemble the unsigned payload."""
        snapshot = self.hardware_source.collect()
        meta = PayloadMeta(
            app=self.config.app_name,
            created_at=utc_isoformat(),
            installer=_current_user(),
        )
        return Payload(meta=meta, buyer=buyer, hardware_snapshot=snapshot, parts=parts)

    def create(
        self,
        buyer_name: str,
        purchase_date: str | date,
        warranty_days: int = DEFAULT_WARRANTY_DAYS,
        parts_file: str | Path | None = None,
        *,
        private_key_path: str | Path,
        output_path: str | Path | None = None,
    ) -> CreateResult:
        """Create, sign and write a fingerprint.

        Raises:
            ValidationError: On an invalid buyer name, date, or warranty.
            KeyNotFoundError: If the private key file cannot be read.
            KeyMaterialError: If the private key cannot be parsed.
            SignatureError: If signing fails.
        """
        buyer = BuyerInfo.create(buyer_name, purchase_date, warranty_days)
        private_key = self.key_store.load_private_key(private_key_path)
        parts, parts_warning = load_parts(parts_file)

        payload = self.build_payload(buyer, parts)
        envelope = Envelope.seal(self.config.signer, payload, private_key)

        out_path = self._resolve_path(output_path)
        envelope.write(out_path, mode=self.config.file_mode)
        return CreateResult(path=out_path, envelope=envelope, parts_warning=parts_warning)

    # -- show -----------------------------------------------------------------

    def show(self, path: str | Path | None = None) -> Envelope:
        """Load the envelope without any cryptographic check.

        Raises:
            NotFoundError: If the file does not exist.
            FormatError: If the file is not a well-formed envelope.
        """
        return Envelope.read(self._resolve_path(path))

    # -- verify ---------------------------------------------------------------

    def verify(
        self,
        path: str | Path | None = None,
        public_key_path: str | Path | None = None,
    ) -> VerificationResult:
        """Verify the signature and compare the stored hardware with now.

        The hardware comparison runs even when the signature is invalid.

        Raises:
            NotFoundError: If the file does not exist.
            FormatError: If the file or its signature encoding is malformed.
            KeyNotFoundError: If no public key can be resolved.
            KeyMaterialError: If the public key cannot be parsed.
        """
        fp_path = self._resolve_path(path)
        envelope = Envelope.read(fp_path)
        public_key = self.key_store.load_public_key(public_key_path)

        signature_valid = envelope.verify(public_key)
        current = self.hardware_source.collect()
        mismatches = compare_hardware(envelope.hardware_snapshot, current)
        logger.info(
            "Verified %s: signature_valid=%s mismatches=%d",
            fp_path, signature_valid, len(mismatches),
        )
        return VerificationResult(
            path=fp_path,
            signature_valid=signature_valid,
            mismatches=mismatches,
            buyer=envelope.buyer,
        )
