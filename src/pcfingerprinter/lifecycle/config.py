"""Lifecycle configuration --- explicit paths and labels, no ambient globals.

``FingerprintConfig`` carries everything that used to be process-wide:
where the fingerprint lives, which public key verifies it, and how the
signer is labelled. The orchestrator receives it as a value, so tests can
inject temporary paths.

Sources, lowest precedence first:
    1. Platform defaults (``FingerprintConfig.default``).
    2. A YAML file (``FingerprintConfig.with_yaml``).
    3. Environment variables (``FingerprintConfig.with_environment``).
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from pcfingerprinter import APP_NAME
from pcfingerprinter.core.envelope import DEFAULT_FILE_MODE
from pcfingerprinter.exceptions import FormatError, NotFoundError

FINGERPRINT_FILENAME = "fingerprint.json"
PATH_ENV_VAR = "PC_FINGERPRINTER_PATH"
SIGNER_ENV_VAR = "PC_FINGERPRINTER_SIGNER"

# Public key shipped next to the installed package.
BUNDLED_PUBLIC_KEY = Path(__file__).resolve().parent.parent / "public.pem"

_YAML_KEYS = {"app_name", "signer", "fingerprint_path", "public_key_path"}


def default_fingerprint_path(
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
    app_name: str = APP_NAME,
) -> Path:
    """Return the machine-wide fingerprint location for ``platform``.

    - Windows: ``%PROGRAMDATA%\\<app>\\fingerprint.json``
    - macOS:   ``/Library/Application Support/<app>/fingerprint.json``
    - other:   ``/var/lib/<app>/fingerprint.json``
    """
    platform = platform or sys.platform
    environ = os.environ if environ is None else environ
    if platform == "win32":
        base = environ.get("PROGRAMDATA") or "C:\\ProgramData"
        return Path(base) / app_name / FINGERPRINT_FILENAME
    if platform == "darwin":
        return Path("/Library") / "Application Support" / app_name / FINGERPRINT_FILENAME
    return Path("/var") / "lib" / app_name / FINGERPRINT_FILENAME


@dataclass(frozen=True)
class FingerprintConfig:
    """Paths and labels used by the fingerprint lifecycle.

    Attributes:
        app_name: Application name written to ``meta.app``.
        signer: Label stored in the envelope's ``signer`` field.
        fingerprint_path: Default location for create/show/verify.
        public_key_path: Bundled fallback public key for verify.
        file_mode: Permission bits for written fingerprints.
    """

    app_name: str
    signer: str
    fingerprint_path: Path
    public_key_path: Path | None = None
    file_mode: int = DEFAULT_FILE_MODE

    @classmethod
    def default(cls, platform: str | None = None) -> FingerprintConfig:
        return cls(
            app_name=APP_NAME,
            signer=APP_NAME,
            fingerprint_path=default_fingerprint_path(platform),
            public_key_path=BUNDLED_PUBLIC_KEY,
        )

    def with_overrides(self, **changes: Any) -> FingerprintConfig:
        """Return a copy with the non-None ``changes`` applied."""
        changes = {k: v for k, v in changes.items() if v is not None}
        for key in ("fingerprint_path", "public_key_path"):
            if key in changes:
                changes[key] = Path(changes[key]).expanduser()
        return replace(self, **changes)

    def with_environment(
        self, environ: Mapping[str, str] | None = None
    ) -> FingerprintConfig:
        """Apply ``PC_FINGERPRINTER_PATH`` and ``PC_FINGERPRINTER_SIGNER``.

        ``PC_FINGERPRINTER_PUBKEY`` is resolved by the key store itself.
        """
        environ = os.environ if environ is None else environ
        return self.with_overrides(
            fingerprint_path=environ.get(PATH_ENV_VAR) or None,
            signer=environ.get(SIGNER_ENV_VAR) or None,
        )

    def with_yaml(self, path: Path) -> FingerprintConfig:
        """Apply overrides from a YAML mapping file.

        Recognized keys: ``app_name``, ``signer``, ``fingerprint_path``,
        ``public_key_path``. Unknown keys are rejected.

        Raises:
            NotFoundError: If the file does not exist.
            FormatError: If the file is not a YAML mapping of known keys.
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise NotFoundError(f"Config file not found at {path}") from exc
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise FormatError(f"Config file {path} is not valid YAML: {exc}") from exc
        if data is None:
            return self
        if not isinstance(data, dict):
            raise FormatError(f"Config file {path} must contain a mapping")
        unknown = sorted(set(data) - _YAML_KEYS)
        if unknown:
            raise FormatError(
                f"Unknown config key(s) in {path}: {', '.join(map(str, unknown))}"
            )
        return self.with_overrides(**{k: str(v) for k, v in data.items() if v is not None})
