"""Key material resolution.

``KeyStore`` is the capability the lifecycle orchestrator uses to obtain PEM
key material. ``FileKeyStore`` is the production implementation: private
keys come from an explicit path only, public keys resolve in order from

1. an explicit path passed by the caller,
2. the path named by the ``PC_FINGERPRINTER_PUBKEY`` environment variable,
3. the bundled default path from the configuration.

Key generation and secure storage are out of scope; the store only reads.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

from pcfingerprinter.exceptions import KeyNotFoundError

logger = logging.getLogger(__name__)

PUBLIC_KEY_ENV_VAR = "PC_FINGERPRINTER_PUBKEY"


class KeyStore(ABC):
    """Source of PEM-encoded key material."""

    @abstractmethod
    def load_private_key(self, path: str | Path) -> bytes:
        """Return the PEM private key stored at ``path``.

        Raises:
            KeyNotFoundError: If the key cannot be read.
        """

    @abstractmethod
    def load_public_key(self, path: str | Path | None = None) -> bytes:
        """Return a PEM public key, resolving defaults when ``path`` is None.

        Raises:
            KeyNotFoundError: If no public key can be resolved.
        """


class FileKeyStore(KeyStore):
    """Reads keys from the local filesystem.

    Args:
        default_public_key: Bundled fallback public key path, or None.
        environ: Environment mapping consulted for ``PC_FINGERPRINTER_PUBKEY``.
            Defaults to ``os.environ``.
    """

    def __init__(
        self,
        default_public_key: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._default_public_key = default_public_key
        self._environ = os.environ if environ is None else environ

    def _read(self, path: Path, kind: str) -> bytes:
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise KeyNotFoundError(
                f"{kind} key not readable at {path}: {exc.strerror or exc}"
            ) from exc
        logger.debug("Loaded %s key from %s", kind.lower(), path)
        return data

    def load_private_key(self, path: str | Path) -> bytes:
        return self._read(Path(path), "Private")

    def public_key_candidates(self, path: str | Path | None = None) -> list[Path]:
        """Return the ordered public key locations that would be tried."""
        if path:
            return [Path(path)]
        candidates: list[Path] = []
        env_path = self._environ.get(PUBLIC_KEY_ENV_VAR)
        if env_path:
            candidates.append(Path(env_path))
        if self._default_public_key is not None:
            candidates.append(self._default_public_key)
        return candidates

    def load_public_key(self, path: str | Path | None = None) -> bytes:
        candidates = self.public_key_candidates(path)
        if not candidates:
            raise KeyNotFoundError("No public key path configured")
        if path:
            return self._read(candidates[0], "Public")
        for candidate in candidates:
            if candidate.is_file():
                return self._read(candidate, "Public")
        tried = ", ".join(str(c) for c in candidates)
        raise KeyNotFoundError(f"Missing public key (tried: {tried})")
