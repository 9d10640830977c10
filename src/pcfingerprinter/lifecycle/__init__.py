"""Fingerprint lifecycle: configuration, orchestration, and results.

Submodules:
    config   -- FingerprintConfig and platform default paths
    models   -- CreateResult, VerificationResult
    manager  -- FingerprintManager (create, show, verify)

All public names are re-exported here.
"""

from pcfingerprinter.lifecycle.config import (
    BUNDLED_PUBLIC_KEY,
    FINGERPRINT_FILENAME,
    FingerprintConfig,
    default_fingerprint_path,
)
from pcfingerprinter.lifecycle.models import CreateResult, VerificationResult
from pcfingerprinter.lifecycle.manager import FingerprintManager, load_parts

__all__ = [
    "BUNDLED_PUBLIC_KEY",
    "CreateResult",
    "FINGERPRINT_FILENAME",
    "FingerprintConfig",
    "FingerprintManager",
    "VerificationResult",
    "default_fingerprint_path",
    "load_parts",
]
