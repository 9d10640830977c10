"""Asymmetric signing and key material resolution.

Submodules:
    signer    -- ``sign_payload`` and ``verify_signature`` over canonical bytes
    keystore  -- ``KeyStore`` interface and the filesystem implementation

All public names are re-exported here.
"""

from pcfingerprinter.core.signing.keystore import (
    PUBLIC_KEY_ENV_VAR,
    FileKeyStore,
    KeyStore,
)
from pcfingerprinter.core.signing.signer import (
    sign_payload,
    verify_signature,
)

__all__ = [
    "FileKeyStore",
    "KeyStore",
    "PUBLIC_KEY_ENV_VAR",
    "sign_payload",
    "verify_signature",
]
