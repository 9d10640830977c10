"""PC Fingerprinter exception hierarchy.

All public exceptions inherit from FingerprintError, giving callers a single
base class to catch when they want to handle any fingerprint-specific failure
without swallowing unrelated errors.

An invalid signature is not an exception. It is a normal verification
outcome reported through ``VerificationResult.signature_valid``.
"""


class FingerprintError(Exception):
    """Base exception for all PC Fingerprinter errors."""


class FormatError(FingerprintError):
    """Raised when stored or supplied data is structurally malformed.

    Covers invalid JSON, envelopes missing required top-level fields,
    malformed base64 signatures, and values that cannot be canonicalized.
    """


class KeyMaterialError(FingerprintError):
    """Raised when key material is missing or cannot be parsed.

    Covers PEM blobs that are not valid keys, private keys supplied where
    a public key is expected, and unsupported key types.
    """


class KeyNotFoundError(KeyMaterialError):
    """Raised when no key file can be read from any configured location."""


class SignatureError(FingerprintError):
    """Raised when the cryptographic provider fails while signing."""


class ValidationError(FingerprintError):
    """Raised for invalid caller-supplied arguments.

    Covers unparsable purchase dates, negative warranty periods, and
    empty buyer or signer labels.
    """


class NotFoundError(FingerprintError):
    """Raised when a fingerprint file does not exist at the given path."""
