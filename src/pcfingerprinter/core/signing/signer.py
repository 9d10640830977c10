"""Signer / verifier --- SHA-256 digest signatures over canonical bytes.

RSA with PKCS#1 v1.5 padding is the reference scheme. ECDSA (NIST curves)
and Ed25519 keys are accepted too; the scheme is chosen from the key type,
so the same envelope format carries any of them.

Both functions are pure: they read nothing from disk and keep no state.
Key material is passed in as PEM text or bytes.
"""

from __future__ import annotations

import base64
import binascii

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding, rsa

from pcfingerprinter.exceptions import FormatError, KeyMaterialError, SignatureError


def _as_bytes(pem: str | bytes) -> bytes:
    if isinstance(pem, str):
        return pem.encode("utf-8")
    return pem


def _load_private_key(pem: str | bytes):
    if not pem:
        raise KeyMaterialError("Private key material is empty")
    try:
        key = serialization.load_pem_private_key(_as_bytes(pem), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyMaterialError(f"Could not parse private key: {exc}") from exc
    if not isinstance(
        key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey, ed25519.Ed25519PrivateKey)
    ):
        raise KeyMaterialError(
            f"Unsupported private key type: {type(key).__name__}"
        )
    return key


def _load_public_key(pem: str | bytes):
    if not pem:
        raise KeyMaterialError("Public key material is empty")
    try:
        key = serialization.load_pem_public_key(_as_bytes(pem))
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyMaterialError(f"Could not parse public key: {exc}") from exc
    if not isinstance(
        key, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey, ed25519.Ed25519PublicKey)
    ):
        raise KeyMaterialError(
            f"Unsupported public key type: {type(key).__name__}"
        )
    return key


def sign_payload(private_key_pem: str | bytes, data: bytes) -> str:
    """Sign ``data`` and return the signature as base64 text.

    Args:
        private_key_pem: Unencrypted PEM private key (PKCS#1, PKCS#8 or SEC1).
        data: Canonical payload bytes from ``canonical_bytes``.

    Returns:
        Base64 (standard alphabet, padded) encoding of the raw signature.

    Raises:
        KeyMaterialError: If the key cannot be parsed or is of an
            unsupported type.
        SignatureError: If the cryptographic backend fails while signing.
    """
    key = _load_private_key(private_key_pem)
    try:
        if isinstance(key, rsa.RSAPrivateKey):
            raw = key.sign(data, padding.PKCS1v15(), hashes.SHA256())
        elif isinstance(key, ec.EllipticCurvePrivateKey):
            raw = key.sign(data, ec.ECDSA(hashes.SHA256()))
        else:
            raw = key.sign(data)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise SignatureError(f"Signing failed: {exc}") from exc
    return base64.b64encode(raw).decode("ascii")


def decode_signature(signature_b64: str) -> bytes:
    """Decode a stored base64 signature strictly.

    Raises:
        FormatError: If the value is not a string or not valid base64.
    """
    if not isinstance(signature_b64, str):
        raise FormatError(
            f"Signature must be a base64 string, got {type(signature_b64).__name__}"
        )
    try:
        return base64.b64decode(signature_b64.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FormatError(f"Signature is not valid base64: {exc}") from exc


def verify_signature(
    public_key_pem: str | bytes, data: bytes, signature_b64: str
) -> bool:
    """Check a base64 signature over ``data`` against a public key.

    Args:
        public_key_pem: PEM public key (SubjectPublicKeyInfo or PKCS#1).
        data: Canonical payload bytes recomputed from the stored payload.
        signature_b64: Signature as stored in the envelope.

    Returns:
        True if the signature matches. False for a well-formed signature
        that does not match the data or key.

    Raises:
        KeyMaterialError: If the public key is missing or unparsable.
        FormatError: If the signature is not valid base64.
    """
    key = _load_public_key(public_key_pem)
    raw = decode_signature(signature_b64)
    try:
        if isinstance(key, rsa.RSAPublicKey):
            key.verify(raw, data, padding.PKCS1v15(), hashes.SHA256())
        elif isinstance(key, ec.EllipticCurvePublicKey):
            key.verify(raw, data, ec.ECDSA(hashes.SHA256()))
        else:
            key.verify(raw, data)
    except InvalidSignature:
        return False
    return True
