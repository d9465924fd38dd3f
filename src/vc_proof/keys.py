"""
Public key and signature encodings.

Converts verification method key material (JWK or multibase) into
``cryptography`` public key objects.
"""

from __future__ import annotations

import base64
import binascii

import base58
from cryptography.hazmat.primitives.asymmetric import ec, ed25519

from vc_proof.did import Ed25519VerificationMethod, JsonWebKey
from vc_proof.exceptions import InvalidPublicKeyFormatError

# Multicodec prefix for an Ed25519 public key
ED25519_PUB_HEADER = bytes([0xED, 0x01])
ED25519_KEY_LENGTH = 32

_EC_CURVES: dict[str, ec.EllipticCurve] = {
    "P-256": ec.SECP256R1(),
    "secp256k1": ec.SECP256K1(),
    "P-384": ec.SECP384R1(),
}


def base64url_decode(data: str) -> bytes:
    """Decode base64url without padding.

    Raises:
        ValueError: If the input is not valid base64url.
    """
    if not isinstance(data, str):
        raise ValueError(f"Expected a base64url string, got {type(data).__name__}")
    padding = 4 - (len(data) % 4)
    if padding != 4:
        data += "=" * padding
    try:
        return base64.urlsafe_b64decode(data.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid base64url data: {e}") from e


def base64url_encode(data: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def multibase_decode(value: str) -> bytes:
    """Decode a multibase value. Only base58btc ('z' prefix) is supported.

    Raises:
        ValueError: If the prefix is unsupported or the payload is not base58.
    """
    if not isinstance(value, str) or not value:
        raise ValueError("Multibase value must be a non-empty string")
    if not value.startswith("z"):
        raise ValueError(f"Unsupported multibase prefix: {value[0]!r}")
    return base58.b58decode(value[1:])


def ed25519_key_from_multibase(method: Ed25519VerificationMethod) -> ed25519.Ed25519PublicKey:
    """Load the Ed25519 key of an Ed25519VerificationKey2020 method.

    Accepts the key with or without its multicodec header.

    Raises:
        InvalidPublicKeyFormatError: If the key material is malformed.
    """
    try:
        decoded = multibase_decode(method.public_key_multibase)
    except ValueError as e:
        raise InvalidPublicKeyFormatError(
            f"Invalid publicKeyMultibase in {method.id}: {e}"
        ) from e

    if len(decoded) == len(ED25519_PUB_HEADER) + ED25519_KEY_LENGTH:
        if decoded[: len(ED25519_PUB_HEADER)] != ED25519_PUB_HEADER:
            raise InvalidPublicKeyFormatError(
                f"publicKeyMultibase in {method.id} is not an Ed25519 key"
            )
        decoded = decoded[len(ED25519_PUB_HEADER):]
    if len(decoded) != ED25519_KEY_LENGTH:
        raise InvalidPublicKeyFormatError(
            f"Ed25519 key in {method.id} has {len(decoded)} bytes, expected {ED25519_KEY_LENGTH}"
        )
    return ed25519.Ed25519PublicKey.from_public_bytes(decoded)


def jwk_to_public_key(
    jwk: JsonWebKey,
) -> ed25519.Ed25519PublicKey | ec.EllipticCurvePublicKey:
    """Convert a JWK to a public key object.

    Supports OKP/Ed25519 and EC keys on P-256, secp256k1 and P-384.

    Raises:
        InvalidPublicKeyFormatError: If the key type or coordinates are invalid.
    """
    if jwk.kty == "OKP":
        if jwk.crv != "Ed25519":
            raise InvalidPublicKeyFormatError(f"Unsupported OKP curve: {jwk.crv!r}")
        try:
            x_bytes = base64url_decode(jwk.x)
        except ValueError as e:
            raise InvalidPublicKeyFormatError(f"Invalid JWK x coordinate: {e}") from e
        if len(x_bytes) != ED25519_KEY_LENGTH:
            raise InvalidPublicKeyFormatError(
                f"Ed25519 JWK has {len(x_bytes)} bytes, expected {ED25519_KEY_LENGTH}"
            )
        return ed25519.Ed25519PublicKey.from_public_bytes(x_bytes)

    if jwk.kty == "EC":
        curve = _EC_CURVES.get(jwk.crv)
        if curve is None:
            raise InvalidPublicKeyFormatError(f"Unsupported EC curve: {jwk.crv!r}")
        if not jwk.x or not jwk.y:
            raise InvalidPublicKeyFormatError("EC JWK requires both x and y")
        try:
            x = int.from_bytes(base64url_decode(jwk.x), byteorder="big")
            y = int.from_bytes(base64url_decode(jwk.y), byteorder="big")
            # Raises ValueError when the point is not on the curve
            return ec.EllipticCurvePublicNumbers(x, y, curve).public_key()
        except ValueError as e:
            raise InvalidPublicKeyFormatError(f"Invalid EC JWK: {e}") from e

    raise InvalidPublicKeyFormatError(f"Unsupported JWK key type: {jwk.kty!r}")
