"""
JsonWebSignature2020 proofs.

The proof's ``jws`` field is a compact JWS whose payload is the document
hash. The payload is normally detached (``header..signature``). With the
RFC 7797 ``b64: false`` header the hash bytes are signed as-is, otherwise
their base64url encoding is signed.

Supported algorithms:
- EdDSA (Ed25519)
- ES256 (P-256), ES256K (secp256k1), ES384 (P-384)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature

from vc_proof.canonical import HashedLinkedData
from vc_proof.did import Ed25519VerificationMethod, JWKVerificationMethod, VerificationMethod
from vc_proof.exceptions import (
    InvalidPublicKeyFormatError,
    SignatureParseError,
    SignatureVerificationFailedError,
)
from vc_proof.keys import (
    base64url_decode,
    base64url_encode,
    ed25519_key_from_multibase,
    jwk_to_public_key,
)
from vc_proof.model import Proof, SignatureType
from vc_proof.suites.base import ProofVerifier

logger = logging.getLogger(__name__)

_ECDSA_ALGORITHMS: dict[str, tuple[type[ec.EllipticCurve], hashes.HashAlgorithm]] = {
    "ES256": (ec.SECP256R1, hashes.SHA256()),
    "ES256K": (ec.SECP256K1, hashes.SHA256()),
    "ES384": (ec.SECP384R1, hashes.SHA384()),
}


@dataclass(frozen=True)
class CompactJWS:
    """A parsed compact JWS (protected.payload.signature)."""

    protected: str
    header: dict[str, Any]
    payload: str
    signature: bytes

    @property
    def algorithm(self) -> str:
        return self.header["alg"]

    @property
    def b64(self) -> bool:
        """False when the payload is signed unencoded (RFC 7797)."""
        return self.header.get("b64", True) is not False

    @classmethod
    def parse(cls, value: Any) -> CompactJWS:
        """Parse a compact JWS string.

        Raises:
            SignatureParseError: If the value is not a well-formed JWS.
        """
        if not isinstance(value, str) or not value:
            raise SignatureParseError("Proof has no jws")

        parts = value.split(".")
        if len(parts) != 3:
            raise SignatureParseError(
                f"JWS must have 3 parts separated by '.', got {len(parts)}"
            )
        protected, payload, signature_b64 = parts

        try:
            header = json.loads(base64url_decode(protected).decode("utf-8"))
        except (ValueError, UnicodeDecodeError) as e:
            raise SignatureParseError(f"Invalid JWS header: {e}") from e
        if not isinstance(header, dict):
            raise SignatureParseError("JWS header must be a JSON object")
        if not isinstance(header.get("alg"), str) or not header["alg"]:
            raise SignatureParseError("JWS header has no alg")

        b64 = header.get("b64", True)
        if not isinstance(b64, bool):
            raise SignatureParseError("JWS b64 header parameter must be a boolean")
        crit = header.get("crit", [])
        if not isinstance(crit, list):
            raise SignatureParseError("JWS crit header parameter must be a list")
        if b64 is False and "b64" not in crit:
            # RFC 7797 section 6
            raise SignatureParseError("JWS with b64=false must list b64 in crit")

        try:
            signature = base64url_decode(signature_b64)
        except ValueError as e:
            raise SignatureParseError(f"Invalid JWS signature: {e}") from e
        if not signature:
            raise SignatureParseError("JWS signature is empty")

        return cls(protected=protected, header=header, payload=payload, signature=signature)


class JWSProofVerifier(ProofVerifier):
    """Verifier for JsonWebSignature2020 proofs."""

    SIGNATURE_TYPE = SignatureType.JWS

    def _load_public_key(
        self, method: VerificationMethod
    ) -> ed25519.Ed25519PublicKey | ec.EllipticCurvePublicKey:
        if isinstance(method, JWKVerificationMethod) and method.public_key_jwk is not None:
            return jwk_to_public_key(method.public_key_jwk)
        if isinstance(method, Ed25519VerificationMethod):
            return ed25519_key_from_multibase(method)
        raise InvalidPublicKeyFormatError(
            f"Verification method {method.id} has no usable key material"
        )

    def _decode_signature(self, proof: Proof) -> CompactJWS:
        return CompactJWS.parse(proof.get(Proof.JWS))

    def _verify_signature(
        self,
        public_key: ed25519.Ed25519PublicKey | ec.EllipticCurvePublicKey,
        signature: CompactJWS,
        hashed: HashedLinkedData,
    ) -> bool:
        if signature.b64:
            payload = base64url_encode(hashed.value).encode("ascii")
        else:
            payload = hashed.value

        # An attached payload must be the hash we computed
        if signature.payload and signature.payload.encode("utf-8") != payload:
            logger.debug("JWS payload does not match the document hash")
            return False

        signing_input = signature.protected.encode("ascii") + b"." + payload
        try:
            self._verify_algorithm(public_key, signature, signing_input)
        except InvalidSignature:
            return False
        except (UnsupportedAlgorithm, TypeError, ValueError) as e:
            raise SignatureVerificationFailedError(f"JWS verification error: {e}") from e
        return True

    def _verify_algorithm(
        self,
        public_key: ed25519.Ed25519PublicKey | ec.EllipticCurvePublicKey,
        signature: CompactJWS,
        signing_input: bytes,
    ) -> None:
        """Run the check for the header's alg.

        Raises:
            InvalidSignature: If the signature does not match.
            SignatureVerificationFailedError: If the alg is unsupported or
                does not fit the key.
        """
        alg = signature.algorithm

        if alg == "EdDSA":
            if not isinstance(public_key, ed25519.Ed25519PublicKey):
                raise SignatureVerificationFailedError("EdDSA requires an Ed25519 key")
            public_key.verify(signature.signature, signing_input)
            return

        if alg in _ECDSA_ALGORITHMS:
            curve_type, hash_algorithm = _ECDSA_ALGORITHMS[alg]
            if not isinstance(public_key, ec.EllipticCurvePublicKey) or not isinstance(
                public_key.curve, curve_type
            ):
                raise SignatureVerificationFailedError(
                    f"{alg} requires a {curve_type.name} key"
                )

            # JWS carries ECDSA signatures as raw r||s
            size = (public_key.curve.key_size + 7) // 8
            if len(signature.signature) != 2 * size:
                raise SignatureParseError(
                    f"{alg} signature has {len(signature.signature)} bytes, expected {2 * size}"
                )
            r = int.from_bytes(signature.signature[:size], byteorder="big")
            s = int.from_bytes(signature.signature[size:], byteorder="big")
            public_key.verify(
                encode_dss_signature(r, s),
                signing_input,
                ec.ECDSA(hash_algorithm),
            )
            return

        raise SignatureVerificationFailedError(f"Unsupported JWS algorithm: {alg}")
