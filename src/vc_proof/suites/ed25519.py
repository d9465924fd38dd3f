"""
Ed25519Signature2020 proofs.

The proofValue is a multibase (base58btc) Ed25519 signature over the
document hash.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ed25519

from vc_proof.canonical import HashedLinkedData
from vc_proof.did import Ed25519VerificationMethod, JWKVerificationMethod, VerificationMethod
from vc_proof.exceptions import (
    InvalidPublicKeyFormatError,
    SignatureParseError,
    SignatureVerificationFailedError,
)
from vc_proof.keys import ed25519_key_from_multibase, jwk_to_public_key, multibase_decode
from vc_proof.model import Proof, SignatureType
from vc_proof.suites.base import ProofVerifier

ED25519_SIGNATURE_LENGTH = 64


class Ed25519ProofVerifier(ProofVerifier):
    """Verifier for Ed25519Signature2020 proofs."""

    SIGNATURE_TYPE = SignatureType.ED25519

    def _load_public_key(self, method: VerificationMethod) -> ed25519.Ed25519PublicKey:
        if isinstance(method, Ed25519VerificationMethod):
            return ed25519_key_from_multibase(method)

        if isinstance(method, JWKVerificationMethod) and method.public_key_jwk is not None:
            public_key = jwk_to_public_key(method.public_key_jwk)
            if not isinstance(public_key, ed25519.Ed25519PublicKey):
                raise InvalidPublicKeyFormatError(
                    f"Verification method {method.id} is not an Ed25519 key"
                )
            return public_key

        raise InvalidPublicKeyFormatError(
            f"Verification method {method.id} has no Ed25519 key material"
        )

    def _decode_signature(self, proof: Proof) -> bytes:
        proof_value = proof.get(Proof.PROOF_VALUE)
        if not isinstance(proof_value, str) or not proof_value:
            raise SignatureParseError("Proof has no proofValue")

        try:
            signature = multibase_decode(proof_value)
        except ValueError as e:
            raise SignatureParseError(f"Invalid proofValue: {e}") from e

        if len(signature) != ED25519_SIGNATURE_LENGTH:
            raise SignatureParseError(
                f"Ed25519 signature has {len(signature)} bytes, expected {ED25519_SIGNATURE_LENGTH}"
            )
        return signature

    def _verify_signature(
        self,
        public_key: ed25519.Ed25519PublicKey,
        signature: bytes,
        hashed: HashedLinkedData,
    ) -> bool:
        try:
            public_key.verify(signature, hashed.value)
        except InvalidSignature:
            return False
        except (UnsupportedAlgorithm, TypeError, ValueError) as e:
            raise SignatureVerificationFailedError(f"Ed25519 verification error: {e}") from e
        return True
