"""
Common proof verification steps.

Each proof type resolves its key the same way: parse the proof's
verificationMethod, resolve the DID, and look the method up in the
resolved DID Document. Subclasses decode the key and the signature and
perform the algorithm-specific check.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from vc_proof.canonical import HashedLinkedData
from vc_proof.did import DIDURL, VerificationMethod
from vc_proof.did_resolver import DIDResolver
from vc_proof.exceptions import NoVerificationKeyFoundError, UnsupportedSignatureTypeError
from vc_proof.model import Proof, SignatureType, Verifiable

logger = logging.getLogger(__name__)


class ProofVerifier(ABC):
    """Verifies the proof of a signed document against a computed hash."""

    SIGNATURE_TYPE: ClassVar[SignatureType]

    def __init__(self, did_resolver: DIDResolver) -> None:
        self.did_resolver = did_resolver

    def verify(self, hashed: HashedLinkedData, verifiable: Verifiable) -> bool:
        """Verify the document's proof signature over a hash.

        Args:
            hashed: Hash of the canonical document without its signature.
            verifiable: The original signed document.

        Returns:
            True if the signature matches, False if it does not.

        Raises:
            DIDParseError: If verificationMethod is not a DID URL.
            DIDResolutionError: If the DID cannot be resolved.
            NoVerificationKeyFoundError: If the DID Document lacks the key.
            InvalidPublicKeyFormatError: If the key material is malformed.
            SignatureParseError: If the signature value cannot be decoded.
            SignatureVerificationFailedError: If the check could not be performed.
        """
        proof = verifiable.proof
        if proof is None:
            raise UnsupportedSignatureTypeError("Document has no proof")

        method = self._resolve_verification_method(proof)
        public_key = self._load_public_key(method)
        signature = self._decode_signature(proof)
        valid = self._verify_signature(public_key, signature, hashed)
        logger.debug(
            "%s signature of %s with %s: %s",
            self.SIGNATURE_TYPE.value,
            verifiable.id,
            method.id,
            "valid" if valid else "invalid",
        )
        return valid

    def _resolve_verification_method(self, proof: Proof) -> VerificationMethod:
        """Find the verification method the proof refers to."""
        method_url = DIDURL.parse(proof.verification_method)
        did_document = self.did_resolver.resolve(method_url.did)

        method_id = str(method_url)
        method = did_document.get_verification_method(method_id)
        if method is None:
            raise NoVerificationKeyFoundError(
                f"Verification method {method_id} not found in DID Document {did_document.id}"
            )
        return method

    @abstractmethod
    def _load_public_key(self, method: VerificationMethod) -> Any:
        """Decode the method's key material into a public key object."""

    @abstractmethod
    def _decode_signature(self, proof: Proof) -> Any:
        """Decode the proof's signature value."""

    @abstractmethod
    def _verify_signature(
        self, public_key: Any, signature: Any, hashed: HashedLinkedData
    ) -> bool:
        """Check the signature over the hash with the public key."""
