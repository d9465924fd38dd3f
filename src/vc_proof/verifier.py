"""
Linked Data proof validation.

Verifies W3C Verifiable Credentials and Presentations carrying an embedded
Linked Data proof.

Supported proof types:
- Ed25519Signature2020
- JsonWebSignature2020 (EdDSA, ES256, ES256K, ES384)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from vc_proof.canonical import Canonicalizer, Hasher, JCSCanonicalizer, SHA256Hasher
from vc_proof.did_resolver import DIDResolver, DIDWebResolver
from vc_proof.exceptions import (
    InvalidDocumentError,
    ProofValidationError,
    UnsupportedSignatureTypeError,
)
from vc_proof.model import (
    SignatureType,
    Verifiable,
    VerifiableCredential,
    VerifiableType,
)
from vc_proof.suites import Ed25519ProofVerifier, JWSProofVerifier, ProofVerifier
from vc_proof.validation import DocumentValidator, JSONSchemaDocumentValidator

logger = logging.getLogger(__name__)

PROOF_VERIFIERS: dict[SignatureType, type[ProofVerifier]] = {
    SignatureType.ED25519: Ed25519ProofVerifier,
    SignatureType.JWS: JWSProofVerifier,
}


class LinkedDataProofValidation:
    """Validates the Linked Data proof of a VC or VP.

    The document is canonicalized and hashed without its signature value,
    the signature is checked against the key named by the proof's
    verificationMethod, and for credentials the signing DID must be the
    issuer.
    """

    def __init__(
        self,
        did_resolver: DIDResolver,
        canonicalizer: Canonicalizer,
        hasher: Hasher,
        validator: DocumentValidator,
    ) -> None:
        self.did_resolver = did_resolver
        self.canonicalizer = canonicalizer
        self.hasher = hasher
        self.validator = validator

    @classmethod
    def new_instance(cls, did_resolver: DIDResolver) -> LinkedDataProofValidation:
        """Create a validation pipeline with the default collaborators.

        Raises:
            ValueError: If no DID resolver is given.
        """
        if did_resolver is None:
            raise ValueError("DID resolver must not be None")
        return cls(
            did_resolver=did_resolver,
            canonicalizer=JCSCanonicalizer(),
            hasher=SHA256Hasher(),
            validator=JSONSchemaDocumentValidator(),
        )

    def verify(self, verifiable: Verifiable | Mapping[str, Any]) -> bool:
        """Verify a Verifiable Credential or Verifiable Presentation.

        Args:
            verifiable: The signed document. Never mutated.

        Returns:
            True if the proof is valid and, for a credential, was made with
            a key of the issuer. False if the document is malformed, the
            signature does not match, or the signer is not the issuer.

        Raises:
            UnsupportedSignatureTypeError: If the proof type is missing or unknown.
            DIDParseError: If the verificationMethod is not a DID URL.
            DIDResolutionError: If the signer's DID cannot be resolved.
            NoVerificationKeyFoundError: If the signer's key is not in its DID Document.
            InvalidPublicKeyFormatError: If the public key cannot be decoded.
            SignatureParseError: If the signature value cannot be decoded.
            SignatureVerificationFailedError: If the signature check could not run.
            TransformError: If the document cannot be canonicalized.
        """
        return self.find_failure(verifiable) is None

    def find_failure(self, verifiable: Verifiable | Mapping[str, Any]) -> str | None:
        """Run the verification steps and report the first one that failed.

        Returns:
            None if the proof is valid, otherwise a description of why
            `verify` would return False.

        Raises:
            ProofValidationError: In the same cases as `verify`.
        """
        verifiable = Verifiable.from_dict(verifiable)
        verifier = self._select_verifier(verifiable)

        # Work on a copy so the original keeps its signature for verification
        unsigned = verifiable.without_proof_signature()

        transformed = self.canonicalizer.transform(unsigned)
        hashed = self.hasher.hash(transformed)

        try:
            self.validator.validate(unsigned)
        except InvalidDocumentError as e:
            logger.error("Could not validate %s: %s", verifiable.id, e)
            return f"Document is malformed: {e}"

        if not verifier.verify(hashed, verifiable):
            return "Signature does not match the document"
        return self._check_issuer_binding(verifiable)

    def _select_verifier(self, verifiable: Verifiable) -> ProofVerifier:
        proof = verifiable.proof
        proof_type = proof.type if proof is not None else None
        if proof_type is None or not proof_type.strip():
            raise UnsupportedSignatureTypeError("Proof type can't be empty")

        try:
            signature_type = SignatureType(proof_type)
        except ValueError:
            raise UnsupportedSignatureTypeError(
                f"{proof_type} is not supported type"
            ) from None

        return PROOF_VERIFIERS[signature_type](self.did_resolver)

    def _check_issuer_binding(self, verifiable: Verifiable) -> str | None:
        """Check that a credential was signed with a key of its issuer."""
        # Presentations have no issuer
        if verifiable.type is VerifiableType.VP:
            return None

        verification_method = verifiable.proof.verification_method
        if not isinstance(verification_method, str):
            raise UnsupportedSignatureTypeError("Signature type is not supported")

        issuer = VerifiableCredential(verifiable).issuer
        signer = verification_method.split("#")[0]
        if signer != issuer:
            logger.warning(
                "Credential %s issued by %s was signed by %s", verifiable.id, issuer, signer
            )
            return f"Proof was signed by {signer}, not the issuer {issuer}"
        return None


class VerificationStatus(Enum):
    """Overall verification status."""

    VALID = "valid"
    INVALID = "invalid"
    ERROR = "error"


@dataclass
class VerificationResult:
    """Outcome of verifying a document, for reporting."""

    status: VerificationStatus
    document_type: VerifiableType
    document_id: str | None
    issuer: str | None = None
    proof_type: str | None = None
    verification_method: str | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.status is VerificationStatus.VALID

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "valid": self.is_valid,
            "document_type": self.document_type.value,
            "document_id": self.document_id,
            "issuer": self.issuer,
            "proof_type": self.proof_type,
            "verification_method": self.verification_method,
            "errors": self.errors,
        }


def verify_document(
    document: Verifiable | Mapping[str, Any],
    did_resolver: DIDResolver | None = None,
    validation: LinkedDataProofValidation | None = None,
) -> VerificationResult:
    """Verify a document and report the outcome instead of raising.

    Args:
        document: The signed VC or VP.
        did_resolver: DID resolver. A did:web resolver if not provided.
        validation: Validation pipeline. Built from did_resolver if not provided.

    Returns:
        VerificationResult; errors that prevented verification are reported
        with status ERROR.
    """
    verifiable = Verifiable.from_dict(document)
    if validation is None:
        validation = LinkedDataProofValidation.new_instance(did_resolver or DIDWebResolver())

    proof = verifiable.proof
    verification_method = proof.verification_method if proof is not None else None
    result = VerificationResult(
        status=VerificationStatus.INVALID,
        document_type=verifiable.type,
        document_id=verifiable.id,
        issuer=VerifiableCredential(verifiable).issuer
        if verifiable.type is VerifiableType.VC
        else None,
        proof_type=proof.type if proof is not None else None,
        verification_method=verification_method
        if isinstance(verification_method, str)
        else None,
    )

    try:
        failure = validation.find_failure(verifiable)
    except ProofValidationError as e:
        result.status = VerificationStatus.ERROR
        result.errors.append(f"{type(e).__name__}: {e}")
        return result

    if failure is None:
        result.status = VerificationStatus.VALID
    else:
        result.errors.append(failure)
    return result
