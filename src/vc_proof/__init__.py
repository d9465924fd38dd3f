"""
vc-proof - Linked Data proof verification for Verifiable Credentials.

Supports:
- Ed25519Signature2020 and JsonWebSignature2020 proofs
- JCS (RFC 8785) canonicalization with SHA-256 hashing
- Issuer binding: a credential must be signed with a key of its issuer
- did:web resolution, plus static DID Documents for offline verification
"""

from vc_proof.did import (
    DID,
    DIDURL,
    DIDDocument,
    Ed25519VerificationMethod,
    JsonWebKey,
    JWKVerificationMethod,
    JWKVerificationMethodBuilder,
    VerificationMethod,
)
from vc_proof.did_resolver import (
    CompositeDIDResolver,
    DIDResolver,
    DIDWebResolver,
    StaticDIDResolver,
)
from vc_proof.exceptions import (
    DIDParseError,
    DIDResolutionError,
    InvalidDocumentError,
    InvalidPublicKeyFormatError,
    NoVerificationKeyFoundError,
    NullFieldError,
    ProofValidationError,
    SignatureParseError,
    SignatureVerificationFailedError,
    TransformError,
    UnsupportedSignatureTypeError,
)
from vc_proof.model import (
    Proof,
    SignatureType,
    Verifiable,
    VerifiableCredential,
    VerifiablePresentation,
    VerifiableType,
)
from vc_proof.verifier import (
    LinkedDataProofValidation,
    VerificationResult,
    VerificationStatus,
    verify_document,
)

__version__ = "0.1.0"

__all__ = [
    "DID",
    "DIDURL",
    "DIDDocument",
    "Ed25519VerificationMethod",
    "JsonWebKey",
    "JWKVerificationMethod",
    "JWKVerificationMethodBuilder",
    "VerificationMethod",
    "CompositeDIDResolver",
    "DIDResolver",
    "DIDWebResolver",
    "StaticDIDResolver",
    "DIDParseError",
    "DIDResolutionError",
    "InvalidDocumentError",
    "InvalidPublicKeyFormatError",
    "NoVerificationKeyFoundError",
    "NullFieldError",
    "ProofValidationError",
    "SignatureParseError",
    "SignatureVerificationFailedError",
    "TransformError",
    "UnsupportedSignatureTypeError",
    "Proof",
    "SignatureType",
    "Verifiable",
    "VerifiableCredential",
    "VerifiablePresentation",
    "VerifiableType",
    "LinkedDataProofValidation",
    "VerificationResult",
    "VerificationStatus",
    "verify_document",
]
