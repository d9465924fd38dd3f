"""
Errors raised by the proof validation pipeline.

Every error that means "the document could not be checked" derives from
ProofValidationError. A document that was checked and found invalid is
reported as a plain False result instead.
"""

from __future__ import annotations


class ProofValidationError(Exception):
    """Base class for all proof validation failures."""


class UnsupportedSignatureTypeError(ProofValidationError):
    """Raised when the proof type is missing or not supported."""


class DIDParseError(ProofValidationError):
    """Raised when a DID or DID URL cannot be parsed."""


class DIDResolutionError(ProofValidationError):
    """Raised when DID resolution fails."""


class InvalidPublicKeyFormatError(ProofValidationError):
    """Raised when resolved key material cannot be decoded."""


class SignatureParseError(ProofValidationError):
    """Raised when the proof's signature value cannot be decoded."""


class NoVerificationKeyFoundError(ProofValidationError):
    """Raised when the DID Document has no matching verification method."""


class SignatureVerificationFailedError(ProofValidationError):
    """Raised when the signature check itself could not be performed.

    A signature that simply does not match is not an error; verifiers
    return False for it.
    """


class TransformError(ProofValidationError):
    """Raised when a document cannot be canonicalized."""


class InvalidDocumentError(ProofValidationError):
    """Raised when a document does not have the shape of a VC or VP."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class NullFieldError(ProofValidationError):
    """Raised when a builder is asked to build with a required field unset."""
