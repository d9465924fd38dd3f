"""
Canonicalization and hashing of signed documents.

The proof pipeline only depends on the Canonicalizer and Hasher contracts;
JCSCanonicalizer (RFC 8785) and SHA256Hasher are the defaults.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass

import rfc8785

from vc_proof.exceptions import TransformError
from vc_proof.model import Verifiable


@dataclass(frozen=True)
class TransformedLinkedData:
    """Canonical byte form of a document."""

    value: bytes


@dataclass(frozen=True)
class HashedLinkedData:
    """Digest of a canonical document."""

    value: bytes


class Canonicalizer(ABC):
    """Turns a document into a stable byte sequence."""

    @abstractmethod
    def transform(self, verifiable: Verifiable) -> TransformedLinkedData:
        """Canonicalize a document.

        Raises:
            TransformError: If the document cannot be canonicalized.
        """


class Hasher(ABC):
    """Hashes canonical document bytes."""

    @abstractmethod
    def hash(self, transformed: TransformedLinkedData) -> HashedLinkedData:
        """Return the digest of the canonical form."""


class JCSCanonicalizer(Canonicalizer):
    """JSON Canonicalization Scheme (RFC 8785)."""

    def transform(self, verifiable: Verifiable) -> TransformedLinkedData:
        try:
            canonical = rfc8785.dumps(verifiable.to_dict())
        except (rfc8785.CanonicalizationError, TypeError, ValueError) as e:
            raise TransformError(
                f"Could not canonicalize {verifiable.id or 'document'}: {e}"
            ) from e
        return TransformedLinkedData(value=bytes(canonical))


class SHA256Hasher(Hasher):
    """SHA-256 digest."""

    def hash(self, transformed: TransformedLinkedData) -> HashedLinkedData:
        return HashedLinkedData(value=hashlib.sha256(transformed.value).digest())
