"""
Verifiable Credential and Presentation model.

Documents are read-only mappings over a private deep copy of the data they
were built from. Operations that change a document, such as stripping the
proof signature, return a new value and leave the original untouched.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any, ClassVar


class VerifiableType(Enum):
    """Kind of signed document."""

    VC = "VerifiableCredential"
    VP = "VerifiablePresentation"


class SignatureType(Enum):
    """Supported Linked Data proof types."""

    ED25519 = "Ed25519Signature2020"
    JWS = "JsonWebSignature2020"


class Proof(Mapping[str, Any]):
    """Embedded Linked Data proof."""

    TYPE = "type"
    VERIFICATION_METHOD = "verificationMethod"
    PROOF_VALUE = "proofValue"
    JWS = "jws"

    # Fields holding the signature itself, one per supported proof type
    SIGNATURE_FIELDS = (PROOF_VALUE, JWS)

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(data))

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Proof({self._data!r})"

    @property
    def type(self) -> str | None:
        value = self._data.get(self.TYPE)
        return value if isinstance(value, str) else None

    @property
    def verification_method(self) -> Any:
        return self._data.get(self.VERIFICATION_METHOD)

    def without_signature(self) -> dict[str, Any]:
        """Return the proof as a dict with every signature field removed."""
        return {
            k: copy.deepcopy(v)
            for k, v in self._data.items()
            if k not in self.SIGNATURE_FIELDS
        }

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)


class Verifiable(Mapping[str, Any]):
    """A signed document: a Verifiable Credential or a Verifiable Presentation."""

    TYPE: ClassVar[VerifiableType]

    ID = "id"
    TYPES = "type"
    PROOF = "proof"

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(data))

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Verifiable:
        """Build the matching Verifiable subclass for a parsed JSON document.

        A document whose type includes VerifiablePresentation is a
        presentation; anything else is treated as a credential and left to
        document validation to accept or reject.
        """
        if isinstance(data, Verifiable):
            return data.deep_clone()

        types = data.get(Verifiable.TYPES)
        if isinstance(types, str):
            types = [types]
        elif not isinstance(types, list):
            types = []
        if VerifiableType.VP.value in types:
            return VerifiablePresentation(data)
        return VerifiableCredential(data)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"

    @property
    def id(self) -> str | None:
        value = self._data.get(self.ID)
        return value if isinstance(value, str) else None

    @property
    def type(self) -> VerifiableType:
        return self.TYPE

    @property
    def proof(self) -> Proof | None:
        proof = self._data.get(self.PROOF)
        if isinstance(proof, Mapping):
            return Proof(proof)
        return None

    def deep_clone(self) -> Verifiable:
        return type(self)(self._data)

    def without_proof_signature(self) -> Verifiable:
        """Return a copy of this document with the proof signature removed.

        Proof metadata such as type and verificationMethod is kept, so a
        signature computed over the result covers everything but itself.
        """
        data = copy.deepcopy(self._data)
        proof = self.proof
        if proof is not None:
            data[self.PROOF] = proof.without_signature()
        return type(self)(data)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)


class VerifiableCredential(Verifiable):
    """W3C Verifiable Credential."""

    TYPE = VerifiableType.VC

    ISSUER = "issuer"

    @property
    def issuer(self) -> str | None:
        """The issuer id, from either a string or an issuer object."""
        issuer = self._data.get(self.ISSUER)
        if isinstance(issuer, str):
            return issuer
        if isinstance(issuer, Mapping):
            issuer_id = issuer.get("id")
            return issuer_id if isinstance(issuer_id, str) else None
        return None


class VerifiablePresentation(Verifiable):
    """W3C Verifiable Presentation. Presentations have no issuer."""

    TYPE = VerifiableType.VP
