"""
DID data model.

Covers DID and DID URL parsing, the verification methods found in a DID
Document, and a builder for JsonWebKey2020 verification methods.
https://www.w3.org/TR/did-core/
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from vc_proof.exceptions import DIDParseError, NullFieldError

_DID_PATTERN = re.compile(
    r"^did:(?P<method>[a-z0-9]+):(?P<method_specific_id>[A-Za-z0-9._:%-]*[A-Za-z0-9._%-])$"
)


@dataclass(frozen=True)
class DID:
    """Decentralized Identifier (did:<method>:<method-specific-id>)."""

    method: str
    method_specific_id: str

    @classmethod
    def parse(cls, value: Any) -> DID:
        """Parse a DID string.

        Raises:
            DIDParseError: If the value is not a DID.
        """
        if not isinstance(value, str):
            raise DIDParseError(f"DID must be a string, got {type(value).__name__}")
        match = _DID_PATTERN.match(value)
        if match is None:
            raise DIDParseError(f"Invalid DID: {value!r}")
        return cls(
            method=match.group("method"),
            method_specific_id=match.group("method_specific_id"),
        )

    def __str__(self) -> str:
        return f"did:{self.method}:{self.method_specific_id}"


@dataclass(frozen=True)
class DIDURL:
    """A DID with a fragment naming a resource, e.g. did:web:example.com#key-1."""

    did: DID
    fragment: str

    @classmethod
    def parse(cls, value: Any) -> DIDURL:
        """Parse a DID URL of the form <did>#<fragment>.

        Raises:
            DIDParseError: If the value has no fragment or an invalid DID part.
        """
        if not isinstance(value, str):
            raise DIDParseError(f"DID URL must be a string, got {type(value).__name__}")
        did_part, sep, fragment = value.partition("#")
        if not sep or not fragment:
            raise DIDParseError(f"DID URL has no fragment: {value!r}")
        return cls(did=DID.parse(did_part), fragment=fragment)

    def __str__(self) -> str:
        return f"{self.did}#{self.fragment}"


@dataclass(frozen=True)
class JsonWebKey:
    """Public key in JWK format."""

    kty: str
    crv: str
    x: str
    kid: str | None = None
    y: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JsonWebKey:
        """Create a JsonWebKey from a JWK dictionary."""
        return cls(
            kty=data.get("kty", ""),
            crv=data.get("crv", ""),
            x=data.get("x", ""),
            kid=data.get("kid"),
            y=data.get("y"),
        )

    def to_dict(self) -> dict[str, str]:
        data = {"kty": self.kty, "crv": self.crv, "x": self.x}
        if self.y is not None:
            data["y"] = self.y
        if self.kid is not None:
            data["kid"] = self.kid
        return data


@dataclass(frozen=True)
class VerificationMethod:
    """DID Document verification method."""

    ID = "id"
    TYPE = "type"
    CONTROLLER = "controller"

    id: str
    type: str
    controller: str

    @staticmethod
    def from_dict(data: dict[str, Any]) -> VerificationMethod:
        """Build the verification method class matching the key material."""
        common = {
            "id": data.get(VerificationMethod.ID, ""),
            "type": data.get(VerificationMethod.TYPE, ""),
            "controller": data.get(VerificationMethod.CONTROLLER, ""),
        }
        jwk = data.get(JWKVerificationMethod.PUBLIC_KEY_JWK)
        if isinstance(jwk, dict):
            return JWKVerificationMethod(
                public_key_jwk=JsonWebKey.from_dict(jwk), **common
            )
        multibase = data.get(Ed25519VerificationMethod.PUBLIC_KEY_MULTIBASE)
        if isinstance(multibase, str):
            return Ed25519VerificationMethod(public_key_multibase=multibase, **common)
        return VerificationMethod(**common)

    def to_dict(self) -> dict[str, Any]:
        return {
            self.ID: self.id,
            self.TYPE: self.type,
            self.CONTROLLER: self.controller,
        }


@dataclass(frozen=True)
class JWKVerificationMethod(VerificationMethod):
    """Verification method carrying a publicKeyJwk."""

    DEFAULT_TYPE = "JsonWebKey2020"
    PUBLIC_KEY_JWK = "publicKeyJwk"

    public_key_jwk: JsonWebKey | None = None

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.public_key_jwk is not None:
            data[self.PUBLIC_KEY_JWK] = self.public_key_jwk.to_dict()
        return data


@dataclass(frozen=True)
class Ed25519VerificationMethod(VerificationMethod):
    """Ed25519VerificationKey2020 verification method."""

    DEFAULT_TYPE = "Ed25519VerificationKey2020"
    PUBLIC_KEY_MULTIBASE = "publicKeyMultibase"

    public_key_multibase: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data[self.PUBLIC_KEY_MULTIBASE] = self.public_key_multibase
        return data


@dataclass
class DIDDocument:
    """W3C DID Document."""

    id: str
    verification_methods: list[VerificationMethod] = field(default_factory=list)
    authentication: list[str] = field(default_factory=list)
    assertion_method: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DIDDocument:
        """Parse a DID Document from JSON.

        Verification methods embedded in authentication or assertionMethod
        are collected alongside the verificationMethod entries.
        """
        verification_methods = [
            VerificationMethod.from_dict(vm_data)
            for vm_data in _list_value(data, "verificationMethod")
            if isinstance(vm_data, dict)
        ]
        authentication = _parse_verification_relationship(
            _list_value(data, "authentication"), verification_methods
        )
        assertion_method = _parse_verification_relationship(
            _list_value(data, "assertionMethod"), verification_methods
        )
        return cls(
            id=data.get("id", ""),
            verification_methods=verification_methods,
            authentication=authentication,
            assertion_method=assertion_method,
        )

    def get_verification_method(self, method_id: str) -> VerificationMethod | None:
        """Get a verification method by ID."""
        for vm in self.verification_methods:
            if vm.id == method_id:
                return vm
        return None


def _list_value(data: dict[str, Any], key: str) -> list[Any]:
    # null or scalar relationship values are treated as absent
    value = data.get(key)
    return value if isinstance(value, list) else []


def _parse_verification_relationship(
    items: list[Any], verification_methods: list[VerificationMethod]
) -> list[str]:
    """Parse a verification relationship array into method ID references.

    Embedded method objects are appended to verification_methods.
    """
    result: list[str] = []
    for item in items:
        if isinstance(item, str):
            result.append(item)
        elif isinstance(item, dict) and "id" in item:
            result.append(item["id"])
            if all(vm.id != item["id"] for vm in verification_methods):
                verification_methods.append(VerificationMethod.from_dict(item))
    return result


class JWKVerificationMethodBuilder:
    """Builds a JsonWebKey2020 verification method from a DID and a JWK.

    Example:
        >>> method = JWKVerificationMethodBuilder().did(did).jwk(jwk).build()
    """

    def __init__(self) -> None:
        self._did: DID | None = None
        self._jwk: JsonWebKey | None = None

    def did(self, did: DID) -> JWKVerificationMethodBuilder:
        self._did = did
        return self

    def jwk(self, jwk: JsonWebKey) -> JWKVerificationMethodBuilder:
        self._jwk = jwk
        return self

    def build(self) -> JWKVerificationMethod:
        """Build the verification method.

        Raises:
            NullFieldError: If the DID or the JWK (or its kid) is unset.
        """
        if self._did is None:
            raise NullFieldError("did must be set before build()")
        if self._jwk is None:
            raise NullFieldError("jwk must be set before build()")
        if not self._jwk.kid:
            raise NullFieldError("jwk has no kid to name the verification method")

        did_uri = str(self._did)
        return JWKVerificationMethod(
            id=f"{did_uri}#{self._jwk.kid}",
            type=JWKVerificationMethod.DEFAULT_TYPE,
            controller=did_uri,
            public_key_jwk=JsonWebKey(
                kty=self._jwk.kty,
                crv=self._jwk.crv,
                x=self._jwk.x,
                kid=self._jwk.kid,
                y=self._jwk.y,
            ),
        )
