"""
Document shape validation.

Checks that a document has the structure of a Verifiable Credential or a
Verifiable Presentation before its proof is trusted.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from vc_proof.exceptions import InvalidDocumentError
from vc_proof.model import Verifiable, VerifiableType


def _type_including(name: str) -> dict[str, Any]:
    return {
        "anyOf": [
            {"const": name},
            {"type": "array", "items": {"type": "string"}, "contains": {"const": name}},
        ]
    }


_CONTEXT = {
    "anyOf": [
        {"type": "string"},
        {"type": "array", "minItems": 1},
        {"type": "object"},
    ]
}

_PROOF = {
    "type": "object",
    "required": ["type", "verificationMethod"],
    "properties": {
        "type": {"type": "string", "minLength": 1},
        "verificationMethod": {"type": "string", "pattern": "^did:[a-z0-9]+:.+#.+$"},
    },
}

CREDENTIAL_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["@context", "type", "issuer", "credentialSubject", "proof"],
    "properties": {
        "@context": _CONTEXT,
        "id": {"type": "string"},
        "type": _type_including(VerifiableType.VC.value),
        "issuer": {
            "anyOf": [
                {"type": "string", "minLength": 1},
                {
                    "type": "object",
                    "required": ["id"],
                    "properties": {"id": {"type": "string", "minLength": 1}},
                },
            ]
        },
        "credentialSubject": {"type": ["object", "array"]},
        "proof": _PROOF,
    },
}

PRESENTATION_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["@context", "type", "proof"],
    "properties": {
        "@context": _CONTEXT,
        "id": {"type": "string"},
        "type": _type_including(VerifiableType.VP.value),
        "verifiableCredential": {"type": ["object", "array"]},
        "proof": _PROOF,
    },
}


class DocumentValidator(ABC):
    """Validates the shape of a signed document."""

    @abstractmethod
    def validate(self, verifiable: Verifiable) -> None:
        """Validate a document.

        Raises:
            InvalidDocumentError: If the document is not a valid VC or VP.
        """


class JSONSchemaDocumentValidator(DocumentValidator):
    """Validates documents against a JSON Schema per document type."""

    def __init__(
        self,
        credential_schema: dict[str, Any] | None = None,
        presentation_schema: dict[str, Any] | None = None,
    ) -> None:
        self._validators = {
            VerifiableType.VC: Draft202012Validator(credential_schema or CREDENTIAL_SCHEMA),
            VerifiableType.VP: Draft202012Validator(presentation_schema or PRESENTATION_SCHEMA),
        }

    def validate(self, verifiable: Verifiable) -> None:
        validator = self._validators[verifiable.type]
        errors = [
            _format_error(error)
            for error in sorted(
                validator.iter_errors(verifiable.to_dict()), key=lambda e: [str(p) for p in e.path]
            )
        ]
        if errors:
            raise InvalidDocumentError(
                f"{verifiable.type.value} {verifiable.id or '<no id>'} is invalid: "
                + "; ".join(errors),
                errors=errors,
            )


def _format_error(error: ValidationError) -> str:
    location = "/".join(str(p) for p in error.absolute_path)
    return f"{location}: {error.message}" if location else error.message
