"""
DID resolvers.

Proof verifiers only depend on the DIDResolver contract. Available
implementations:
- DIDWebResolver: did:web over HTTPS, with an in-memory cache
- StaticDIDResolver: a fixed set of DID Documents, for offline use and tests
- CompositeDIDResolver: delegates to the first resolver that handles a DID

https://w3c-ccg.github.io/did-method-web/
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any
from urllib.parse import quote

import httpx

from vc_proof.did import DID, DIDDocument
from vc_proof.exceptions import DIDParseError, DIDResolutionError

logger = logging.getLogger(__name__)


class DIDResolver(ABC):
    """Resolves a DID to its DID Document."""

    @abstractmethod
    def resolve(self, did: DID) -> DIDDocument:
        """Resolve a DID.

        Raises:
            DIDResolutionError: If the DID Document cannot be obtained.
        """

    def is_resolvable(self, did: DID) -> bool:
        """Whether this resolver handles the given DID."""
        return True


class DIDWebResolver(DIDResolver):
    """Resolver for the did:web DID method."""

    METHOD = "web"

    def __init__(
        self,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the DID resolver.

        Args:
            timeout: HTTP request timeout in seconds.
            verify_ssl: Whether to verify SSL certificates.
            client: HTTP client to use instead of one per request.
        """
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._client = client
        self._cache: dict[str, DIDDocument] = {}

    def is_resolvable(self, did: DID) -> bool:
        return did.method == self.METHOD

    def did_to_url(self, did: DID) -> str:
        """Convert a did:web identifier to its resolution URL.

        did:web:example.com -> https://example.com/.well-known/did.json
        did:web:example.com:path:to:doc -> https://example.com/path/to/doc/did.json
        did:web:example.com%3A8080 -> https://example.com:8080/.well-known/did.json

        Raises:
            DIDParseError: If the DID is not a did:web identifier.
        """
        if not self.is_resolvable(did):
            raise DIDParseError(f"Invalid did:web identifier: {did}")

        # Split by colon to get path segments
        parts = did.method_specific_id.split(":")

        # First part is the domain (with potential port encoded as %3A)
        domain = parts[0].replace("%3A", ":")
        if not domain:
            raise DIDParseError(f"did:web identifier has no domain: {did}")

        # Remaining parts form the path
        if len(parts) > 1:
            path = "/" + "/".join(quote(p, safe="") for p in parts[1:]) + "/did.json"
        else:
            path = "/.well-known/did.json"

        return f"https://{domain}{path}"

    def resolve(self, did: DID, use_cache: bool = True) -> DIDDocument:
        """Resolve a did:web identifier to its DID Document.

        Args:
            did: The did:web identifier.
            use_cache: Whether to use cached results.

        Raises:
            DIDParseError: If the DID is not a did:web identifier.
            DIDResolutionError: If resolution fails.
        """
        key = str(did)
        if use_cache and key in self._cache:
            return self._cache[key]

        url = self.did_to_url(did)
        logger.debug("Resolving %s from %s", did, url)
        data = self._fetch(url, did)

        doc = _parse_did_document(data, did)
        if use_cache:
            self._cache[key] = doc
        return doc

    def _fetch(self, url: str, did: DID) -> Any:
        headers = {"Accept": "application/did+ld+json, application/json"}
        try:
            if self._client is not None:
                response = self._client.get(url, headers=headers)
            else:
                with httpx.Client(timeout=self.timeout, verify=self.verify_ssl) as client:
                    response = client.get(url, headers=headers)
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            raise DIDResolutionError(
                f"HTTP error resolving {did}: {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise DIDResolutionError(f"Network error resolving {did}: {e}") from e
        except ValueError as e:
            raise DIDResolutionError(f"Invalid JSON in DID Document for {did}") from e

    def clear_cache(self) -> None:
        """Clear the resolution cache."""
        self._cache.clear()


class StaticDIDResolver(DIDResolver):
    """Resolves DIDs from a fixed set of DID Documents."""

    def __init__(self, documents: Iterable[DIDDocument | dict[str, Any]] = ()) -> None:
        self._documents: dict[str, DIDDocument] = {}
        for document in documents:
            self.add(document)

    def add(self, document: DIDDocument | dict[str, Any]) -> None:
        """Register a DID Document, parsing it first if it is raw JSON.

        Raises:
            DIDParseError: If the document id is not a DID.
        """
        if not isinstance(document, DIDDocument):
            document = DIDDocument.from_dict(document)
        did = DID.parse(document.id)
        self._documents[str(did)] = document

    def is_resolvable(self, did: DID) -> bool:
        return str(did) in self._documents

    def resolve(self, did: DID) -> DIDDocument:
        try:
            return self._documents[str(did)]
        except KeyError:
            raise DIDResolutionError(f"DID Document not found for {did}") from None


class CompositeDIDResolver(DIDResolver):
    """Delegates to the first resolver able to handle a DID."""

    def __init__(self, *resolvers: DIDResolver) -> None:
        self.resolvers = list(resolvers)

    def is_resolvable(self, did: DID) -> bool:
        return any(resolver.is_resolvable(did) for resolver in self.resolvers)

    def resolve(self, did: DID) -> DIDDocument:
        for resolver in self.resolvers:
            if resolver.is_resolvable(did):
                return resolver.resolve(did)
        raise DIDResolutionError(f"No resolver for DID method '{did.method}': {did}")


def _parse_did_document(data: Any, did: DID) -> DIDDocument:
    """Parse a fetched DID Document and check that it describes the DID.

    Raises:
        DIDResolutionError: If the document is not an object or its id differs.
    """
    if not isinstance(data, dict):
        raise DIDResolutionError(f"DID Document for {did} is not a JSON object")

    doc_id = data.get("id", "")
    if doc_id != str(did):
        raise DIDResolutionError(
            f"DID Document id mismatch: expected {did}, got {doc_id}"
        )
    return DIDDocument.from_dict(data)
