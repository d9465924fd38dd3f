"""Shared fixtures: keys, DID Documents and signing helpers."""

import base64
import copy
import hashlib
import json

import base58
import pytest
import rfc8785
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from vc_proof import StaticDIDResolver

ISSUER = "did:example:abc"
KEY_ID = f"{ISSUER}#key-1"


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


def document_hash(document: dict) -> bytes:
    """SHA-256 over the JCS form of a document without its signature."""
    return hashlib.sha256(rfc8785.dumps(document)).digest()


@pytest.fixture
def ed25519_private_key():
    """Generate a test Ed25519 key."""
    return ed25519.Ed25519PrivateKey.generate()


@pytest.fixture
def ed25519_public_multibase(ed25519_private_key):
    """The public key as publicKeyMultibase, with the multicodec header."""
    raw = ed25519_private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    return "z" + base58.b58encode(bytes([0xED, 0x01]) + raw).decode()


@pytest.fixture
def ed25519_jwk(ed25519_private_key):
    """The public key as an OKP JWK."""
    raw = ed25519_private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    return {"kty": "OKP", "crv": "Ed25519", "x": b64url(raw), "kid": "key-2"}


@pytest.fixture
def p256_private_key():
    """Generate a test EC P-256 key."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def p256_jwk(p256_private_key):
    """The P-256 public key as JWK."""
    numbers = p256_private_key.public_key().public_numbers()
    return {
        "kty": "EC",
        "crv": "P-256",
        "x": b64url(numbers.x.to_bytes(32, byteorder="big")),
        "y": b64url(numbers.y.to_bytes(32, byteorder="big")),
        "kid": "key-3",
    }


@pytest.fixture
def did_document(ed25519_public_multibase, ed25519_jwk, p256_jwk):
    """DID Document of the issuer with an Ed25519 key, an OKP JWK and a P-256 JWK."""
    return {
        "@context": [
            "https://www.w3.org/ns/did/v1",
            "https://w3id.org/security/suites/ed25519-2020/v1",
            "https://w3id.org/security/suites/jws-2020/v1",
        ],
        "id": ISSUER,
        "verificationMethod": [
            {
                "id": KEY_ID,
                "type": "Ed25519VerificationKey2020",
                "controller": ISSUER,
                "publicKeyMultibase": ed25519_public_multibase,
            },
            {
                "id": f"{ISSUER}#key-2",
                "type": "JsonWebKey2020",
                "controller": ISSUER,
                "publicKeyJwk": ed25519_jwk,
            },
            {
                "id": f"{ISSUER}#key-3",
                "type": "JsonWebKey2020",
                "controller": ISSUER,
                "publicKeyJwk": p256_jwk,
            },
        ],
        "assertionMethod": [KEY_ID, f"{ISSUER}#key-2", f"{ISSUER}#key-3"],
    }


@pytest.fixture
def did_resolver(did_document):
    """Resolver that knows only the issuer's DID Document."""
    return StaticDIDResolver([did_document])


@pytest.fixture
def credential():
    """An unsigned credential issued by the test issuer."""
    return {
        "@context": [
            "https://www.w3.org/2018/credentials/v1",
            "https://w3id.org/security/suites/ed25519-2020/v1",
        ],
        "id": "urn:uuid:3978344f-8596-4c3a-a978-8fcaba3903c5",
        "type": ["VerifiableCredential"],
        "issuer": ISSUER,
        "issuanceDate": "2025-01-01T00:00:00Z",
        "credentialSubject": {
            "id": "did:example:holder",
            "name": "Test User",
        },
    }


@pytest.fixture
def presentation(credential):
    """An unsigned presentation wrapping the test credential."""
    return {
        "@context": ["https://www.w3.org/2018/credentials/v1"],
        "id": "urn:uuid:f5a4a3e1-5f2b-4f4b-9a42-8b1f0d3f1a6e",
        "type": ["VerifiablePresentation"],
        "holder": "did:example:holder",
        "verifiableCredential": [credential],
    }


@pytest.fixture
def sign_ed25519(ed25519_private_key):
    """Return a function adding an Ed25519Signature2020 proof to a document."""

    def sign(document, verification_method=KEY_ID, private_key=None):
        unsigned = copy.deepcopy(document)
        unsigned["proof"] = {
            "type": "Ed25519Signature2020",
            "created": "2025-01-15T10:00:00Z",
            "proofPurpose": "assertionMethod",
            "verificationMethod": verification_method,
        }
        key = private_key or ed25519_private_key
        signature = key.sign(document_hash(unsigned))

        signed = copy.deepcopy(unsigned)
        signed["proof"]["proofValue"] = "z" + base58.b58encode(signature).decode()
        return signed

    return sign


@pytest.fixture
def sign_jws(ed25519_private_key):
    """Return a function adding a JsonWebSignature2020 proof to a document."""

    def sign(
        document,
        verification_method=f"{ISSUER}#key-2",
        private_key=None,
        alg="EdDSA",
        b64=False,
    ):
        unsigned = copy.deepcopy(document)
        unsigned["proof"] = {
            "type": "JsonWebSignature2020",
            "created": "2025-01-15T10:00:00Z",
            "proofPurpose": "assertionMethod",
            "verificationMethod": verification_method,
        }
        header = {"alg": alg, "b64": False, "crit": ["b64"]} if not b64 else {"alg": alg}
        protected = b64url(json.dumps(header, separators=(",", ":")).encode())

        digest = document_hash(unsigned)
        payload = b64url(digest).encode() if b64 else digest
        signing_input = protected.encode() + b"." + payload

        key = private_key or ed25519_private_key
        if alg == "EdDSA":
            signature = key.sign(signing_input)
        else:
            r, s = decode_dss_signature(key.sign(signing_input, ec.ECDSA(hashes.SHA256())))
            signature = r.to_bytes(32, byteorder="big") + s.to_bytes(32, byteorder="big")

        signed = copy.deepcopy(unsigned)
        signed["proof"]["jws"] = f"{protected}..{b64url(signature)}"
        return signed

    return sign
