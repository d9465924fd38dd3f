"""
Proof verifiers, one per supported Linked Data proof type.
"""

from vc_proof.suites.base import ProofVerifier
from vc_proof.suites.ed25519 import Ed25519ProofVerifier
from vc_proof.suites.jws import JWSProofVerifier

__all__ = [
    "ProofVerifier",
    "Ed25519ProofVerifier",
    "JWSProofVerifier",
]
