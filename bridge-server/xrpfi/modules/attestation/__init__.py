"""Exports for the FDC attestation client"""

from .client import AttestationClient
from .exceptions import (
    AttestationError,
    AttestationServiceError,
    AttestationUnavailableError,
    ProofMismatchError,
    ProofTimeoutError,
)
from .models import PaymentProof, to_bytes32_hex

__all__ = [
    "AttestationClient",
    "PaymentProof",
    "to_bytes32_hex",
    "AttestationError",
    "AttestationServiceError",
    "AttestationUnavailableError",
    "ProofMismatchError",
    "ProofTimeoutError",
]
