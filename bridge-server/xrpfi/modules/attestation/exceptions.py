"""Attestation client exceptions."""

from typing import Optional


class AttestationError(Exception):
    """Base class for attestation and proof errors."""


class AttestationUnavailableError(AttestationError):
    """Raised when the verifier never produces a request for the payment."""


class AttestationServiceError(AttestationError):
    """Raised when the verifier answers with a non-success status or is unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProofTimeoutError(AttestationError):
    """Raised when no proof shows up on the DA layer within the wait budget."""

    def __init__(self, voting_round_id: int, max_wait: float) -> None:
        super().__init__(f"Timeout waiting for proof from round {voting_round_id} after {max_wait:.0f}s")
        self.voting_round_id = voting_round_id
        self.max_wait = max_wait


class ProofMismatchError(AttestationError):
    """Raised when the attested payment disagrees with the recorded one."""

    def __init__(self, source_tx_hash: str, recorded_drops: int, attested_drops: int) -> None:
        super().__init__(
            f"Proof for {source_tx_hash} attests {attested_drops} drops received, "
            f"but {recorded_drops} drops were recorded"
        )
        self.source_tx_hash = source_tx_hash
        self.recorded_drops = recorded_drops
        self.attested_drops = attested_drops
