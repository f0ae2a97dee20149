"""Attestation data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(slots=True)
class PaymentProof:
    voting_round_id: int
    request_bytes: str
    merkle_proof: list[str] = field(default_factory=list)
    data: Any = None

    @property
    def response_body(self) -> Optional[dict[str, Any]]:
        """Decoded Payment ``responseBody`` when the DA layer returned JSON rather than raw hex."""
        if not isinstance(self.data, dict):
            return None
        body = self.data.get("responseBody")
        if body is None and isinstance(self.data.get("response"), dict):
            body = self.data["response"].get("responseBody")
        return body if isinstance(body, dict) else None

    @property
    def received_drops(self) -> Optional[int]:
        body = self.response_body
        if body is None or body.get("receivedAmount") is None:
            return None
        return int(body["receivedAmount"])


def to_bytes32_hex(value: str) -> str:
    """UTF-8 bytes of ``value`` right-padded with zeros to 32 bytes, 0x-prefixed."""
    raw = value.encode("utf-8")[:32]
    return "0x" + raw.ljust(32, b"\x00").hex()
