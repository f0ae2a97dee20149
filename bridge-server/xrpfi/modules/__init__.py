"""Feature modules and shared exports."""

from . import addresses, attestation, chain, executor, gateway, instructions, listener, quotes, transactions

__all__ = [
    "addresses",
    "attestation",
    "chain",
    "executor",
    "gateway",
    "instructions",
    "listener",
    "quotes",
    "transactions",
]
