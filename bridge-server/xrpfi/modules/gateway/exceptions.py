"""Destination-chain gateway exceptions."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from xrpfi.modules.chain.exceptions import ChainSubmissionRevertedError, ConfirmationTimeoutError

if TYPE_CHECKING:
    from .models import SplitDeposit


class GatewayError(Exception):
    """Base class for gateway errors."""


class GatewayConfigurationError(GatewayError):
    """Raised when the asset token or a vault is not configured."""


class InsufficientBalanceError(GatewayError):
    def __init__(self, required: Decimal, available: Decimal, symbol: str) -> None:
        super().__init__(f"Insufficient operator balance: need {required} {symbol}, have {available} {symbol}")
        self.required = required
        self.available = available


class DepositNotAllowedError(GatewayError):
    def __init__(self, vault_key: str) -> None:
        super().__init__(f"Vault {vault_key} is not accepting deposits")
        self.vault_key = vault_key


class VaultCapExceededError(GatewayError):
    def __init__(self, vault_key: str, requested: Decimal, available: Decimal, total_assets: Decimal) -> None:
        super().__init__(
            f"Deposit of {requested} exceeds {vault_key} vault capacity: "
            f"{available} available, {total_assets} total assets"
        )
        self.vault_key = vault_key
        self.requested = requested
        self.available = available
        self.total_assets = total_assets


class ShareTransferError(GatewayError):
    """The deposit succeeded but its shares are still held by the operator."""

    def __init__(self, vault_key: str, shares: int, deposit_tx_hash: str, receiver: str, reason: str) -> None:
        super().__init__(
            f"Deposit {deposit_tx_hash} succeeded but transferring {shares} {vault_key} shares "
            f"to {receiver} failed; shares remain with the operator: {reason}"
        )
        self.vault_key = vault_key
        self.shares = shares
        self.deposit_tx_hash = deposit_tx_hash
        self.receiver = receiver


class PartialSplitFailureError(GatewayError):
    def __init__(self, split: "SplitDeposit") -> None:
        failed = ", ".join(f"{leg.vault_key}: {leg.error}" for leg in split.failed)
        super().__init__(f"Split deposit partially failed ({failed})")
        self.split = split


__all__ = [
    "GatewayError",
    "GatewayConfigurationError",
    "InsufficientBalanceError",
    "DepositNotAllowedError",
    "VaultCapExceededError",
    "ShareTransferError",
    "PartialSplitFailureError",
    "ChainSubmissionRevertedError",
    "ConfirmationTimeoutError",
]
