"""Exports for the destination-chain gateway"""

from .exceptions import (
    ChainSubmissionRevertedError,
    ConfirmationTimeoutError,
    DepositNotAllowedError,
    GatewayConfigurationError,
    GatewayError,
    InsufficientBalanceError,
    PartialSplitFailureError,
    ShareTransferError,
    VaultCapExceededError,
)
from .models import (
    Holdings,
    LegResult,
    OperatorBalances,
    SplitDeposit,
    VaultDeposit,
    VaultPosition,
    VaultStatus,
)
from .service import MAX_UINT256, DestinationGateway

__all__ = [
    "DestinationGateway",
    "MAX_UINT256",
    "Holdings",
    "LegResult",
    "OperatorBalances",
    "SplitDeposit",
    "VaultDeposit",
    "VaultPosition",
    "VaultStatus",
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
