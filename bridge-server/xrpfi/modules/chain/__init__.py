"""Exports for the destination-chain client"""

from .abis import (
    CONTRACT_REGISTRY_ABI,
    ERC20_ABI,
    ERC4626_ABI,
    FDC_HUB_ABI,
    FLARE_SYSTEMS_MANAGER_ABI,
)
from .client import ChainClient, SentTransaction
from .exceptions import (
    ChainConfigurationError,
    ChainError,
    ChainSubmissionRevertedError,
    ConfirmationTimeoutError,
)

__all__ = [
    "CONTRACT_REGISTRY_ABI",
    "ERC20_ABI",
    "ERC4626_ABI",
    "FDC_HUB_ABI",
    "FLARE_SYSTEMS_MANAGER_ABI",
    "ChainClient",
    "SentTransaction",
    "ChainError",
    "ChainConfigurationError",
    "ChainSubmissionRevertedError",
    "ConfirmationTimeoutError",
]
