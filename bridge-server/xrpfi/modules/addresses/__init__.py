"""Exports for cross-chain address derivation"""

from .service import InvalidXrplAddressError, derive_destination_address, is_valid_xrpl_address

__all__ = [
    "InvalidXrplAddressError",
    "derive_destination_address",
    "is_valid_xrpl_address",
]
