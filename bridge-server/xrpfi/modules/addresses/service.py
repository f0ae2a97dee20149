"""Destination-chain address derivation for XRPL accounts."""

from __future__ import annotations

from web3 import Web3
from xrpl.core.addresscodec import decode_classic_address, is_valid_classic_address


class InvalidXrplAddressError(ValueError):
    """Raised when a string is not a classic XRPL address."""


def is_valid_xrpl_address(address: str) -> bool:
    return bool(address) and is_valid_classic_address(address)


def derive_destination_address(xrpl_address: str) -> str:
    """The 20 account-id bytes of ``xrpl_address`` read as a checksummed EVM address."""
    if not is_valid_xrpl_address(xrpl_address):
        raise InvalidXrplAddressError(f"Invalid XRPL address: {xrpl_address}")
    account_id = decode_classic_address(xrpl_address)
    return Web3.to_checksum_address("0x" + account_id.hex())
