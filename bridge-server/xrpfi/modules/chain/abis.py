"""Minimal ABI fragments for the contracts the bridge talks to."""

from __future__ import annotations

from typing import Any, Sequence


def _param(name: str, kind: str, indexed: bool | None = None) -> dict[str, Any]:
    param: dict[str, Any] = {"name": name, "type": kind}
    if indexed is not None:
        param["indexed"] = indexed
    return param


def _function(
    name: str,
    inputs: Sequence[tuple[str, str]] = (),
    outputs: Sequence[str] = (),
    mutability: str = "view",
) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": [_param(n, t) for n, t in inputs],
        "outputs": [_param("", t) for t in outputs],
        "stateMutability": mutability,
    }


ERC20_ABI: list[dict[str, Any]] = [
    _function("balanceOf", [("owner", "address")], ["uint256"]),
    _function("decimals", outputs=["uint8"]),
    _function("symbol", outputs=["string"]),
    _function("allowance", [("owner", "address"), ("spender", "address")], ["uint256"]),
    _function("approve", [("spender", "address"), ("amount", "uint256")], ["bool"], "nonpayable"),
    _function("transfer", [("to", "address"), ("amount", "uint256")], ["bool"], "nonpayable"),
]

ERC4626_ABI: list[dict[str, Any]] = [
    *ERC20_ABI,
    _function("asset", outputs=["address"]),
    _function("totalAssets", outputs=["uint256"]),
    _function("totalSupply", outputs=["uint256"]),
    _function("maxDeposit", [("receiver", "address")], ["uint256"]),
    _function("convertToAssets", [("shares", "uint256")], ["uint256"]),
    _function("deposit", [("assets", "uint256"), ("receiver", "address")], ["uint256"], "nonpayable"),
    {
        "type": "event",
        "name": "Deposit",
        "anonymous": False,
        "inputs": [
            _param("sender", "address", True),
            _param("owner", "address", True),
            _param("assets", "uint256", False),
            _param("shares", "uint256", False),
        ],
    },
]

CONTRACT_REGISTRY_ABI: list[dict[str, Any]] = [
    _function("getContractAddressByName", [("_name", "string")], ["address"]),
]

FDC_HUB_ABI: list[dict[str, Any]] = [
    _function("requestAttestation", [("_data", "bytes")], mutability="payable"),
]

FLARE_SYSTEMS_MANAGER_ABI: list[dict[str, Any]] = [
    _function("getCurrentVotingEpochId", outputs=["uint32"]),
]
