"""Fixed 32-byte memo layout for bridge instructions.

Standard layout::

    byte  0       instruction code
    byte  1       wallet identifier (0 for independent apps)
    bytes 2..21   vault / agent address (20 bytes)
    bytes 22..25  vault id, big-endian uint32
    bytes 26..31  value in lots, big-endian uint48

Split layout shares the envelope but byte 1 carries the percentage routed to
the first protocol and bytes 2..25 are reserved (zero).

Fields that do not fit their slot are rejected on encode; nothing wraps.
Decoded vault addresses are EIP-55 checksummed.
"""

from __future__ import annotations

import binascii
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from web3 import Web3

from .exceptions import InstructionEncodeError, MalformedMemoError, UnknownInstructionCodeError
from .models import (
    INSTRUCTION_CODES,
    MEMO_LENGTH,
    ZERO_VAULT_ADDRESS,
    Instruction,
    InstructionKind,
)

MAX_VAULT_ID = 2**32 - 1
MAX_LOTS = 2**48 - 1

_KIND_BY_CODE = {code: kind for kind, code in INSTRUCTION_CODES.items()}

MemoInput = Union[bytes, bytearray, str]


def encode(
    kind: InstructionKind,
    vault_address: str | bytes,
    vault_id: int,
    lots: int,
    wallet_id: int = 0,
) -> bytes:
    kind = InstructionKind(kind)
    if kind.is_split:
        raise InstructionEncodeError("split instructions are encoded with encode_split()")
    if not 0 <= wallet_id <= 0xFF:
        raise InstructionEncodeError(f"wallet id out of range: {wallet_id}")
    if not 0 <= vault_id <= MAX_VAULT_ID:
        raise InstructionEncodeError(f"vault id out of range: {vault_id}")

    buffer = bytearray(MEMO_LENGTH)
    buffer[0] = kind.code
    buffer[1] = wallet_id
    buffer[2:22] = _address_bytes(vault_address)
    buffer[22:26] = vault_id.to_bytes(4, "big")
    buffer[26:32] = _lots_bytes(lots)
    return bytes(buffer)


def encode_split(percent_a: float | int | Decimal, total_lots: int) -> bytes:
    percent = Decimal(str(percent_a)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    percent = min(Decimal(100), max(Decimal(0), percent))

    buffer = bytearray(MEMO_LENGTH)
    buffer[0] = InstructionKind.SPLIT.code
    buffer[1] = int(percent)
    buffer[26:32] = _lots_bytes(total_lots)
    return bytes(buffer)


def decode(memo: MemoInput) -> Instruction:
    data = _memo_bytes(memo)
    if len(data) != MEMO_LENGTH:
        raise MalformedMemoError(f"memo must be {MEMO_LENGTH} bytes, got {len(data)}")

    code = data[0]
    lots = int.from_bytes(data[26:32], "big")

    if code == InstructionKind.SPLIT.code:
        percent_a = data[1]
        if percent_a > 100:
            raise MalformedMemoError(f"split percentage out of range: {percent_a}")
        return Instruction(
            code=code,
            wallet_id=0,
            vault_address=ZERO_VAULT_ADDRESS,
            vault_id=0,
            lots=lots,
            split_percent_a=percent_a,
        )

    return Instruction(
        code=code,
        wallet_id=data[1],
        vault_address=Web3.to_checksum_address("0x" + data[2:22].hex()),
        vault_id=int.from_bytes(data[22:26], "big"),
        lots=lots,
    )


def resolve_kind(code: int) -> InstructionKind:
    kind = _KIND_BY_CODE.get(code)
    if kind is None:
        raise UnknownInstructionCodeError(code)
    return kind


def to_memo_hex(memo: bytes) -> str:
    """Upper-case hex, the form XRPL stores in ``MemoData``."""
    return memo.hex().upper()


def amount_to_lots(amount: Decimal, lot_size: Decimal) -> int:
    if lot_size <= 0:
        raise InstructionEncodeError(f"lot size must be positive: {lot_size}")
    return int((Decimal(amount) / lot_size).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _memo_bytes(memo: MemoInput) -> bytes:
    if isinstance(memo, (bytes, bytearray)):
        return bytes(memo)
    text = memo.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as exc:
        raise MalformedMemoError(f"memo is not valid hex: {exc}") from exc


def _address_bytes(address: str | bytes) -> bytes:
    if isinstance(address, (bytes, bytearray)):
        raw = bytes(address)
    else:
        text = address[2:] if address[:2].lower() == "0x" else address
        try:
            raw = bytes.fromhex(text)
        except ValueError as exc:
            raise InstructionEncodeError(f"invalid vault address: {address}") from exc
    if len(raw) != 20:
        raise InstructionEncodeError(f"vault address must be 20 bytes, got {len(raw)}")
    return raw


def _lots_bytes(lots: int) -> bytes:
    if not 0 <= lots <= MAX_LOTS:
        raise InstructionEncodeError(f"lots out of range for 6 bytes: {lots}")
    return lots.to_bytes(6, "big")
