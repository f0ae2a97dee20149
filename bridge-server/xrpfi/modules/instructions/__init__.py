"""Exports for the instruction memo codec"""

from .codec import (
    amount_to_lots,
    decode,
    encode,
    encode_split,
    resolve_kind,
    to_memo_hex,
)
from .exceptions import (
    InstructionEncodeError,
    InstructionError,
    MalformedMemoError,
    UnknownInstructionCodeError,
)
from .models import INSTRUCTION_CODES, MEMO_LENGTH, Instruction, InstructionKind

__all__ = [
    "INSTRUCTION_CODES",
    "MEMO_LENGTH",
    "Instruction",
    "InstructionKind",
    "InstructionError",
    "InstructionEncodeError",
    "MalformedMemoError",
    "UnknownInstructionCodeError",
    "amount_to_lots",
    "decode",
    "encode",
    "encode_split",
    "resolve_kind",
    "to_memo_hex",
]
