"""Domain representations for memo instructions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

MEMO_LENGTH = 32
ZERO_VAULT_ADDRESS = "0x" + "00" * 20


class InstructionKind(str, Enum):
    FIRELIGHT = "firelight"
    UPSHIFT = "upshift"
    SPLIT = "split"

    @property
    def code(self) -> int:
        return INSTRUCTION_CODES[self]

    @property
    def is_split(self) -> bool:
        return self is InstructionKind.SPLIT


# High nibble = type id, low nibble = command id.
INSTRUCTION_CODES: dict[InstructionKind, int] = {
    InstructionKind.FIRELIGHT: 0x10,
    InstructionKind.UPSHIFT: 0x20,
    InstructionKind.SPLIT: 0x30,
}


@dataclass(frozen=True, slots=True)
class Instruction:
    code: int
    wallet_id: int
    vault_address: str
    vault_id: int
    lots: int
    split_percent_a: Optional[int] = None

    @property
    def split_percent_b(self) -> Optional[int]:
        if self.split_percent_a is None:
            return None
        return 100 - self.split_percent_a

    @property
    def is_split(self) -> bool:
        return self.split_percent_a is not None
