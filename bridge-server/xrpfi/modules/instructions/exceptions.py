"""Instruction codec specific exceptions."""


class InstructionError(Exception):
    """Base class for instruction encoding and decoding errors."""


class MalformedMemoError(InstructionError):
    """Raised when a memo payload is not a 32-byte instruction."""


class UnknownInstructionCodeError(InstructionError):
    """Raised when an instruction code does not map to a known kind."""

    def __init__(self, code: int) -> None:
        super().__init__(f"Unknown instruction code: 0x{code:02x}")
        self.code = code


class InstructionEncodeError(InstructionError, ValueError):
    """Raised when a field does not fit its slot in the memo layout."""
