"""The machine's register file."""

from __future__ import annotations

from ..layout import XSM_NUM_REG
from .word import Word

REGISTER_NAMES = (
    "R0", "R1", "R2", "R3", "R4", "R5", "R6", "R7", "R8", "R9",
    "R10", "R11", "R12", "R13", "R14", "R15", "R16", "R17", "R18", "R19",
    "P0", "P1", "P2", "P3",
    "BP", "SP", "IP", "PTBR", "PTLR", "EIP", "EC", "EPN", "EMA",
)

_PORT_LOW, _PORT_HIGH = 20, 23
_PTBR = 27

_CODES = {name: index for index, name in enumerate(REGISTER_NAMES)}


def register_code(name: str) -> int:
    """Return the index of a register, ignoring case."""
    try:
        return _CODES[name.upper()]
    except KeyError:
        raise KeyError(f"no register named {name!r}") from None


class RegisterFile:
    """All machine registers plus a constant zero register."""

    def __init__(self) -> None:
        self.registers = [Word() for _ in range(XSM_NUM_REG)]
        self.zero = Word(0)

    @property
    def names(self) -> tuple[str, ...]:
        return REGISTER_NAMES

    def __len__(self) -> int:
        return XSM_NUM_REG

    def get(self, name: str) -> Word:
        return self.registers[register_code(name)]

    def get_int(self, name: str) -> int:
        return self.get(name).to_int()

    def get_string(self, name: str) -> str:
        return self.get(name).value

    def store_int(self, name: str, value: int) -> None:
        self.get(name).set_int(value)

    def store_string(self, name: str, text: str) -> None:
        self.get(name).set_string(text)

    def user_mode_allowed(self, name: str) -> bool:
        """Tell whether a user mode program may use the register."""
        try:
            code = register_code(name)
        except KeyError:
            return False
        if _PORT_LOW <= code <= _PORT_HIGH:
            return False
        return code != _PTBR