"""Machine words: short strings that double as integers."""

from __future__ import annotations

from enum import IntEnum

from ..disk import get_value
from ..layout import XSM_WORD_SIZE


class WordType(IntEnum):
    """What a word holds when read as a host value."""

    STRING = 0
    INTEGER = 1


class Word:
    """A single machine word holding at most XSM_WORD_SIZE characters."""

    __slots__ = ("value",)

    def __init__(self, value: str | int = "") -> None:
        self.value = ""
        if isinstance(value, int):
            self.set_int(value)
        else:
            self.set_string(value)

    def __repr__(self) -> str:
        return f"Word({self.value!r})"

    def __str__(self) -> str:
        return self.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Word):
            return self.value == other.value
        return NotImplemented

    __hash__ = None  # words are mutable

    def unix_type(self) -> WordType:
        """Return INTEGER for an optional sign followed by digits only, else STRING."""
        body = self.value[1:] if self.value[:1] in ("+", "-") else self.value
        if all("0" <= char <= "9" for char in body):
            return WordType.INTEGER
        return WordType.STRING

    def to_int(self) -> int:
        """Return the leading integer of the word, or 0 when there is none."""
        return get_value(self.value)

    def set_int(self, value: int) -> None:
        self.value = str(int(value))[:XSM_WORD_SIZE]

    def set_string(self, text: str) -> None:
        self.value = text.split("\0", 1)[0][:XSM_WORD_SIZE]

    def copy_from(self, other: Word) -> None:
        self.value = other.value

    def encrypt(self) -> None:
        """Replace the word by the signed sum of the bytes of its storage."""
        raw = self.value.encode("latin-1", "replace")[:XSM_WORD_SIZE]
        raw = raw.ljust(XSM_WORD_SIZE, b"\0")
        total = sum(byte - 256 if byte >= 128 else byte for byte in raw)
        self.set_int(total)