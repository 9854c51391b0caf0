"""Resolution of symbolic jump and call targets in assembly code."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from .layout import XSM_INSTRUCTION_SIZE

_SEPARATORS = re.compile(r"[ ,]+")
_JUMPS = {"JMP", "CALL"}
_CONDITIONAL_JUMPS = {"JNZ", "JZ"}


class LabelError(Exception):
    """Raised when a jump target names a label that is not defined."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Can not resolve label "{name}".')
        self.name = name


def _strip_newline(line: str) -> str:
    return line.rstrip("\r\n")


def _is_blank(line: str) -> bool:
    return not line.strip()


def is_label(line: str) -> bool:
    """Tell whether a line is a label definition."""
    return line.endswith(":")


def label_name(line: str) -> str:
    """Return the name defined by a label line."""
    return next((part for part in line.split(":") if part), "")


def is_charstring(text: str | None) -> bool:
    """Tell whether text holds at least one letter."""
    if not text:
        return False
    return any(char.isascii() and char.isalpha() for char in text)


class LabelResolver:
    """Two-pass replacement of label targets by memory addresses."""

    def __init__(self) -> None:
        self.labels: dict[str, int] = {}

    def reset(self) -> None:
        """Forget all collected labels."""
        self.labels.clear()

    def collect(self, lines: Iterable[str]) -> None:
        """Record the code address of every label in lines."""
        address = 0
        for raw in lines:
            line = _strip_newline(raw)
            if _is_blank(line):
                continue
            if is_label(line):
                self.labels[label_name(line)] = address
            else:
                address += XSM_INSTRUCTION_SIZE

    def target(self, name: str) -> int | None:
        """Return the address of a label, or None when it is unknown."""
        return self.labels.get(name)

    def translate(self, lines: Iterable[str], base_address: int) -> Iterator[str]:
        """Yield the code without labels, jump targets replaced by addresses."""
        for raw in lines:
            line = _strip_newline(raw)
            if _is_blank(line) or is_label(line):
                continue

            tokens = [token for token in _SEPARATORS.split(line) if token]
            if not tokens:
                yield line
                continue
            opcode = tokens[0]
            left = tokens[1] if len(tokens) > 1 else None
            right = tokens[2] if len(tokens) > 2 else None

            upper = opcode.upper()
            separator = ""
            if upper in _JUMPS:
                right, left = left, ""
            elif upper in _CONDITIONAL_JUMPS:
                separator = ", "
            else:
                yield line
                continue

            if not is_charstring(right):
                yield line
                continue
            address = self.target(right)
            if address is None:
                raise LabelError(right)
            yield f"{opcode} {left or ''}{separator}{address + base_address}"

    def resolve(self, lines: Iterable[str], base_address: int) -> list[str]:
        """Resolve all labels of a fresh piece of code and return its lines."""
        source = list(lines)
        self.reset()
        self.collect(source)
        return list(self.translate(source, base_address))