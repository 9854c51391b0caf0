"""Machine memory, paging hardware and machine exceptions."""

from __future__ import annotations

from enum import IntEnum

from ..layout import XSM_INSTRUCTION_SIZE, XSM_MEMORY_NUMPAGES, XSM_PAGE_SIZE
from .word import Word

MEMORY_SIZE = XSM_PAGE_SIZE * XSM_MEMORY_NUMPAGES

INSTR_FETCH = -5
OPER_FETCH = -6
DEBUG_FETCH = -7


class ExceptionType(IntEnum):
    """Causes of a machine exception."""

    PAGEFAULT = 0
    ILLINSTR = 1
    ILLMEM = 2
    ARITH = 3


class MachineException(Exception):
    """An exception raised by the machine, with the faulting address and page."""

    def __init__(
        self,
        message: str,
        type: ExceptionType,
        mode: int,
        ma: int = 0,
        epn: int = 0,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.type = ExceptionType(type)
        self.mode = mode
        self.ma = ma
        self.epn = epn


class TranslationError(Exception):
    """Address translation failed."""

    code = 0


class NoWriteError(TranslationError):
    code = -1


class PageFaultError(TranslationError):
    code = -2


class IllegalPageError(TranslationError):
    code = -3


def page_of(address: int) -> int:
    """Return the page an address lies in."""
    if address < 0:
        raise ValueError(f"negative address {address}")
    return address // XSM_PAGE_SIZE


class Memory:
    """The machine's RAM, a flat array of words."""

    def __init__(self) -> None:
        self.words = [Word() for _ in range(MEMORY_SIZE)]

    def is_valid(self, address: int) -> bool:
        return 0 <= address < MEMORY_SIZE

    def word(self, address: int) -> Word:
        if not self.is_valid(address):
            raise IndexError(f"address {address} is outside memory")
        return self.words[address]

    def page(self, page: int) -> Word:
        """Return the first word of a page."""
        return self.word(page * XSM_PAGE_SIZE)

    def translate_page(self, ptbr: int, ptlr: int, page: int, write: bool) -> int:
        """Return the physical page a logical page maps to."""
        if page < 0 or page >= ptlr:
            raise IllegalPageError(f"page {page} is outside the page table")
        entry = page * 2 + ptbr
        target = self.word(entry).to_int()
        info = self.word(entry + 1).value
        if info[1:2] == "0":
            raise PageFaultError(f"page {page} is not valid")
        if write and info[2:3] == "0":
            raise NoWriteError(f"page {page} is read-only")
        return target

    def translate_address(self, ptbr: int, ptlr: int, address: int, write: bool) -> int:
        """Return the physical address a logical address maps to."""
        if address < 0:
            raise IllegalPageError(f"address {address} is negative")
        target = self.translate_page(ptbr, ptlr, page_of(address), write)
        return target * XSM_PAGE_SIZE + address % XSM_PAGE_SIZE

    def raw_instruction(self, address: int) -> str:
        """Return the text of the instruction stored at address."""
        return "".join(
            self.word(address + offset).value for offset in range(XSM_INSTRUCTION_SIZE)
        )