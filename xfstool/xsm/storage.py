"""The machine's disk: a memory copy of the whole disk image."""

from __future__ import annotations

from pathlib import Path

from ..layout import XSM_PAGE_SIZE, XSM_WORD_SIZE
from .word import Word

DEFAULT_DISK = "../xfs-interface/disk.xfs"

DISK_BLOCK_NUM = 512
DISK_BLOCK_SIZE = XSM_PAGE_SIZE
_BLOCK_BYTES = DISK_BLOCK_SIZE * XSM_WORD_SIZE
_IMAGE_BYTES = _BLOCK_BYTES * DISK_BLOCK_NUM


def _encode(word: Word) -> bytes:
    raw = word.value.encode("latin-1", "replace")[:XSM_WORD_SIZE]
    return raw.ljust(XSM_WORD_SIZE, b"\0")


def _decode(raw: bytes) -> Word:
    return Word(raw.split(b"\0", 1)[0].decode("latin-1"))


class DiskImage:
    """Whole disk held in memory, read from and written back to a file."""

    def __init__(self, path: Path | str = DEFAULT_DISK) -> None:
        self.path = Path(path)
        self._data = bytearray(_IMAGE_BYTES)
        try:
            with open(self.path, "rb") as handle:
                content = handle.read(_IMAGE_BYTES)
        except FileNotFoundError:
            self.path.open("wb").close()
        else:
            self._data[: len(content)] = content

    def __enter__(self) -> DiskImage:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def block(self, number: int) -> memoryview:
        """Return a writable view of the bytes of a block."""
        if not 0 <= number < DISK_BLOCK_NUM:
            raise IndexError(f"block {number} is outside the disk")
        offset = number * _BLOCK_BYTES
        return memoryview(self._data)[offset:offset + _BLOCK_BYTES]

    def write_page(self, words, block: int) -> None:
        """Store a page of words in a block; missing words are left empty."""
        words = list(words)
        if len(words) > XSM_PAGE_SIZE:
            raise ValueError(f"a page holds at most {XSM_PAGE_SIZE} words")
        data = b"".join(_encode(word) for word in words).ljust(_BLOCK_BYTES, b"\0")
        self.block(block)[:] = data

    def read_block(self, block: int) -> list[Word]:
        """Return the words of a block as a page."""
        data = self.block(block).tobytes()
        return [
            _decode(data[offset:offset + XSM_WORD_SIZE])
            for offset in range(0, _BLOCK_BYTES, XSM_WORD_SIZE)
        ]

    def close(self, path: Path | str | None = None) -> int:
        """Write the whole image to path, or to the file it came from; return bytes written."""
        target = self.path if path is None else Path(path)
        with open(target, "wb") as handle:
            return handle.write(self._data)