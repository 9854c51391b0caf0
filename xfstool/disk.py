"""The disk file and its in-memory copy of the reserved blocks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from . import layout
from .layout import BLOCK_BYTES, BLOCK_SIZE, WORD_SIZE

_ATOI = re.compile(r"\s*([+-]?\d+)")


def get_value(text: str) -> int:
    """Read the leading integer of a word, or 0 when there is none."""
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def _encode_word(text: str) -> bytes:
    return text.encode("latin-1", "replace")[:WORD_SIZE].ljust(WORD_SIZE, b"\0")


def _decode_word(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("latin-1")


def _fit(text: str) -> str:
    return _decode_word(_encode_word(text))


class DiskError(Exception):
    """Raised when the disk file cannot be used."""

    message = "Disk error"

    def __init__(self, path: Path | str) -> None:
        super().__init__(self.message)
        self.path = Path(path)


class DiskOpenError(DiskError):
    message = "Unable to open disk file"


class DiskCreateError(DiskError):
    message = "Failed to create disk file"


@dataclass(frozen=True)
class XFSFile:
    """A file listed in the inode table."""

    name: str
    size: int


class VirtualDisk:
    """Memory copy of the reserved disk blocks, backed by a disk file."""

    def __init__(self, path: Path | str = layout.DISK_NAME) -> None:
        self.path = Path(path)
        self.blocks: list[list[str]] = []
        self.clear()

    # Disk file access.

    def _open(self, mode: str):
        try:
            return open(self.path, mode)
        except OSError as exc:
            raise DiskOpenError(self.path) from exc

    def read_block(self, virt_block: int, file_block: int) -> None:
        """Copy a block of the disk file into a block of the memory copy."""
        with self._open("rb") as handle:
            handle.seek(BLOCK_BYTES * file_block)
            data = handle.read(BLOCK_BYTES)
        words = self.blocks[virt_block]
        for index, offset in enumerate(range(0, len(data), WORD_SIZE)):
            words[index] = _decode_word(data[offset:offset + WORD_SIZE])

    def write_block(self, virt_block: int, file_block: int) -> None:
        """Copy a block of the memory copy into a block of the disk file."""
        data = b"".join(_encode_word(word) for word in self.blocks[virt_block])
        with self._open("r+b") as handle:
            handle.seek(BLOCK_BYTES * file_block)
            handle.write(data)

    def create(self, format: int) -> None:
        """Create the disk file, truncating it when format is DISK_FORMAT."""
        mode = "wb" if format == layout.DISK_FORMAT else "ab"
        try:
            with open(self.path, mode):
                pass
        except OSError as exc:
            raise DiskCreateError(self.path) from exc

    def check_exists(self) -> None:
        """Raise DiskOpenError unless the disk file can be opened."""
        with self._open("rb"):
            pass

    # Memory copy.

    def empty_block(self, block: int) -> None:
        self.blocks[block] = [""] * BLOCK_SIZE

    def free_blocks(self, blocks) -> None:
        """Mark blocks free and zero them on disk, stopping at None, -1 or 0."""
        base = layout.DISK_FREE_LIST * BLOCK_SIZE
        for block in blocks:
            if block is None or block in (-1, 0):
                break
            self.store_value_at(base + block, 0)
            self.empty_block(layout.TEMP_BLOCK)
            self.write_block(layout.TEMP_BLOCK, block)

    def find_free_block(self) -> int | None:
        """Claim the first free block in the free list and return its number."""
        for offset in range(layout.NO_OF_FREE_LIST_BLOCKS):
            words = self.blocks[layout.DISK_FREE_LIST + offset]
            for index, word in enumerate(words):
                if get_value(word) == 0:
                    words[index] = "1"
                    return offset * BLOCK_SIZE + index
        return None

    def set_default_values(self, structure: int) -> None:
        """Fill the free list, inode table or root file with fresh values."""
        if structure == layout.DISK_FREE_LIST:
            for j in range(layout.NO_OF_FREE_LIST_BLOCKS * BLOCK_SIZE):
                used = not layout.DATA_START_BLOCK <= j < layout.NO_OF_DISK_BLOCKS
                block = self.blocks[layout.DISK_FREE_LIST + j // BLOCK_SIZE]
                block[j % BLOCK_SIZE] = "1" if used else "0"
        elif structure == layout.INODE:
            for block_index in range(layout.NO_OF_INODE_BLOCKS):
                words = self.blocks[layout.INODE + block_index]
                table_end = min(
                    BLOCK_SIZE, layout.INODE_TABLE_WORDS - block_index * BLOCK_SIZE
                )
                words[:] = ["-1"] * BLOCK_SIZE
                for entry in range(0, table_end, layout.INODE_ENTRY_SIZE):
                    words[entry + layout.INODE_ENTRY_FILESIZE] = "0"
        elif structure == layout.ROOTFILE:
            for block_index in range(layout.NO_OF_ROOTFILE_BLOCKS):
                words = self.blocks[layout.ROOTFILE + block_index]
                words[:] = ["-1"] * BLOCK_SIZE
                for entry in range(0, BLOCK_SIZE, layout.ROOTFILE_ENTRY_SIZE):
                    words[entry + layout.ROOTFILE_ENTRY_FILESIZE] = "0"
        else:
            raise ValueError(f"unknown disk structure {structure}")

    def commit(self, structure: int) -> None:
        """Write a structure to the disk file; the inode table takes the root file along."""
        if structure == layout.DISK_FREE_LIST:
            regions = [(layout.DISK_FREE_LIST, layout.NO_OF_FREE_LIST_BLOCKS)]
        elif structure == layout.INODE:
            regions = [
                (layout.INODE, layout.NO_OF_INODE_BLOCKS),
                (layout.ROOTFILE, layout.NO_OF_ROOTFILE_BLOCKS),
            ]
        elif structure == layout.ROOTFILE:
            regions = [(layout.ROOTFILE, layout.NO_OF_ROOTFILE_BLOCKS)]
        else:
            raise ValueError(f"unknown disk structure {structure}")
        for start, count in regions:
            for block in range(start, start + count):
                self.write_block(block, block)

    def list_files(self) -> list[XFSFile]:
        """Return the files recorded in the inode table, in table order."""
        self.check_exists()
        files = []
        for block_index in range(layout.NO_OF_INODE_BLOCKS):
            words = self.blocks[layout.INODE + block_index]
            table_end = min(
                BLOCK_SIZE, layout.INODE_TABLE_WORDS - block_index * BLOCK_SIZE
            )
            for entry in range(0, table_end, layout.INODE_ENTRY_SIZE):
                name = words[entry + layout.INODE_ENTRY_FILENAME]
                if get_value(name) == -1:
                    continue
                size = get_value(words[entry + layout.INODE_ENTRY_FILESIZE])
                files.append(XFSFile(name, size))
        return files

    def load(self) -> None:
        """Fill the memory copy of the free list, inode table and root file from disk."""
        regions = (
            (layout.DISK_FREE_LIST, layout.NO_OF_FREE_LIST_BLOCKS),
            (layout.INODE, layout.NO_OF_INODE_BLOCKS),
            (layout.ROOTFILE, layout.NO_OF_ROOTFILE_BLOCKS),
        )
        for start, count in regions:
            for block in range(start, start + count):
                self.read_block(block, block)

    def clear(self) -> None:
        """Wipe the whole memory copy."""
        self.blocks = [[""] * BLOCK_SIZE for _ in range(layout.VIRTUAL_BLOCKS)]

    # Word access by address within the memory copy.

    def get_string_at(self, address: int) -> str:
        return self.blocks[address // BLOCK_SIZE][address % BLOCK_SIZE]

    def get_value_at(self, address: int) -> int:
        return get_value(self.get_string_at(address))

    def store_value_at(self, address: int, value: int) -> None:
        self.store_string_at(address, str(value))

    def store_string_at(self, address: int, value: str) -> None:
        self.blocks[address // BLOCK_SIZE][address % BLOCK_SIZE] = _fit(value)