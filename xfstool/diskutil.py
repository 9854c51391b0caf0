"""High level operations on an XFS disk: loading, listing, exporting and removing files."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from itertools import takewhile
from pathlib import Path

from . import layout
from .disk import VirtualDisk, XFSFile
from .inode import InodeTable
from .labels import LabelError, LabelResolver
from .layout import BLOCK_SIZE, FileType

ASSEMBLY_CODE = 0
DATA_FILE = 1

# A source line is read at most this many characters at a time.
_CODE_LINE_LIMIT = 99
# A data word holds at most this many characters.
_DATA_WORD_LIMIT = layout.XSM_WORD_SIZE - 1
_C_SPACE = " \t\n\v\f\r"


class XFSError(Exception):
    """Raised when an operation on the XFS disk cannot be carried out."""


def trim(text: str) -> str:
    """Remove leading and trailing whitespace."""
    return text.strip(_C_SPACE)


def expand_path(path: str) -> str:
    """Replace the first path component by an environment variable it names.

    The first character of the component is skipped when looking the name
    up, so "$HOME/x" expands $HOME; unknown names are left as they are.
    """
    head, sep, rest = path.partition("/")
    value = os.environ.get(head[1:]) if len(head) > 1 else None
    if value is not None:
        head = value
    return head + sep + rest


def add_extension(name: str, ext: str) -> str:
    """Append ext unless present, keeping the result shorter than a word."""
    if len(name) >= layout.WORD_SIZE:
        return name[:11] + ext
    if not name.endswith(ext):
        name += ext
        if len(name) >= layout.WORD_SIZE:
            return name[:11] + ext
    return name


def _records(text: str, limit: int) -> Iterator[str]:
    """Yield the pieces a bounded line reader returns.

    A piece ends after a newline or after limit characters; a last piece
    cut short by the end of the text counts as end of input and is dropped.
    """
    pos = 0
    while pos < len(text):
        newline = text.find("\n", pos, pos + limit)
        if newline != -1:
            yield text[pos:newline + 1]
            pos = newline + 1
        elif len(text) - pos >= limit:
            yield text[pos:pos + limit]
            pos += limit
        else:
            return


def data_word_count(text: str) -> int:
    """Return the number of words a data file occupies on disk."""
    return sum(1 for _ in _records(text, _DATA_WORD_LIMIT))


def _strtok(text: str | None, delims: str) -> tuple[str | None, str | None]:
    """Split off the next token, returning it and the text after its delimiter."""
    if text is None:
        return None, None
    body = text.lstrip(delims)
    if not body:
        return None, None
    positions = [pos for pos in (body.find(ch) for ch in delims) if pos >= 0]
    if not positions:
        return body, None
    end = min(positions)
    return body[:end], body[end + 1:]


def _assemble_line(line: str) -> list[str]:
    """Turn one source line into the disk words it occupies."""
    quote = line.find('"')
    if quote == -1 or len(line) - quote <= 16:
        buffer = line[:31]
    else:
        buffer = line[:quote + 14] + '"'
    if len(buffer) <= 1:
        return []
    if buffer.endswith("\n"):
        buffer = buffer[:-1]

    instr, rest = _strtok(buffer, " ")
    if instr is None:
        return []
    arg1, rest = _strtok(rest, ",")
    arg2, _ = _strtok(rest, "")

    opcode = trim(instr)
    if opcode[:1].isdigit() and opcode[:1].isascii():
        return [opcode]
    if arg1 is not None:
        first = trim(arg1)
        if arg2 is not None:
            first += ","
        second = trim(arg2) if arg2 is not None else ""
        return [f"{opcode} {first}", second]
    return [instr, ""]


def _read_text(path: str) -> str:
    with open(path, encoding="latin-1", newline="") as handle:
        return handle.read()


def _xfs_name(path: str, ext: str) -> str:
    return add_extension(path.rsplit("/", 1)[-1][:15], ext)


class XFS:
    """File system operations on a virtual disk."""

    def __init__(self, disk: VirtualDisk) -> None:
        self.disk = disk
        self.inodes = InodeTable(disk)

    def list_files(self) -> list[XFSFile]:
        """Return the files on the disk."""
        return self.disk.list_files()

    def delete_file(self, name: str) -> None:
        """Remove a file and release its blocks, committing the change."""
        if name == "root":
            raise XFSError("Root file cannot be deleted")
        self.disk.check_exists()
        location = self.inodes.find(name)
        if location is None:
            raise XFSError(f"File '{name}' not found!")
        self.disk.free_blocks(self.inodes.data_blocks(location))
        self.inodes.remove_entry(location)
        self.disk.commit(layout.INODE)
        self.disk.commit(layout.DISK_FREE_LIST)

    def clear_blocks(self, start: int, count: int) -> None:
        """Overwrite count blocks from start with empty words."""
        self.disk.empty_block(layout.TEMP_BLOCK)
        for block in range(start, start + count):
            self.disk.write_block(layout.TEMP_BLOCK, block)

    def delete_init(self) -> None:
        self.clear_blocks(layout.INIT_BLOCK, layout.NO_OF_INIT_BLOCKS)

    def delete_os_code(self) -> None:
        self.clear_blocks(layout.OS_STARTUP_CODE, layout.OS_STARTUP_CODE_SIZE)

    def delete_timer(self) -> None:
        self.clear_blocks(layout.TIMERINT, layout.TIMERINT_SIZE)

    def delete_disk_controller_int(self) -> None:
        self.clear_blocks(layout.DISKCONTROLLER_INT, layout.DISKCONTROLLER_INT_SIZE)

    def delete_console_int(self) -> None:
        self.clear_blocks(layout.CONSOLE_INT, layout.CONSOLE_INT_SIZE)

    def delete_int(self, number: int) -> None:
        start = (number - 1) * layout.INT1_SIZE + layout.INT1
        self.clear_blocks(start, layout.INT1_SIZE)

    def delete_exhandler(self) -> None:
        self.clear_blocks(layout.EX_HANDLER, layout.EX_HANDLER_SIZE)

    def write_block_from(self, lines: Iterable[str], block: int, kind: int) -> bool:
        """Fill one disk block from lines and write it.

        lines is consumed as an iterator, so successive calls with the same
        iterator continue where the previous one stopped. Returns True when
        the block was filled and False when the input ran out.
        """
        if kind not in (ASSEMBLY_CODE, DATA_FILE):
            raise ValueError(f"unknown block kind {kind}")
        lines = iter(lines)
        base = layout.TEMP_BLOCK * BLOCK_SIZE
        self.disk.empty_block(layout.TEMP_BLOCK)

        if kind == ASSEMBLY_CODE:
            count = 0
            while count < BLOCK_SIZE:
                line = next(lines, None)
                if line is None:
                    self.disk.write_block(layout.TEMP_BLOCK, block)
                    return False
                for word in _assemble_line(line):
                    if count < BLOCK_SIZE:
                        self.disk.store_string_at(base + count, word)
                    count += 1
        else:
            for index in range(BLOCK_SIZE):
                word = next(lines, None)
                if word is None:
                    self.disk.write_block(layout.TEMP_BLOCK, block)
                    return False
                self.disk.store_string_at(base + index, word)

        self.disk.write_block(layout.TEMP_BLOCK, block)
        return True

    def _allocate(self, count: int, message: str) -> list[int]:
        blocks: list[int] = []
        for _ in range(count):
            block = self.disk.find_free_block()
            if block is None:
                self.disk.free_blocks(blocks)
                raise XFSError(message)
            blocks.append(block)
        return blocks

    def _store_file(
        self,
        name: str,
        needed: int,
        file_type: FileType,
        size: int,
        records: Iterator[str],
        kind: int,
        no_space: str,
    ) -> None:
        blocks = self._allocate(needed, no_space)
        if self.inodes.find(name) is not None:
            self.disk.free_blocks(blocks)
            raise XFSError(
                "Disk already contains the file with this name. "
                "Try again with a different name."
            )
        index = self.inodes.find_empty()
        if index is None:
            self.disk.free_blocks(blocks)
            raise XFSError("No free INODE entry found.")
        self.disk.commit(layout.DISK_FREE_LIST)
        for block in blocks:
            self.write_block_from(records, block, kind)
        self.inodes.add_entry(index, file_type, name, size, blocks)
        self.disk.commit(layout.INODE)

    def load_executable(self, path: str) -> None:
        """Store an assembly program as an executable file."""
        name = _xfs_name(path, ".xsm")
        source = expand_path(path)
        try:
            text = _read_text(source)
        except OSError as exc:
            raise XFSError(f"File {source} not found.") from exc
        lines = text.count("\n")
        needed = lines // (BLOCK_SIZE // 2) + 1
        if needed > layout.INODE_MAX_BLOCK_NUM:
            raise XFSError(f"The size of file exceeds {layout.INODE_MAX_BLOCK_NUM} blocks")
        self._store_file(
            name,
            needed,
            FileType.EXEC,
            lines * 2,
            _records(text, _CODE_LINE_LIMIT),
            ASSEMBLY_CODE,
            "Insufficient disk space!",
        )

    def load_data(self, path: str) -> None:
        """Store a text file as a data file, one word per line piece."""
        name = _xfs_name(path, ".dat")
        source = expand_path(path)
        try:
            text = _read_text(source)
        except OSError as exc:
            raise XFSError(f"File '{source}' not found.!") from exc
        words = data_word_count(text)
        needed = -(-words // BLOCK_SIZE)
        if needed > layout.INODE_MAX_BLOCK_NUM:
            raise XFSError(
                f"The size of file exceeds {layout.INODE_MAX_BLOCK_NUM} blocks\n"
                f"The file contains {words} words, an xfs file can have only upto "
                f"{layout.INODE_MAX_BLOCK_NUM * BLOCK_SIZE} words"
            )
        self._store_file(
            name,
            needed,
            FileType.DATA,
            words,
            _records(text, _DATA_WORD_LIMIT),
            DATA_FILE,
            "Disk does not have enough space to contain the file.",
        )

    def _write_code(self, records: Iterator[str], start: int, count: int) -> None:
        for block in range(start, start + count):
            if not self.write_block_from(records, block, ASSEMBLY_CODE):
                return
        self.clear_blocks(start, count)
        raise XFSError(f"Code exceeds {count} block")

    def load_code(self, path: str, start_block: int, count: int) -> None:
        """Store assembly code in count blocks from start_block."""
        source = expand_path(path)
        try:
            text = _read_text(source)
        except OSError as exc:
            raise XFSError(f"File {source} not found.") from exc
        self._write_code(_records(text, _CODE_LINE_LIMIT), start_block, count)

    def load_code_with_labels(
        self, path: str, start_block: int, count: int, mem_page: int
    ) -> None:
        """Store assembly code with labels replaced by addresses in mem_page."""
        source = expand_path(path)
        try:
            text = _read_text(source)
        except OSError as exc:
            raise XFSError("Can't open source file.") from exc
        try:
            resolved = LabelResolver().resolve(
                text.split("\n"), mem_page * layout.PAGE_SIZE
            )
        except LabelError as exc:
            raise XFSError(str(exc)) from exc
        code = "".join(f"{line}\n" for line in resolved)
        self._write_code(_records(code, _CODE_LINE_LIMIT), start_block, count)

    def load_init(self, path: str) -> None:
        self.load_code(path, layout.INIT_BLOCK, layout.NO_OF_INIT_BLOCKS)

    def load_idle(self, path: str) -> None:
        self.load_code(path, layout.IDLE_BLOCK, layout.NO_OF_IDLE_BLOCKS)

    def load_shell(self, path: str) -> None:
        self.load_code(path, layout.SHELL_BLOCK, layout.NO_OF_SHELL_BLOCKS)

    def load_library(self, path: str) -> None:
        self.load_code(path, layout.LIBRARY_BLOCK, layout.NO_OF_LIBRARY_BLOCKS)

    def load_os(self, path: str) -> None:
        self.load_code_with_labels(
            path, layout.OS_STARTUP_CODE, layout.OS_STARTUP_CODE_SIZE,
            layout.MEM_OS_STARTUP_CODE,
        )

    def load_disk_controller_int(self, path: str) -> None:
        self.load_code_with_labels(
            path, layout.DISKCONTROLLER_INT, layout.DISKCONTROLLER_INT_SIZE,
            layout.MEM_DISKCONTROLLER_INT,
        )

    def load_console_int(self, path: str) -> None:
        self.load_code_with_labels(
            path, layout.CONSOLE_INT, layout.CONSOLE_INT_SIZE, layout.MEM_CONSOLE_INT
        )

    def load_int(self, path: str, number: int) -> None:
        self.load_code_with_labels(
            path,
            (number - 1) * layout.INT_SIZE + layout.INT1,
            layout.INT_SIZE,
            (number - 1) * layout.MEM_INT_SIZE + layout.MEM_INT1,
        )

    def load_module(self, path: str, number: int) -> None:
        self.load_code_with_labels(
            path,
            number * layout.MOD_SIZE + layout.MOD0,
            layout.MOD_SIZE,
            number * layout.MEM_MOD_SIZE + layout.MEM_MOD0,
        )

    def load_timer(self, path: str) -> None:
        self.load_code_with_labels(
            path, layout.TIMERINT, layout.TIMERINT_SIZE, layout.MEM_TIMERINT
        )

    def load_exhandler(self, path: str) -> None:
        self.load_code_with_labels(
            path, layout.EX_HANDLER, layout.EX_HANDLER_SIZE, layout.MEM_EX_HANDLER
        )

    def _file_blocks(self, name: str) -> list[int]:
        self.disk.check_exists()
        location = self.inodes.find(name)
        if location is None:
            raise XFSError(f"File '{name}' not found!")
        return list(takewhile(lambda block: block > 0, self.inodes.data_blocks(location)))

    def _block_words(self, block: int) -> list[str]:
        self.disk.empty_block(layout.TEMP_BLOCK)
        self.disk.read_block(layout.TEMP_BLOCK, block)
        words = list(self.disk.blocks[layout.TEMP_BLOCK])
        self.disk.empty_block(layout.TEMP_BLOCK)
        return words

    def file_contents(self, name: str) -> list[str]:
        """Return the non-empty words of a file, in order."""
        return [
            word
            for block in self._file_blocks(name)
            for word in self._block_words(block)
            if word
        ]

    @staticmethod
    def _open_output(path: str):
        target = expand_path(path)
        try:
            return open(target, "w", encoding="latin-1", newline="")
        except OSError as exc:
            raise XFSError(f"File '{target}' not found!") from exc

    def copy_blocks(self, start: int, end: int, path: str) -> None:
        """Write every word of blocks start..end, one per line, to a file."""
        self.disk.check_exists()
        with self._open_output(path) as handle:
            for block in range(start, end + 1):
                handle.writelines(f"{word}\n" for word in self._block_words(block))

    def free_list(self) -> list[str]:
        """Return the words of the disk free list; "0" marks a free block."""
        self.disk.check_exists()
        return [
            word
            for block in range(
                layout.DISK_FREE_LIST,
                layout.DISK_FREE_LIST + layout.NO_OF_FREE_LIST_BLOCKS,
            )
            for word in self.disk.blocks[block]
        ]

    def format(self, format: int) -> None:
        """Create the disk file and, when format is true, lay out a fresh file system."""
        self.disk.create(layout.DISK_NO_FORMAT)
        if not format:
            return
        self.disk.clear()
        self.disk.set_default_values(layout.DISK_FREE_LIST)
        self.disk.commit(layout.DISK_FREE_LIST)
        self.disk.set_default_values(layout.INODE)
        self.disk.set_default_values(layout.ROOTFILE)
        root_blocks = [
            layout.ROOTFILE + offset for offset in range(layout.NO_OF_ROOTFILE_BLOCKS)
        ]
        self.inodes.add_entry(
            0,
            FileType.ROOT,
            "root",
            layout.NO_OF_ROOTFILE_BLOCKS * BLOCK_SIZE,
            root_blocks,
        )
        for offset, value in enumerate(("kernel", "-1", "root", "452")):
            self.disk.store_string_at(layout.USER_TABLE_BASE + offset, value)
        self.disk.commit(layout.INODE)
        self.disk.commit(layout.ROOTFILE)

    def dump_root_file(self, path: str) -> None:
        self.copy_blocks(
            layout.ROOTFILE, layout.ROOTFILE + layout.NO_OF_ROOTFILE_BLOCKS - 1, path
        )

    def dump_inode_table(self, path: str) -> None:
        self.copy_blocks(layout.INODE, layout.INODE + layout.NO_OF_INODE_BLOCKS - 1, path)

    def export_file(self, name: str, unix_path: str | Path) -> None:
        """Write every word of a file, one per line, to a host file."""
        blocks = self._file_blocks(name)
        with self._open_output(str(unix_path)) as handle:
            for block in blocks:
                handle.writelines(f"{word}\n" for word in self._block_words(block))