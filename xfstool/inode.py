"""Inode table and root file entries kept in the memory copy of the disk."""

from __future__ import annotations

from collections.abc import Iterable

from . import layout
from .disk import VirtualDisk, get_value
from .layout import BLOCK_SIZE, FileType

_OWNERSHIP = {
    FileType.ROOT: (0, 0),
    FileType.DATA: (1, 1),
    FileType.EXEC: (0, -1),
}


def _entry_locations() -> range:
    """Relative word addresses of every entry in the inode table."""
    return range(0, layout.INODE_TABLE_WORDS, layout.INODE_ENTRY_SIZE)


class InodeTable:
    """Reads and edits the inode table and the root file of a virtual disk.

    Locations are word offsets relative to the start of the inode table
    (or of the root file) pointing at the first word of an entry.
    Nothing is committed to the disk file here.
    """

    def __init__(self, disk: VirtualDisk) -> None:
        self.disk = disk
        self._inode_base = layout.INODE * BLOCK_SIZE
        self._root_base = layout.ROOTFILE * BLOCK_SIZE

    def find_empty(self) -> int | None:
        """Return the location of the first unused entry, or None when full."""
        for location in _entry_locations():
            address = self._inode_base + location + layout.INODE_ENTRY_FILENAME
            if self.disk.get_value_at(address) == -1:
                return location
        return None

    def add_root_entry(self, index: int, file_type: int, name: str, size: int) -> None:
        """Record name, size and type of a file in the root file."""
        base = self._root_base + index
        self.disk.store_string_at(base + layout.ROOTFILE_ENTRY_FILENAME, name)
        self.disk.store_value_at(base + layout.ROOTFILE_ENTRY_FILESIZE, size)
        self.disk.store_value_at(base + layout.ROOTFILE_ENTRY_FILETYPE, int(file_type))

    def add_entry(
        self,
        index: int,
        file_type: int,
        name: str,
        size: int,
        data_blocks: Iterable[int],
    ) -> None:
        """Fill the inode entry at index and the matching root file entry."""
        base = self._inode_base + index
        self.disk.store_value_at(base + layout.INODE_ENTRY_FILETYPE, int(file_type))
        self.disk.store_string_at(base + layout.INODE_ENTRY_FILENAME, name)
        self.disk.store_value_at(base + layout.INODE_ENTRY_FILESIZE, size)

        try:
            ownership = _OWNERSHIP.get(FileType(file_type))
        except ValueError:
            ownership = None
        if ownership is not None:
            user_id, permission = ownership
            self.disk.store_value_at(base + layout.INODE_ENTRY_USERID, user_id)
            self.disk.store_value_at(base + layout.INODE_ENTRY_PERMISSION, permission)

        blocks = list(data_blocks)[: layout.INODE_NUM_DATA_BLOCKS]
        blocks += [-1] * (layout.INODE_NUM_DATA_BLOCKS - len(blocks))
        for offset, block in enumerate(blocks):
            self.disk.store_value_at(base + layout.INODE_ENTRY_DATABLOCK + offset, block)

        root_index = index // layout.INODE_ENTRY_SIZE * layout.ROOTFILE_ENTRY_SIZE
        self.add_root_entry(root_index, file_type, name, size)

    def remove_root_entry(self, location: int) -> None:
        """Mark the root file entry at location as unused."""
        base = self._root_base + location
        self.disk.store_value_at(base + layout.ROOTFILE_ENTRY_FILETYPE, -1)
        self.disk.store_value_at(base + layout.ROOTFILE_ENTRY_FILENAME, -1)
        self.disk.store_value_at(base + layout.ROOTFILE_ENTRY_FILESIZE, 0)

    def remove_entry(self, location: int) -> None:
        """Mark the inode entry at location, and its root file entry, as unused."""
        base = self._inode_base + location
        self.disk.store_value_at(base + layout.INODE_ENTRY_FILETYPE, -1)
        self.disk.store_value_at(base + layout.INODE_ENTRY_FILENAME, -1)
        self.disk.store_value_at(base + layout.INODE_ENTRY_FILESIZE, 0)
        self.disk.store_value_at(base + layout.INODE_ENTRY_USERID, -1)
        self.disk.store_value_at(base + layout.INODE_ENTRY_PERMISSION, -1)
        for offset in range(layout.INODE_NUM_DATA_BLOCKS):
            self.disk.store_value_at(base + layout.INODE_ENTRY_DATABLOCK + offset, -1)
        root_location = location // layout.INODE_ENTRY_SIZE * layout.ROOTFILE_ENTRY_SIZE
        self.remove_root_entry(root_location)

    def find(self, name: str | None) -> int | None:
        """Return the location of the entry holding name, or None."""
        if name is None:
            return None
        for location in _entry_locations():
            stored = self.disk.get_string_at(
                self._inode_base + location + layout.INODE_ENTRY_FILENAME
            )
            if stored == name and get_value(stored) != -1:
                return location
        return None

    def data_blocks(self, location: int) -> list[int]:
        """Return the data block numbers recorded in the entry at location."""
        base = self._inode_base + location + layout.INODE_ENTRY_DATABLOCK
        return [
            self.disk.get_value_at(base + offset)
            for offset in range(layout.INODE_NUM_DATA_BLOCKS)
        ]