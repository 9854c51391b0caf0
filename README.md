# xfstool

Create and manage XFS disk images, the simple block filesystem used by the
XSM teaching machine. The package formats a disk, loads executables, data
files, interrupt routines and modules into their fixed blocks, lists and
removes files, and exports file contents or raw block ranges back to
ordinary files.

It also provides the storage-level building blocks of the XSM machine:
16-character words, paged memory with address translation, the register
file, and an in-memory copy of a whole disk image.

## Installation

```
pip install .
```

## Command line

The `xfs-interface` command works on `disk.xfs` in the current directory.
Given arguments, it joins them into one command and runs it:

```
xfs-interface fdisk
xfs-interface load --exec hello.xsm
xfs-interface load --data numbers.dat
xfs-interface ls
```

Run with no arguments for an interactive `# ` prompt (with tab completion
where the `readline` module is available):

```
xfs-interface
# help
# load --int=timer timer.xsm
# load --module 0 mod0.xsm
# cat hello.xsm
# export numbers.dat out.txt
# copy 69 70 blocks.txt
# dump --inodeusertable
# df
# exit
```

Commands:

- `fdisk` — create `disk.xfs` and lay out an empty file system.
- `run <pathname>` — run the commands in a file, one per line.
- `load --exec|--data <pathname>` — store an executable (`.xsm`) or data
  (`.dat`) file; the file name may be at most 12 characters.
- `load --init|--os|--idle|--shell|--library|--exhandler <pathname>` —
  store code in its reserved blocks.
- `load --int=timer|disk|console|4..18 <pathname>` and
  `load --module 0..7 <pathname>` — store an interrupt routine or a module.
  For these, and for `--os` and `--exhandler`, labels used as `JMP`, `CALL`,
  `JZ` and `JNZ` targets are replaced by memory addresses.
- `rm`, `ls`, `cat`, `export`, `df` — remove, list, show, export files, and
  show the free list.
- `copy <start> <end> <file>` — write blocks `start..end` to a file, one
  word per line.
- `dump --inodeusertable` / `dump --rootfile` — write those blocks to
  `inodeusertable.txt` / `rootfile.txt`.

Errors are reported as messages on the terminal.

## Library use

```python
from xfstool.disk import VirtualDisk
from xfstool.diskutil import XFS

xfs = XFS(VirtualDisk("disk.xfs"))
xfs.format(True)
xfs.load_data("numbers.dat")
for entry in xfs.list_files():
    print(entry.name, entry.size)
print(xfs.file_contents("numbers.dat"))
```

For a disk that already exists, call `disk.load()` on the `VirtualDisk`
first to read its free list, inode table and root file into memory.

Operations that cannot be carried out raise `xfstool.diskutil.XFSError`;
a disk file that cannot be opened or created raises
`xfstool.disk.DiskOpenError` or `DiskCreateError`.
`xfstool.labels.LabelResolver` resolves labels in lines of code on its own.

The XSM primitives live in `xfstool.xsm`:

- `xfstool.xsm.word.Word` — a word of up to 16 characters, read as text or
  as an integer.
- `xfstool.xsm.memory.Memory` — 128 pages of 512 words, with page table
  translation that raises `IllegalPageError`, `PageFaultError` or
  `NoWriteError`.
- `xfstool.xsm.registers.RegisterFile` — the 33 named registers.
- `xfstool.xsm.storage.DiskImage` — a 512-block disk image held in memory,
  written back by `close()`.

## What it does not do

The package does not run XSM programs: there is no instruction execution,
no machine loop, no timer, disk or console interrupts, and no debugger.
`xfstool.xsm` provides only the storage parts such a machine is built on.

## Tests

```
pip install .[test]
pytest
```