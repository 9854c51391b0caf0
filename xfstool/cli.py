"""Interactive and one-shot command interface to an XFS disk."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import PurePosixPath
from typing import TextIO

from . import layout
from .disk import DiskError, VirtualDisk, get_value
from .diskutil import XFS, XFSError

try:
    import readline
except ImportError:  # pragma: no cover - platform without readline
    readline = None

COMMANDS = (
    "fdisk", "run", "load", "export", "rm", "ls", "df", "cat", "copy", "dump", "exit", "help",
)
LOAD_OPTIONS = (
    "--int=", "--exec", "--data", "--init", "--os", "--idle", "--shell", "--library",
    "--exhandler", "--module",
)
INTERRUPTS = (
    "4", "5", "6", "7", "8", "9", "10", "11", "12", "13", "14", "15", "16", "17", "18",
    "timer", "disk", "console",
)
MODULES = ("0", "1", "2", "3", "4", "5", "6", "7")
DUMP_OPTIONS = ("--inodeusertable", "--rootfile")

BANNER = 'Unix-XFS Interace Version 2.0. \nType "help" for getting a list of commands.'
PROMPT = "# "

HELP_TEXT = """\
 fdisk 
\t Format the disk with XFS filesystem
 run <pathname> 
\t Executes the set of xfs-interface commands sequentially 
 load --exec <pathname> 
\t Loads an executable file to XFS disk 
 load --data <pathname> 
\t Loads a data file to XFS disk 
 load --init <pathname> 
\t Loads INIT code to XFS disk 
 load --os <pathname> 
\t Loads OS startup code to XFS disk 
 load --idle <pathname> 
\t Loads Idle code to XFS disk 
 load --shell <pathname> 
\t Loads Shell code to XFS disk 
 load --library <pathname> 
\t Loads Library code to XFS disk 
 load --int=timer <pathname>
\t Loads Timer Interrupt routine to XFS disk 
 load --int=disk <pathname>
\t Loads Disk Controller Interrupt routine to XFS disk 
 load --int=console <pathname>
\t Loads Console Interrupt routine to XFS disk 
 load --int=[4-18] <pathname>
\t Loads the specified Interrupt routine to XFS disk 
 load --exhandler <pathname> 
\t Loads exception handler routine to XFS disk 
 load --module [0-7] <pathname>
\t Loads the specified Module to XFS disk 
 export <xfs_filename> <pathname>
\t Exports a data file from XFS disk to UNIX file system
 rm <xfs_filename>
\t Removes a file from XFS disk 
 ls 
\t List all files
 df 
\t Display free list and free space
 cat <xfs_filename> 
\t to display contents of a file
 copy <start_blocks> <end_block> <unix_filename>
\t Copies contents of specified range of blocks to a UNIX file.
 dump --inodeusertable
\t Copies the contents of inode table and the user table to an external UNIX file named inodeusertable.txt
 dump --rootfile 
\t Copies the contents of root file to an external UNIX file named rootfile.txt
 exit 
\t Exit the interface"""

_PATH_LIMIT = 100
_COPY_PATH_LIMIT = 50


def _prefixed(text: str, candidates: Iterable[str]) -> list[str]:
    return [candidate for candidate in candidates if candidate.startswith(text)]


def completions(line: str, start: int, text: str, files: Iterable[str]) -> list[str]:
    """Return the completions of text, which begins at start in line."""
    context = line[:start].split()
    if not context:
        return _prefixed(text, COMMANDS)
    command = context[0]
    if command == "load":
        if start >= 6 and line[start - 6:start] == "--int=":
            return _prefixed(text, INTERRUPTS)
        if len(context) > 1 and context[1] == "--module":
            return _prefixed(text, MODULES)
        return _prefixed(text, LOAD_OPTIONS)
    if command in ("export", "cat", "rm"):
        return _prefixed(text, files)
    if command == "dump":
        return _prefixed(text, DUMP_OPTIONS)
    return []


def _split_option(option: str) -> tuple[str, str | None]:
    """Split "--int=timer" into its name and value the way the option is read."""
    parts = [part for part in option.split("=") if part]
    if not parts:
        return option, None
    return parts[0], parts[1] if len(parts) > 1 else None


class Shell:
    """Runs interface commands against an XFS disk, writing messages to out."""

    def __init__(self, xfs: XFS, out: TextIO | None = None) -> None:
        self.xfs = xfs
        self.out = out if out is not None else sys.stdout
        self._matches: list[str] = []

    def _say(self, text: str = "") -> None:
        self.out.write(f"{text}\n")

    def run_command(self, command: str) -> None:
        """Carry out one command line; "exit" raises SystemExit."""
        tokens = [token for token in command.split(" ") if token]
        if not tokens:
            return
        name, args = tokens[0], tokens[1:]
        if name == "exit":
            raise SystemExit(0)
        handler = self._handlers().get(name)
        if handler is None:
            self._say(f'Unknown command "{name}". See "help" for more information')
            return
        try:
            handler(args)
        except DiskError as exc:
            self._say(exc.message)
        except XFSError as exc:
            self._say(str(exc))

    def _handlers(self):
        return {
            "help": self._help,
            "fdisk": self._fdisk,
            "run": self._run,
            "load": self._load,
            "rm": self._rm,
            "export": self._export,
            "ls": self._ls,
            "df": self._df,
            "cat": self._cat,
            "copy": self._copy,
            "dump": self._dump,
        }

    def _help(self, args: list[str]) -> None:
        self._say(HELP_TEXT)

    def _fdisk(self, args: list[str]) -> None:
        self._say(f'Formatting Complete. "{layout.DISK_NAME}" created.')
        self.xfs.format(layout.DISK_FORMAT)

    def _run(self, args: list[str]) -> None:
        path = args[0] if args else ""
        try:
            with open(path, encoding="latin-1") as handle:
                lines = handle.readlines()
        except OSError:
            self._say(f"Unable to open file : {path}")
            return
        for line in lines:
            self.run_command(line[:-1] if line.endswith("\n") else line)

    def _load(self, args: list[str]) -> None:
        option = args[0] if args else None
        path = args[1][:_PATH_LIMIT] if len(args) > 1 else None
        module_path = args[2] if len(args) > 2 else None
        if option is None or path is None:
            self._say('Missing <pathname> for load. See "help" for more information')
            return
        kind, value = _split_option(option)

        simple = {
            "--init": self.xfs.load_init,
            "--shell": self.xfs.load_shell,
            "--library": self.xfs.load_library,
            "--idle": self.xfs.load_idle,
            "--os": self.xfs.load_os,
            "--exhandler": self.xfs.load_exhandler,
        }
        if kind in simple:
            simple[kind](path)
        elif kind == "--exec":
            if self._check_name(path, ".xsm"):
                self.xfs.load_executable(path)
        elif kind == "--data":
            if self._check_name(path, ".dat"):
                self.xfs.load_data(path)
        elif kind == "--int":
            self._load_interrupt(value, path)
        elif kind == "--module":
            number = get_value(args[1])
            if not 0 <= number <= layout.NO_OF_MODULES:
                self._say('Invalid argument for "--module=" ')
            elif module_path is None:
                self._say('Missing <pathname> for load. See "help" for more information')
            else:
                self.xfs.load_module(module_path, number)
        else:
            self._say(
                f'Invalid argument "{kind}" for load. See "help" for more information'
            )

    def _check_name(self, path: str, ext: str) -> bool:
        if len(PurePosixPath(path).name) > 12:
            self._say("Filename is more than 12 characters long")
            return False
        dot = path.rfind(".")
        if dot == -1 or path[dot:] != ext:
            self._say(f'Filename does not have "{ext}" extension')
            return False
        return True

    def _load_interrupt(self, value: str | None, path: str) -> None:
        named = {
            "timer": self.xfs.load_timer,
            "disk": self.xfs.load_disk_controller_int,
            "console": self.xfs.load_console_int,
        }
        if value in named:
            named[value](path)
            return
        number = get_value(value) if value is not None else 0
        if 4 <= number <= layout.NO_OF_INTERRUPTS:
            self.xfs.load_int(path, number)
        else:
            self._say('Invalid argument for "--int=" ')

    def _rm(self, args: list[str]) -> None:
        if not args:
            self._say('Missing <xfs_filename> for rm. See "help" for more information')
            return
        self.xfs.delete_file(args[0])

    def _export(self, args: list[str]) -> None:
        if len(args) < 2:
            self._say('Missing <pathname> for export. See "help" for more information')
            return
        self.xfs.export_file(args[0], args[1])

    def _ls(self, args: list[str]) -> None:
        files = self.xfs.list_files()
        if not files:
            self._say("The disk contains no files.")
            return
        for entry in files:
            self._say(f"Filename: {entry.name} Filesize {entry.size}")

    def _df(self, args: list[str]) -> None:
        words = self.xfs.free_list()
        for index, word in enumerate(words):
            self._say(f"{index % layout.BLOCK_SIZE} \t - \t {word}  ")
        free = sum(1 for word in words if get_value(word) == 0)
        self.out.write(f"\nNo of Free Blocks = {free}")
        self.out.write(f"\nTotal no of Blocks = {layout.NO_OF_DISK_BLOCKS}\n")

    def _cat(self, args: list[str]) -> None:
        if not args:
            self._say('Missing <xfs_filename> for cat. See "help" for more information')
            return
        for word in self.xfs.file_contents(args[0]):
            self._say(f"{word}\t")

    def _copy(self, args: list[str]) -> None:
        if len(args) < 3:
            self._say(
                'Insufficient arguments for "copy". See "help" for more information'
            )
            return
        start, end = get_value(args[0]), get_value(args[1])
        self.xfs.copy_blocks(start, end, args[2][:_COPY_PATH_LIMIT])

    def _dump(self, args: list[str]) -> None:
        option = args[0] if args else ""
        if option == "--inodeusertable":
            self.xfs.dump_inode_table("inodeusertable.txt")
        elif option == "--rootfile":
            self.xfs.dump_root_file("rootfile.txt")
        else:
            self._say(
                f'Invalid argument "{option}" for dump. See "help" for more information'
            )

    def _file_names(self) -> list[str]:
        try:
            return [entry.name for entry in self.xfs.list_files()]
        except DiskError:
            return []

    def complete(self, text: str, state: int) -> str | None:
        """Readline completer: return the state-th completion of text."""
        if state == 0:
            if readline is None:
                line, start = text, 0
            else:
                line, start = readline.get_line_buffer(), readline.get_begidx()
            self._matches = completions(line, start, text, self._file_names())
        return self._matches[state] if state < len(self._matches) else None

    def loop(self) -> None:
        """Read and run commands until "exit" or end of input."""
        if readline is not None:
            readline.set_completer(self.complete)
            readline.parse_and_bind("tab: complete")
        while True:
            try:
                line = input(PROMPT)
            except EOFError:
                break
            command = line.strip()
            if not command:
                continue
            if command == "exit":
                break
            self.run_command(command)


def main(argv: list[str] | None = None) -> int:
    """Run the command given in argv, or an interactive session without one."""
    args = sys.argv[1:] if argv is None else list(argv)
    disk = VirtualDisk(layout.DISK_NAME)
    if disk.path.is_file():
        disk.load()
    shell = Shell(XFS(disk))
    if args:
        try:
            shell.run_command(" ".join(args))
        except SystemExit:
            return 0
    else:
        print(BANNER)
        shell.loop()
    return 0


if __name__ == "__main__":
    sys.exit(main())