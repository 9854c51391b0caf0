import io

import pytest

from xfstool import layout
from xfstool.cli import Shell, completions, main
from xfstool.disk import VirtualDisk
from xfstool.diskutil import XFS


@pytest.fixture
def shell(tmp_path):
    disk = VirtualDisk(tmp_path / "disk.xfs")
    return Shell(XFS(disk), io.StringIO())


def output(shell):
    return shell.out.getvalue()


def test_complete_commands():
    assert completions("", 0, "e", []) == ["export", "exit"]


def test_complete_interrupts():
    assert completions("load --int=", 11, "t", []) == ["timer"]


def test_complete_modules():
    assert completions("load --module ", 14, "", []) == [str(n) for n in range(8)]


def test_complete_load_options():
    assert completions("load ", 5, "--e", []) == ["--exec", "--exhandler"]


def test_complete_files_and_dump():
    assert completions("cat ", 4, "a", ["abc.dat", "b.xsm"]) == ["abc.dat"]
    assert completions("dump ", 5, "--r", []) == ["--rootfile"]
    assert completions("foo ", 4, "x", ["x"]) == []


def test_ls_without_disk(shell):
    shell.run_command("ls")
    assert "Unable to open disk file" in output(shell)


def test_unknown_command(shell):
    shell.run_command("frobnicate")
    assert 'Unknown command "frobnicate"' in output(shell)


def test_fdisk_then_ls(shell):
    shell.run_command("fdisk")
    shell.run_command("ls")
    text = output(shell)
    assert 'Formatting Complete. "disk.xfs" created.' in text
    assert f"Filename: root Filesize {layout.BLOCK_SIZE}" in text


def test_load_missing_pathname(shell):
    shell.run_command("load --data")
    assert "Missing <pathname> for load" in output(shell)


def test_load_exec_wrong_extension(shell):
    shell.run_command("load --exec prog.txt")
    assert 'Filename does not have ".xsm" extension' in output(shell)


def test_load_name_too_long(shell):
    shell.run_command("load --data averyverylongname.dat")
    assert "Filename is more than 12 characters long" in output(shell)


def test_load_invalid_interrupt(shell):
    shell.run_command("load --int=3 code.xsm")
    assert 'Invalid argument for "--int="' in output(shell)


def test_load_invalid_option(shell):
    shell.run_command("load --bogus x")
    assert 'Invalid argument "--bogus" for load' in output(shell)


def test_data_file_round_trip(shell, tmp_path):
    source = tmp_path / "x.dat"
    source.write_text("hello\nworld\n")
    shell.run_command("fdisk")
    shell.run_command(f"load --data {source}")
    shell.run_command("ls")
    shell.run_command("cat x.dat")
    text = output(shell)
    assert "Filename: x.dat Filesize 2" in text
    assert "hello" in text and "world" in text

    exported = tmp_path / "out.txt"
    shell.run_command(f"export x.dat {exported}")
    assert exported.read_text().startswith("hello\n")

    shell.run_command("rm x.dat")
    shell.out = io.StringIO()
    shell.run_command("ls")
    assert "x.dat" not in output(shell)


def test_rm_root_refused(shell):
    shell.run_command("fdisk")
    shell.run_command("rm root")
    assert "Root file cannot be deleted" in output(shell)


def test_df_counts_free_blocks(shell):
    shell.run_command("fdisk")
    shell.run_command("df")
    text = output(shell)
    entries = [line for line in text.splitlines() if " \t - \t " in line]
    assert len(entries) == layout.BLOCK_SIZE
    free = sum(1 for line in entries if line.split("\t")[-1].strip() == "0")
    assert f"No of Free Blocks = {free}" in text
    assert "Total no of Blocks = 512" in text


def test_copy_insufficient_arguments(shell):
    shell.run_command("copy 1 2")
    assert 'Insufficient arguments for "copy"' in output(shell)


def test_exit_raises(shell):
    with pytest.raises(SystemExit):
        shell.run_command("exit")


def test_run_batch_file(shell, tmp_path):
    script = tmp_path / "batch.txt"
    script.write_text("fdisk\nls\n")
    shell.run_command(f"run {script}")
    assert "Filename: root" in output(shell)


def test_run_missing_file(shell, tmp_path):
    missing = tmp_path / "none.txt"
    shell.run_command(f"run {missing}")
    assert f"Unable to open file : {missing}" in output(shell)


def test_main_fdisk_and_dump(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["fdisk"]) == 0
    assert (tmp_path / "disk.xfs").stat().st_size > 0
    assert main(["dump", "--rootfile"]) == 0
    lines = (tmp_path / "rootfile.txt").read_text().splitlines()
    assert len(lines) == layout.BLOCK_SIZE
    assert lines[0] == "root"