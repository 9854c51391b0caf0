import pytest

from xfstool.xsm.storage import DISK_BLOCK_NUM, DiskImage
from xfstool.xsm.word import Word

BLOCK_BYTES = 512 * 16


def test_missing_file_is_created(tmp_path):
    path = tmp_path / "disk.xfs"
    image = DiskImage(path)
    assert path.exists()
    assert all(word.value == "" for word in image.read_block(0))


def test_write_and_read_round_trip(tmp_path):
    image = DiskImage(tmp_path / "disk.xfs")
    page = [Word(str(index)) for index in range(512)]
    image.write_page(page, 70)
    assert image.read_block(70) == page


def test_short_page_is_padded(tmp_path):
    image = DiskImage(tmp_path / "disk.xfs")
    image.write_page([Word("MOV R0,"), Word("R1")], 3)
    words = image.read_block(3)
    assert [w.value for w in words[:3]] == ["MOV R0,", "R1", ""]
    assert len(words) == 512


def test_oversized_page_rejected(tmp_path):
    image = DiskImage(tmp_path / "disk.xfs")
    with pytest.raises(ValueError):
        image.write_page([Word()] * 513, 0)


def test_block_view_size_and_bounds(tmp_path):
    image = DiskImage(tmp_path / "disk.xfs")
    assert len(image.block(0)) == BLOCK_BYTES
    with pytest.raises(IndexError):
        image.block(DISK_BLOCK_NUM)
    with pytest.raises(IndexError):
        image.block(-1)


def test_block_view_is_writable(tmp_path):
    image = DiskImage(tmp_path / "disk.xfs")
    image.block(5)[:4] = b"abcd"
    assert image.read_block(5)[0].value == "abcd"


def test_existing_file_is_read(tmp_path):
    path = tmp_path / "disk.xfs"
    path.write_bytes(b"hello".ljust(16, b"\0") + b"world")
    image = DiskImage(path)
    words = image.read_block(0)
    assert words[0].value == "hello"
    assert words[1].value == "world"


def test_close_writes_whole_image(tmp_path):
    path = tmp_path / "disk.xfs"
    image = DiskImage(path)
    image.write_page([Word("kernel")], 4)
    written = image.close()
    assert written == BLOCK_BYTES * DISK_BLOCK_NUM
    assert path.stat().st_size == written
    assert DiskImage(path).read_block(4)[0].value == "kernel"


def test_close_to_other_path(tmp_path):
    image = DiskImage(tmp_path / "a.xfs")
    image.write_page([Word("root")], 1)
    other = tmp_path / "b.xfs"
    image.close(other)
    assert DiskImage(other).read_block(1)[0].value == "root"


def test_context_manager_commits(tmp_path):
    path = tmp_path / "disk.xfs"
    with DiskImage(path) as image:
        image.write_page([Word(7)], 2)
    assert DiskImage(path).read_block(2)[0].to_int() == 7