import pytest

from xfstool.xsm.memory import (
    ExceptionType,
    IllegalPageError,
    MachineException,
    Memory,
    NoWriteError,
    PageFaultError,
    TranslationError,
    page_of,
)

PTBR = 1024
PTLR = 10


@pytest.fixture
def memory():
    mem = Memory()
    # Logical page 0 -> physical page 5, valid and writable.
    mem.word(PTBR).set_int(5)
    mem.word(PTBR + 1).set_string("0110")
    # Logical page 1 -> physical page 6, not valid.
    mem.word(PTBR + 2).set_int(6)
    mem.word(PTBR + 3).set_string("0010")
    # Logical page 2 -> physical page 7, valid but read-only.
    mem.word(PTBR + 4).set_int(7)
    mem.word(PTBR + 5).set_string("0100")
    return mem


def test_page_of():
    assert page_of(0) == 0
    assert page_of(511) == 0
    assert page_of(512) == 1


def test_page_of_negative():
    with pytest.raises(ValueError):
        page_of(-1)


def test_is_valid_bounds():
    mem = Memory()
    assert mem.is_valid(0)
    assert mem.is_valid(len(mem.words) - 1)
    assert not mem.is_valid(len(mem.words))
    assert not mem.is_valid(-1)


def test_word_out_of_range():
    mem = Memory()
    with pytest.raises(IndexError):
        mem.word(-1)
    with pytest.raises(IndexError):
        mem.word(len(mem.words))


def test_page_returns_first_word():
    mem = Memory()
    assert mem.page(3) is mem.word(3 * 512)


def test_translate_address(memory):
    assert memory.translate_address(PTBR, PTLR, 3, False) == 5 * 512 + 3
    assert memory.translate_address(PTBR, PTLR, 3, True) == 5 * 512 + 3


def test_translate_page(memory):
    assert memory.translate_page(PTBR, PTLR, 0, False) == 5


def test_page_fault(memory):
    with pytest.raises(PageFaultError):
        memory.translate_address(PTBR, PTLR, 512, False)


def test_read_only_page(memory):
    assert memory.translate_page(PTBR, PTLR, 2, False) == 7
    with pytest.raises(NoWriteError):
        memory.translate_page(PTBR, PTLR, 2, True)


def test_illegal_page(memory):
    with pytest.raises(IllegalPageError):
        memory.translate_page(PTBR, PTLR, PTLR, False)
    with pytest.raises(IllegalPageError):
        memory.translate_address(PTBR, PTLR, -4, False)


@pytest.mark.parametrize(
    "page, write",
    [(1, False), (2, True), (PTLR, False)],
)
def test_translation_errors_share_base(memory, page, write):
    with pytest.raises(TranslationError):
        memory.translate_page(PTBR, PTLR, page, write)


def test_raw_instruction():
    mem = Memory()
    mem.word(100).set_string("MOV R0,")
    mem.word(101).set_string("R1")
    assert mem.raw_instruction(100) == "MOV R0,R1"


def test_machine_exception_fields():
    exc = MachineException("bad page", ExceptionType.PAGEFAULT, 0, ma=10, epn=3)
    assert str(exc) == "bad page"
    assert exc.type == ExceptionType.PAGEFAULT
    assert (exc.ma, exc.epn) == (10, 3)