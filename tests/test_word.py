import pytest

from xfstool.xsm.word import Word, WordType


def test_int_round_trip():
    word = Word()
    word.set_int(-452)
    assert word.value == "-452"
    assert word.to_int() == -452


def test_constructor_accepts_int_and_string():
    assert Word(17).value == "17"
    assert Word("kernel").value == "kernel"


@pytest.mark.parametrize(
    "text, kind",
    [
        ("123", WordType.INTEGER),
        ("-5", WordType.INTEGER),
        ("+7", WordType.INTEGER),
        ("", WordType.INTEGER),
        ("12a", WordType.STRING),
        ("MOV R0,", WordType.STRING),
    ],
)
def test_unix_type(text, kind):
    assert Word(text).unix_type() == kind


def test_to_int_of_string_is_zero():
    assert Word("root").to_int() == 0


def test_to_int_reads_leading_digits():
    assert Word("42abc").to_int() == 42


def test_set_string_truncates_to_word_size():
    word = Word()
    word.set_string("x" * 40)
    assert len(word.value) == 16


def test_set_string_stops_at_nul():
    assert Word("ab\0cd").value == "ab"


def test_copy_from():
    source = Word("hello")
    target = Word()
    target.copy_from(source)
    assert target == source
    source.set_string("other")
    assert target.value == "hello"


def test_encrypt_worked_example():
    word = Word("ab")
    word.encrypt()
    assert word.value == "195"


def test_encrypt_empty_word_is_zero():
    word = Word("")
    word.encrypt()
    assert word.to_int() == 0


def test_encrypt_is_deterministic():
    first = Word("secret")
    second = Word("secret")
    first.encrypt()
    second.encrypt()
    assert first == second
    assert first.unix_type() == WordType.INTEGER