import pytest

from xfstool.labels import (
    LabelError,
    LabelResolver,
    is_charstring,
    is_label,
    label_name,
)

PROGRAM = [
    "start:\n",
    "MOV R0, 1\n",
    "loop:\n",
    "ADD R0, R1\n",
    "JZ R0, done\n",
    "JMP loop\n",
    "done:\n",
    "HALT\n",
]


@pytest.mark.parametrize(
    "line, expected",
    [("loop:", True), ("MOV R0, 1", False), ("", False), ("a:b", False)],
)
def test_is_label(line, expected):
    assert is_label(line) is expected


def test_label_name():
    assert label_name("loop:") == "loop"
    assert label_name("a:b:") == "a"


@pytest.mark.parametrize(
    "text, expected",
    [("loop", True), ("R0", True), ("1024", False), ("", False), (None, False)],
)
def test_is_charstring(text, expected):
    assert is_charstring(text) is expected


def test_collect_addresses():
    resolver = LabelResolver()
    resolver.collect(PROGRAM)
    assert resolver.target("start") == 0
    assert resolver.target("loop") == 2
    assert resolver.target("done") - resolver.target("loop") == 6
    assert resolver.target("missing") is None


def test_resolve_drops_labels_and_keeps_plain_lines():
    out = LabelResolver().resolve(PROGRAM, 0)
    assert len(out) == 5
    assert not any(is_label(line) for line in out)
    assert out[0] == "MOV R0, 1"
    assert out[-1] == "HALT"


def test_resolve_jmp_with_base():
    resolver = LabelResolver()
    out = resolver.resolve(PROGRAM, 512)
    assert out[3] == "JMP 514"


def test_resolve_conditional_jump_format():
    resolver = LabelResolver()
    out = resolver.resolve(PROGRAM, 0)
    assert out[2] == f"JZ R0, {resolver.target('done')}"


def test_base_address_shifts_targets():
    low = LabelResolver().resolve(PROGRAM, 0)
    high = LabelResolver().resolve(PROGRAM, 1024)
    low_target = int(low[3].split()[-1])
    high_target = int(high[3].split()[-1])
    assert high_target - low_target == 1024


def test_numeric_target_unchanged():
    out = LabelResolver().resolve(["JMP 1024\n", "CALL 2048\n"], 512)
    assert out == ["JMP 1024", "CALL 2048"]


def test_case_insensitive_opcode():
    resolver = LabelResolver()
    out = resolver.resolve(["top:", "call top", "jmp top"], 0)
    assert out == ["call 0", "jmp 0"]


def test_unresolved_label_raises():
    with pytest.raises(LabelError) as info:
        LabelResolver().resolve(["JMP nowhere"], 0)
    assert info.value.name == "nowhere"


def test_later_duplicate_label_wins():
    resolver = LabelResolver()
    resolver.collect(["x:", "NOP", "x:", "NOP"])
    assert resolver.target("x") == 2


def test_blank_lines_are_ignored():
    with_blanks = LabelResolver().resolve(["\n", "MOV R0, 1", "", "a:", "JMP a"], 0)
    without = LabelResolver().resolve(["MOV R0, 1", "a:", "JMP a"], 0)
    assert with_blanks == without


def test_reset_forgets_labels():
    resolver = LabelResolver()
    resolver.collect(PROGRAM)
    resolver.reset()
    assert resolver.target("loop") is None
    assert resolver.labels == {}