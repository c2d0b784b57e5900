"""
Execution engine and memory tape.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfir.api import CompileOptions, run_string
from bfir.capabilities import BufferedInput, CollectedOutput
from bfir.engine import Engine, execute
from bfir.errors import BFInputError, BFOutputError, BFPointerError, BFStepLimitError, BFStructureError
from bfir.offsets import Add, Loop, MovePointer, MultiplyAdd, ReadByte, SetZero, WriteByte
from bfir.tape import MIN_TAPE_SIZE, Tape
from bfir.tree import MAX_LOOP_DEPTH

LEVELS = [0, 1, 2, 3]


def run(source, data=b"", level=3, max_steps=None):
    out = CollectedOutput()
    result = run_string(source, read_byte=BufferedInput(data), write_byte=out,
                        options=CompileOptions(optimize_level=level, max_steps=max_steps))
    return result, out.getvalue()


# ---------------- end-to-end ----------------
@pytest.mark.parametrize("level", LEVELS)
def test_eight_times_eight(level):
    _, output = run("++++++++[>++++++++<-]>.", level=level)
    assert output == bytes([64])


@pytest.mark.parametrize("level", LEVELS)
def test_echo_one_byte(level):
    _, output = run(",.", data=b"\xc3rest", level=level)
    assert output == b"\xc3"


@pytest.mark.parametrize("level", LEVELS)
def test_hello_world(level):
    source = (
        "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>."
        ">---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
    )
    _, output = run(source, level=level)
    assert output == b"Hello World!\n"


@pytest.mark.parametrize("level", LEVELS)
def test_cat_until_zero_byte(level):
    _, output = run(",[.,]", data=b"abc\x00ignored", level=level)
    assert output == b"abc"


def test_empty_loop_on_zero_cell_does_nothing():
    result, output = run("[]")
    assert output == b""
    assert result.steps == 1
    assert result.memory == bytes(100)


def test_empty_loop_on_nonzero_cell_never_ends():
    with pytest.raises(BFStepLimitError) as info:
        run("+[]", max_steps=10000)
    assert info.value.limit == 10000
    assert info.value.steps == 10001


def test_empty_program():
    result, output = run("")
    assert (result.steps, result.pointer, output) == (0, 0, b"")


def test_arithmetic_wraps():
    result, _ = run("-")
    assert result.memory[0] == 255
    result, _ = run("+" * 257)
    assert result.memory[0] == 1


# ---------------- clear loops ----------------
@pytest.mark.parametrize("start", range(256))
def test_clear_loop_runs_in_constant_steps(start):
    naive, _ = run("+" * start + "[-]" + ">+", level=0)
    fast, _ = run("+" * start + "[-]" + ">+", level=1)
    assert fast.memory == naive.memory
    assert fast.memory[0] == 0
    assert fast.steps == (4 if start else 3)


def test_step_counting():
    result, _ = run("+[-]", level=0)
    # add, loop entry, body add, condition re-test
    assert result.steps == 4


# ---------------- engine ops ----------------
def test_offset_ops_against_moved_pointer():
    ops = (
        MovePointer(5),
        SetZero(0, 10),
        Add(-2, 3),
        MultiplyAdd(0, 1, 30),
        WriteByte(1),
        ReadByte(-1),
        WriteByte(-1),
    )
    out = CollectedOutput()
    state = execute(ops, BufferedInput(b"z"), out)
    assert out.getvalue() == bytes([300 % 256]) + b"z"
    assert state.pointer == 5
    assert state.tape.snapshot(0, 7) == bytes([0, 0, 0, 3, ord("z"), 10, 44])


def test_loop_tests_live_pointer():
    ops = (Add(0, 3), Loop((Add(0, 255), Add(1, 2), WriteByte(1))),)
    out = CollectedOutput()
    execute(ops, BufferedInput(), out)
    assert out.getvalue() == bytes([2, 4, 6])


def test_engine_state_resets_between_runs():
    out = CollectedOutput()
    engine = Engine(BufferedInput(), out)
    engine.run((Add(0, 1), WriteByte(0)))
    engine.run((Add(0, 1), WriteByte(0)))
    assert out.getvalue() == bytes([1, 1])


# ---------------- I/O failures ----------------
def test_end_of_input_is_fatal():
    with pytest.raises(BFInputError) as info:
        run(",.,.", data=b"a")
    assert str(info.value) == "end of input"


def test_read_oserror_is_wrapped():
    def broken():
        raise OSError("device gone")

    with pytest.raises(BFInputError) as info:
        execute((ReadByte(0),), broken, CollectedOutput())
    assert isinstance(info.value.__cause__, OSError)


def test_write_failure_aborts_without_rollback():
    written = []

    def flaky(value):
        if written:
            raise BrokenPipeError("closed")
        written.append(value)

    engine = Engine(BufferedInput(), flaky)
    with pytest.raises(BFOutputError):
        engine.run((Add(0, 1), WriteByte(0), Add(1, 9), WriteByte(0), Add(2, 9)))
    assert written == [1]
    assert engine.state.tape[1] == 9
    assert engine.state.tape[2] == 0


# ---------------- pointer underflow ----------------
@pytest.mark.parametrize("level", LEVELS)
def test_access_below_zero_is_fatal(level):
    with pytest.raises(BFPointerError) as info:
        run("<+", level=level)
    assert info.value.address == -1


def test_move_below_zero_is_fatal():
    with pytest.raises(BFPointerError):
        execute((MovePointer(-1),), BufferedInput(), CollectedOutput())


def test_cancelled_excursion_only_faults_unoptimized():
    with pytest.raises(BFPointerError):
        run("<>+", level=0)
    result, _ = run("<>+", level=1)
    assert result.memory[0] == 1


def test_multiply_into_negative_offset_is_fatal():
    with pytest.raises(BFPointerError):
        run("+[<+>-]", level=3)


# ---------------- tape ----------------
def test_tape_reads_past_end_are_zero():
    tape = Tape()
    assert len(tape) == MIN_TAPE_SIZE
    assert tape[10 ** 9] == 0
    assert len(tape) == MIN_TAPE_SIZE


def test_tape_growth():
    tape = Tape()
    tape[5] = 17
    tape[40000] = 99
    assert len(tape) == 60000
    assert tape[40000] == 99
    assert tape[5] == 17
    assert tape.snapshot(30000, 40000) == bytes(10000)
    assert tape.snapshot(40001, 60000) == bytes(19999)


def test_tape_growth_jumps_to_index():
    tape = Tape(10)
    tape[10] = 1
    assert len(tape) == MIN_TAPE_SIZE
    tape[10 ** 6] = 2
    assert len(tape) == 10 ** 6 + 1


def test_tape_masks_values():
    tape = Tape()
    tape[0] = 256 + 7
    tape[1] = -1
    assert (tape[0], tape[1]) == (7, 255)


def test_program_walks_past_initial_tape():
    result, output = run(">" * 30005 + "+++.")
    assert output == bytes([3])
    assert result.pointer == 30005
    assert result.tape_size == 60000


@pytest.mark.parametrize("level", LEVELS)
def test_deepest_allowed_nesting_runs(level):
    depth = MAX_LOOP_DEPTH
    source = "+" + "[" * depth + "-" + "]" * depth + ">+."
    result, output = run(source, level=level)
    assert output == bytes([1])
    assert result.memory[0] == 0


def test_too_deep_program_fails_before_running():
    out = CollectedOutput()
    with pytest.raises(BFStructureError):
        run_string("." + "[" * 2000 + "]" * 2000, read_byte=BufferedInput(), write_byte=out)
    assert out.getvalue() == b""


def test_engine_allocates_tape_per_run():
    engine = Engine(BufferedInput(), CollectedOutput(), tape_size=64)
    assert engine.state is None
    first = engine.run((Add(0, 1),))
    second = engine.run((Add(0, 1),))
    assert first is not second
    assert len(second.tape) == 64
    assert second.tape[0] == 1
