import io

import numpy as np
import pytest

from bfcore.engine import TAPE_SIZE, Interpreter, Program, Tape, run_program
from bfcore.errors import OutputError, StepLimitExceeded, UnbalancedLoopError
from bfcore.loops import LoopTable

HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)


class BrokenSink:
    def write(self, data):
        raise BrokenPipeError("closed pipe")

    def flush(self):
        pass


class BrokenFlushSink:
    def write(self, data):
        return len(data)

    def flush(self):
        raise BrokenPipeError("closed pipe")


class FlushCountingSink(io.BytesIO):
    flushes = 0

    def flush(self):
        self.flushes += 1
        super().flush()


class FailingSource:
    def read(self, n):
        raise OSError("input closed")


def test_tape_starts_zeroed():
    tape = Tape()
    assert len(tape) == TAPE_SIZE == 30000
    assert tape.pointer == 0
    assert tape.cells.dtype == np.uint8
    assert not tape.cells.any()


@pytest.mark.parametrize("value", range(256))
def test_increment_then_decrement_restores_cell(value):
    tape = Tape()
    tape.write(value)
    tape.increment()
    tape.decrement()
    assert tape.read() == value
    tape.decrement()
    tape.increment()
    assert tape.read() == value


def test_cell_wraparound():
    tape = Tape()
    tape.write(255)
    tape.increment()
    assert tape.read() == 0
    tape.decrement()
    assert tape.read() == 255


def test_pointer_wraps_both_ways():
    tape = Tape()
    tape.move_left()
    assert tape.pointer == TAPE_SIZE - 1
    tape.move_right()
    assert tape.pointer == 0


def test_full_circle_returns_pointer():
    tape = Tape()
    tape.pointer = 1234
    for _ in range(TAPE_SIZE):
        tape.move_right()
    assert tape.pointer == 1234
    for _ in range(TAPE_SIZE):
        tape.move_left()
    assert tape.pointer == 1234


def test_multiply_loop_outputs_F():
    assert run_program("+++++ +++++ [ > +++++ ++ < - ] > .") == b"F"


def test_nested_loops():
    assert run_program("++[>++[>++<-]<-]>>.") == bytes([8])


def test_hello_world():
    assert run_program(HELLO_WORLD) == b"Hello World!\n"


def test_echo():
    assert run_program(",.", b"A") == bytes([65])


def test_input_end_of_stream_reads_zero():
    assert run_program("+,.", b"") == bytes([0])


def test_input_read_failure_reads_zero():
    program = Program.from_source("+,.")
    out = io.BytesIO()
    Interpreter(program, FailingSource(), out).run()
    assert out.getvalue() == bytes([0])


def test_closed_input_stream_reads_zero():
    source = io.BytesIO(b"A")
    source.close()
    out = io.BytesIO()
    Interpreter(Program.from_source("+,."), source, out).run()
    assert out.getvalue() == bytes([0])


def test_string_input_is_accepted():
    assert run_program(",.,.", "hi") == b"hi"


def test_decrement_from_zero_wraps():
    assert run_program("-.") == bytes([255])


def test_left_of_zero_wraps_to_last_cell():
    program = Program.from_source("<+++")
    tape = Interpreter(program, io.BytesIO(), io.BytesIO()).run()
    assert tape.pointer == TAPE_SIZE - 1
    assert tape.cells[TAPE_SIZE - 1] == 3


def test_empty_loop_is_skipped_on_zero():
    assert run_program("[].+.") == bytes([0, 1])


def test_loop_skipped_without_running_body():
    assert run_program("[.+++.]+.") == bytes([1])


def test_empty_loop_spins_on_nonzero():
    with pytest.raises(StepLimitExceeded) as info:
        run_program("+[]", step_limit=100)
    assert info.value.steps == 100


def test_step_limit_flushes_partial_output():
    out = FlushCountingSink()
    with pytest.raises(StepLimitExceeded):
        Interpreter(Program.from_source("+.[]"), io.BytesIO(), out, step_limit=10).run()
    assert out.getvalue() == bytes([1])
    assert out.flushes == 1


def test_step_limit_flush_failure_is_output_error():
    interpreter = Interpreter(Program.from_source("+[]"), io.BytesIO(), BrokenFlushSink(), step_limit=10)
    with pytest.raises(OutputError):
        interpreter.run()


def test_step_limit_not_hit():
    assert run_program("+++.", step_limit=4) == bytes([3])


def test_unbalanced_program_raises_before_running():
    with pytest.raises(UnbalancedLoopError) as info:
        Program.from_source("+.[")
    assert info.value.position == 2


def test_output_failure_aborts():
    program = Program.from_source("+.+.")
    interpreter = Interpreter(program, io.BytesIO(), BrokenSink())
    with pytest.raises(OutputError):
        interpreter.run()
    assert interpreter.steps == 2
    assert interpreter.tape.read() == 1


def test_invalid_instruction_is_an_internal_error():
    program = Program(("x",), LoopTable((-1,), (-1,)))
    with pytest.raises(RuntimeError):
        Interpreter(program, io.BytesIO(), io.BytesIO()).run()


def test_runs_are_independent():
    first = run_program("+++.")
    second = run_program("+++.")
    assert first == second == bytes([3])


def test_interpreter_counts_steps_and_keeps_tape():
    program = Program.from_source(">++")
    tape = Tape()
    interpreter = Interpreter(program, io.BytesIO(), io.BytesIO(), tape=tape)
    assert interpreter.run() is tape
    assert interpreter.steps == 3
    assert interpreter.instruction_pointer == 3
    assert tape.snapshot(0, 3) == bytes([0, 2, 0])
