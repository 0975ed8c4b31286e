#!/usr/bin/env python3
"""
Command line runner.

Takes exactly one argument: a path to a program file, or, if no such file can
be read, the program text itself. The program talks to stdin/stdout as raw
bytes.
"""

import argparse
import io
import logging
import sys

from .config import Settings, init_logging
from .engine import Interpreter, Program
from .errors import OutputError, StepLimitExceeded, UnbalancedLoopError
from .instructions import to_source

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNBALANCED = 1
EXIT_OUTPUT_FAILED = 1
EXIT_STEP_LIMIT = 3


def load_source(argument: str) -> str:
    """File contents if argument names a readable file, else the argument itself."""
    try:
        with open(argument, 'r') as f:
            source = f.read()
    except (OSError, UnicodeDecodeError, ValueError):
        logger.debug("Treating argument as program text")
        return argument
    logger.debug("Loaded program from %s", argument)
    return source


def non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="bfrun", description="Run a brainfuck program.")
    ap.add_argument("program", help="Path to a program file, or the program text itself")
    ap.add_argument("--step-limit", type=non_negative_int, default=None,
                    help="Abort after this many instructions (default: BF_STEP_LIMIT, 0 = unlimited)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr")
    ap.add_argument("--print-program", action="store_true",
                    help="Print the sanitized program and exit without running it")
    return ap


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        parser.error(str(e))
    init_logging("DEBUG" if args.verbose else settings.log_level)
    step_limit = settings.step_limit if args.step_limit is None else (args.step_limit or None)

    try:
        program = Program.from_source(load_source(args.program))
    except UnbalancedLoopError as e:
        print(f"{e}, terminating", file=sys.stderr)
        return EXIT_UNBALANCED

    if args.print_program:
        print(to_source(program.instructions))
        return EXIT_OK

    # fd 0 closed at startup leaves sys.stdin as None; read it as end-of-stream.
    stdin = sys.stdin.buffer if sys.stdin is not None else io.BytesIO()
    interpreter = Interpreter(program, stdin, sys.stdout.buffer, step_limit=step_limit)
    try:
        interpreter.run()
    except OutputError as e:
        print(e, file=sys.stderr)
        return EXIT_OUTPUT_FAILED
    except StepLimitExceeded as e:
        print(e, file=sys.stderr)
        return EXIT_STEP_LIMIT

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
