"""Exceptions raised by the interpreter."""


class BrainfuckError(Exception):
    pass


class UnbalancedLoopError(BrainfuckError, SyntaxError):
    """A '[' without a matching ']' (or the reverse).

    Raised during loop resolution, before any instruction runs.
    """

    def __init__(self, position: int, kind: str = "open"):
        self.position = position
        self.kind = kind
        if kind == "open":
            message = f"Loop started at index {position} wasn't closed"
        else:
            message = f"Loop closed at index {position} was never opened"
        super().__init__(message)

    def __str__(self):
        return self.args[0]


class OutputError(BrainfuckError):
    """The output sink failed; the run is aborted."""


class StepLimitExceeded(BrainfuckError):
    def __init__(self, steps: int):
        self.steps = steps
        super().__init__(f"Execution stopped after {steps} steps (possible infinite loop)")
