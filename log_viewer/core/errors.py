class LogViewerError(Exception):
    """Base class for errors raised by the log viewer engine."""


class PatternError(LogViewerError, ValueError):
    """The search pattern could not be compiled into a matcher."""

    def __init__(self, pattern, reason, position=None):
        self.pattern = pattern
        self.reason = reason
        self.position = position
        if position is not None:
            msg = f"Invalid pattern '{pattern}': {reason} at position {position}"
        else:
            msg = f"Invalid pattern '{pattern}': {reason}"
        super().__init__(msg)


class InputTypeError(LogViewerError, TypeError):
    """A caller passed a payload of the wrong type to the engine."""

    def __init__(self, name, expected, value):
        self.name = name
        self.expected = expected
        super().__init__(f"{name} must be {expected}, got {type(value).__name__}")
