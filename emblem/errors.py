from typing import Optional


class EmblemCompileError(ValueError):
    """Base error for everything the emblem package raises."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.message = message
        self.line_number = line_number
        if line_number is None:
            super().__init__(f"Emblem Compile Error: {message}")
        else:
            super().__init__(f"Emblem Compile Error (Line {line_number}): {message}")


class EmblemIndentationError(EmblemCompileError):
    """
    A dedent whose width matches no open indentation level.

    This is the only structural error the compiler knows about; it aborts the
    whole compilation.
    """


class ConfigError(EmblemCompileError):
    """Raised when a build config file is missing or malformed."""
