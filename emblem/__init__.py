"""Emblem: indentation-based markup compiled to HTML and Handlebars blocks."""
from .compiler import CompilerOptions, EmblemCompiler, compile
from .errors import ConfigError, EmblemCompileError, EmblemIndentationError

__all__ = [
    "CompilerOptions",
    "ConfigError",
    "EmblemCompileError",
    "EmblemCompiler",
    "EmblemIndentationError",
    "compile",
]
