"""
AST produced by the Emblem parser.

Every node except the Document is owned by exactly one parent, in source
order. The set of node types is closed: the code generator handles each of
them explicitly.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


@dataclass
class Tag:
    """An HTML element, or a mustache helper when ``helper`` is set."""
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["Node"] = field(default_factory=list)
    helper: bool = False
    args: str = ''
    inverse: Optional[List["Node"]] = None  # children of an `else` branch
    line_number: int = 0


@dataclass
class Literal:
    """Text from a `|` line. Segments are joined with a single space."""
    segments: List[str] = field(default_factory=list)


@dataclass
class Passthrough:
    """Raw markup copied verbatim (lines starting with `<`)."""
    raw: str


@dataclass
class Text:
    value: str


@dataclass
class TrailingMarker:
    """Text from a `'` line, always followed by one space in the output."""
    value: str


Node = Union[Tag, Literal, Passthrough, Text, TrailingMarker]


@dataclass
class Document:
    """Synthetic root holding the top-level nodes."""
    children: List[Node] = field(default_factory=list)
