import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from .codegen import generate
from .errors import EmblemIndentationError
from .nodes import Document, Literal, Node, Passthrough, Tag, Text, TrailingMarker
from .preprocessor import Line, preprocess

logger = logging.getLogger(__name__)

# Bare words in this table open an HTML element, any other bare word opens a
# mustache helper (each, if, with, ...).
HTML_ELEMENTS = frozenset("""
    a abbr address area article aside audio b base bdi bdo blockquote body br
    button canvas caption cite code col colgroup data datalist dd del details
    dfn dialog div dl dt em embed fieldset figcaption figure footer form h1 h2
    h3 h4 h5 h6 head header hgroup hr html i iframe img input ins kbd label
    legend li link main map mark menu meta meter nav noscript object ol
    optgroup option output p param picture pre progress q rp rt ruby s samp
    script search section select slot small source span strong style sub
    summary sup table tbody td template textarea tfoot th thead time title tr
    track u ul var video wbr
""".split())

_NAME = r"[A-Za-z][\w:-]*"
_EXPLICIT_TAG = re.compile(rf"%({_NAME})")
_BARE_WORD = re.compile(rf"{_NAME}")
_SHORTHAND = re.compile(r"([.#])([\w:-]+)")
_ATTRIBUTE = re.compile(r"""([A-Za-z_:@][\w:.-]*)=("[^"]*"|'[^']*'|[^\s"']+)(?=\s|$)""")


@dataclass(frozen=True)
class CompilerOptions:
    """
    Compiler policy knobs.

    text_separator joins continuation lines of inline tag text and plain text.
    Literal (|) and raw markup (<) continuations always use a single space.
    """
    text_separator: str = ' '


@dataclass
class IndentationFrame:
    """An open indentation level. `node` is borrowed, never owned."""
    width: int
    node: Union[Tag, Document]
    inverse: bool = False

    def attach(self, child: Node) -> None:
        if self.inverse:
            self.node.inverse.append(child)
        else:
            self.node.children.append(child)


@dataclass
class ParseState:
    """Everything a single compilation mutates. Created fresh per call."""
    document: Document
    frames: List[IndentationFrame]
    # Last line's node if it can take children, with its inverse flag
    previous: Optional[Tuple[Tag, bool]] = None
    # (width, node) of the node currently absorbing deeper lines as
    # continuation text; node is None for comments, whose lines are dropped
    absorber: Optional[Tuple[int, Optional[Node]]] = None


class EmblemCompiler:
    """
    Emblem Compiler
    Compiles indentation-structured Emblem source to HTML mixed with
    mustache/Handlebars block syntax.

    Features:
    - Indentation-based hierarchy; sibling levels may use any width
    - HTML elements, %explicit:tags, .class and #id shorthands, attributes
    - Mustache helpers for any other bare word, with `else` branches
    - Literal text (|), trailing space text ('), raw markup passthrough (<)
    - Mustache expressions (= and ==) and comments (/)
    - Continuation lines joined into the inline content above them
    - No HTML escaping, no output formatting
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile(self, source: str) -> str:
        """Compiles Emblem source to a template string."""
        return generate(self.parse(source))

    def parse(self, source: str) -> Document:
        """Parses Emblem source into a Document tree."""
        document = Document()
        state = ParseState(document=document, frames=[IndentationFrame(-1, document)])

        for line in preprocess(source):
            if state.absorber is not None:
                width, target = state.absorber
                if line.indent_width > width:
                    if target is not None:
                        self._continue(target, line.content)
                    continue
                state.absorber = None

            frame = self._resolve(state, line)
            self._classify(state, line, frame)

        return document

    # --- Indentation ---

    def _resolve(self, state: ParseState, line: Line) -> IndentationFrame:
        """Returns the frame the line attaches to, pushing or popping levels."""
        top = state.frames[-1]
        if line.indent_width > top.width:
            if state.previous is not None:
                parent, inverse = state.previous
                frame = IndentationFrame(line.indent_width, parent, inverse)
            else:
                frame = IndentationFrame(line.indent_width, top.node, top.inverse)
            state.frames.append(frame)
            logger.debug("Line %d: opened indentation level %d", line.line_number, line.indent_width)
            return frame

        while state.frames[-1].width > line.indent_width:
            state.frames.pop()
        if state.frames[-1].width != line.indent_width:
            open_widths = ', '.join(str(f.width) for f in state.frames if f.width >= 0)
            raise EmblemIndentationError(
                f"Dedent to {line.indent_width} spaces matches no open indentation level "
                f"(open levels: {open_widths or 'none'}).",
                line.line_number,
            )
        return state.frames[-1]

    # --- Classification ---

    def _classify(self, state: ParseState, line: Line, frame: IndentationFrame) -> None:
        """Builds the node for a line and attaches it under its frame."""
        content = line.content
        state.previous = None

        if content.startswith('|'):
            node: Node = Literal([self._strip_marker(content)])
        elif content == "'" or content.startswith("' "):
            node = TrailingMarker(self._strip_marker(content))
        elif content.startswith('<'):
            node = Passthrough(content)
        elif content.startswith('/'):
            state.absorber = (line.indent_width, None)
            return
        elif content.startswith('='):
            node = self._expression(content)
        elif content == 'else' and self._open_else(state, frame):
            return
        else:
            tag = self._parse_tag(content, line.line_number)
            if tag is None:
                node = Text(content)
            else:
                frame.attach(tag)
                inline = tag.children[-1] if tag.children else None
                if inline is None:
                    state.previous = (tag, False)
                else:
                    state.absorber = (line.indent_width, inline)
                return

        frame.attach(node)
        state.absorber = (line.indent_width, node)

    def _open_else(self, state: ParseState, frame: IndentationFrame) -> bool:
        """
        Turns an `else` line into the inverse branch of the helper above it.
        Returns False when there is no such helper, or it already has an
        `else`; the line is then parsed as a bare `{{else}}` helper.
        """
        siblings = frame.node.inverse if frame.inverse else frame.node.children
        if not siblings:
            return False
        helper = siblings[-1]
        if not isinstance(helper, Tag) or not helper.helper or helper.inverse is not None:
            return False
        helper.inverse = []
        state.previous = (helper, True)
        return True

    @staticmethod
    def _strip_marker(content: str) -> str:
        """Drops a one-character marker and exactly one separating space."""
        rest = content[1:]
        return rest[1:] if rest.startswith(' ') else rest

    def _parse_tag(self, content: str, line_number: int) -> Optional[Tag]:
        """
        Parses an element or helper line.
        Returns None when the line is not tag shaped and should be plain text.
        """
        explicit = _EXPLICIT_TAG.match(content)
        if explicit:
            name = explicit.group(1)
            position = explicit.end()
        elif content[0] in '.#':
            name = 'div'
            position = 0
        else:
            word = _BARE_WORD.match(content)
            if not word:
                return None
            if word.group(0) not in HTML_ELEMENTS:
                return self._parse_helper(content, line_number)
            name = word.group(0)
            position = word.end()

        attributes: Dict[str, str] = {}
        classes: List[str] = []
        for shorthand in _SHORTHAND.finditer(content, position):
            if shorthand.start() != position:
                break
            kind, value = shorthand.groups()
            if kind == '#':
                attributes['id'] = value
            else:
                classes.append(value)
            position = shorthand.end()

        rest = content[position:]
        if rest.startswith('='):
            tag = Tag(name, attributes, line_number=line_number)
            tag.children.append(self._expression(rest))
            return tag
        if rest and not rest[0].isspace():
            # e.g. `p/` or `p|x`; not a tag line
            return None
        rest = rest.strip()

        explicit_attributes: Dict[str, str] = {}
        while rest:
            attribute = _ATTRIBUTE.match(rest)
            if not attribute:
                break
            key, value = attribute.groups()
            if value[0] in '"\'':
                value = value[1:-1]
            if key == 'class':
                classes.extend(value.split())
            else:
                explicit_attributes[key] = value
            rest = rest[attribute.end():].lstrip()

        if classes:
            attributes['class'] = ' '.join(classes)
        attributes.update(explicit_attributes)

        tag = Tag(name, attributes, line_number=line_number)
        if rest.startswith('|'):
            tag.children.append(Literal([self._strip_marker(rest)]))
        elif rest.startswith('='):
            tag.children.append(self._expression(rest))
        elif rest:
            tag.children.append(Text(rest))
        return tag

    @staticmethod
    def _expression(content: str) -> Text:
        """
        `= name` -> {{name}}, `== name` -> {{{name}}}.
        A marker with no expression after it stays plain text.
        """
        if content.startswith('=='):
            expression = content[2:].strip()
            return Text(f"{{{{{{{expression}}}}}}}" if expression else content)
        expression = content[1:].strip()
        return Text(f"{{{{{expression}}}}}" if expression else content)

    @staticmethod
    def _parse_helper(content: str, line_number: int) -> Tag:
        """`each foo` -> helper `each` with args `foo`."""
        parts = content.split(None, 1)
        args = parts[1].strip() if len(parts) > 1 else ''
        return Tag(parts[0], helper=True, args=args, line_number=line_number)

    # --- Text joining ---

    def _continue(self, target: Node, content: str) -> None:
        """Appends a deeper-indented line to the inline content above it."""
        if isinstance(target, Literal):
            target.segments.append(content)
        elif isinstance(target, Passthrough):
            target.raw += ' ' + content
        elif isinstance(target, TrailingMarker):
            target.value += ' ' + content
        elif isinstance(target, Text):
            target.value += self.options.text_separator + content
        else:
            raise TypeError(f"{type(target).__name__} cannot take continuation text")


def compile(source: str, options: Optional[CompilerOptions] = None) -> str:
    """Compiles Emblem source; raises EmblemIndentationError on a half dedent."""
    return EmblemCompiler(options).compile(source)
