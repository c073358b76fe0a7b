from typing import Dict, List

from .nodes import Document, Literal, Node, Passthrough, Tag, Text, TrailingMarker


def _attribute_string(attributes: Dict[str, str]) -> str:
    """Returns e.g. ' id="main" class="a b"'. Values are not escaped."""
    return ''.join(f' {name}="{value}"' for name, value in attributes.items())


def _emit_tag(tag: Tag, out: List[str]) -> None:
    if tag.helper:
        expression = f"{tag.name} {tag.args}" if tag.args else tag.name
        if not tag.children and tag.inverse is None:
            out.append(f"{{{{{expression}}}}}")
            return
        out.append(f"{{{{#{expression}}}}}")
        _emit_nodes(tag.children, out)
        if tag.inverse is not None:
            out.append("{{else}}")
            _emit_nodes(tag.inverse, out)
        out.append(f"{{{{/{tag.name}}}}}")
    else:
        out.append(f"<{tag.name}{_attribute_string(tag.attributes)}>")
        _emit_nodes(tag.children, out)
        out.append(f"</{tag.name}>")


def _emit_nodes(nodes: List[Node], out: List[str]) -> None:
    # Siblings are concatenated with no separator
    for node in nodes:
        if isinstance(node, Tag):
            _emit_tag(node, out)
        elif isinstance(node, Literal):
            out.append(' '.join(node.segments))
        elif isinstance(node, Passthrough):
            out.append(node.raw)
        elif isinstance(node, TrailingMarker):
            out.append(node.value + ' ')
        elif isinstance(node, Text):
            out.append(node.value)
        else:
            raise TypeError(f"Unknown node type: {type(node).__name__}")


def generate(document: Document) -> str:
    """Serializes a parsed document to a single flat HTML/mustache string."""
    out: List[str] = []
    _emit_nodes(document.children, out)
    return ''.join(out)
