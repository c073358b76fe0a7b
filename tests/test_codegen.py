import pytest

from emblem.codegen import generate
from emblem.nodes import Document, Literal, Passthrough, Tag, Text, TrailingMarker


def test_generates_flat_markup():
    document = Document([
        Tag("ul", {"id": "list", "class": "items"}, [
            Tag("li", children=[Text("one")]),
            Tag("li", children=[Literal(["two", "and", "more"])]),
        ]),
        Passthrough("<hr>"),
        Tag("span", children=[TrailingMarker("trailing")]),
    ])
    assert generate(document) == (
        '<ul id="list" class="items"><li>one</li><li>two and more</li></ul>'
        '<hr><span>trailing </span>'
    )


def test_helper_blocks():
    each = Tag("each", helper=True, args="people", children=[Tag("p", children=[Text("x")])])
    assert generate(Document([each])) == "{{#each people}}<p>x</p>{{/each}}"

    bare = Tag("yield", helper=True)
    assert generate(Document([bare])) == "{{yield}}"

    with_else = Tag("if", helper=True, args="a", children=[Text("yes")], inverse=[Text("no")])
    assert generate(Document([with_else])) == "{{#if a}}yes{{else}}no{{/if}}"


def test_empty_document():
    assert generate(Document()) == ""


def test_unknown_node_type_is_rejected():
    with pytest.raises(TypeError):
        generate(Document([object()]))
