from emblem.preprocessor import Line, preprocess


def test_blank_lines_are_dropped_but_numbered():
    lines = preprocess("\n  \np Hello\n\n  span")
    assert lines == [
        Line(0, "p Hello", 3),
        Line(2, "span", 5),
    ]


def test_crlf_and_lf_are_equivalent():
    assert preprocess("p\r\n  span\r\n") == preprocess("p\n  span\n")


def test_content_is_trimmed_and_indent_counted():
    [line] = preprocess("    |   text   ")
    assert line.indent_width == 4
    assert line.content == "|   text"


def test_first_line_keeps_its_own_baseline():
    lines = preprocess("\n   p")
    assert lines[0].indent_width == 3


def test_empty_source():
    assert preprocess("") == []
    assert preprocess("\n \r\n\t\n") == []
