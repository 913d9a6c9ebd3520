from ..errors import (
    line_col,
    excerpt,
    Lf2ParseError,
    StructuralParseError,
    NumericRangeError,
    SemanticError,
    DecodeError,
)


def test_line_col():
    text = "ab\ncd\n"
    assert line_col(text, 0) == (1, 1)
    assert line_col(text, 2) == (1, 3)
    assert line_col(text, 3) == (2, 1)
    assert line_col(text, 6) == (3, 1)
    assert line_col(text, 100) == (3, 1)


def test_excerpt():
    assert excerpt("abc", 3) == "end of input"
    assert excerpt("a   \nb", 1) == "whitespace"
    assert excerpt("pic: x\nwait: 1", 5) == "`x`"


def test_structural_render():
    error = StructuralParseError("x: 1\ny: z", 8, "Bdy", ["Int"], field="y")
    assert (error.line, error.column, error.offset) == (2, 4, 8)
    assert str(error) == "2:4: expected `Int` while parsing `y` in `Bdy`, found `z`"

    error = StructuralParseError("", 0, "Header", ["<bmp_begin>", "name:"])
    assert str(error) == "1:1: expected one of `<bmp_begin>`, `name:` while parsing `Header`, found end of input"


def test_hierarchy():
    for error in (
        NumericRangeError("wait: 9", 6, 7, "wait", "9", 0, 5),
        SemanticError("", 0, 0, "name", "header is missing `name:`", missing=["name"]),
        StructuralParseError("", 0, "Object", []),
    ):
        assert isinstance(error, Lf2ParseError)
        assert isinstance(error, ValueError)


def test_numeric_range_render():
    error = NumericRangeError("wait: 9", 6, 7, "wait", "9", 0, 5)
    assert (error.start, error.end) == (6, 7)
    assert str(error) == "1:7: `wait` value `9` is out of range [0, 5]"


def test_decode_error():
    data = b"ok\n\xc3("
    try:
        data.decode("utf-8")
    except UnicodeDecodeError as e:
        error = DecodeError(data, e)
    assert error.offset == 3
    assert error.byte_offset == 3
    assert (error.line, error.column) == (2, 1)
    assert "byte 3" in str(error)


def test_byte_offset():
    error = SemanticError("name: Frézé\nx", 12, 13, "x", "unexpected")
    assert error.offset == 12
    assert error.byte_offset == 14
    assert (error.line, error.column) == (2, 1)
