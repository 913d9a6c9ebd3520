"""
Diagnostics for object data parsing.

Every error carries its character offset into the parsed text, the same
position as a UTF-8 byte offset, and the derived 1-based line and column. All
are computed when the error is built, so rendering never needs the source
again.
"""

from typing import Iterable, Tuple, Optional as OptionalType

EXCERPT_LENGTH = 24


def line_col(text: str, offset: int) -> Tuple[int, int]:
    """Return the 1-based (line, column) of `offset` in `text`."""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def excerpt(text: str, offset: int) -> str:
    """The rest of the line at `offset`, shortened, or `end of input`."""
    if offset >= len(text):
        return "end of input"
    snippet = text[offset:offset + EXCERPT_LENGTH].split("\n", 1)[0].rstrip("\r")
    if not snippet.strip():
        return "whitespace"
    return f"`{snippet}`"


class Lf2ParseError(ValueError):
    """Base class of all object data parse failures."""

    def __init__(self, text: str, start: int, end: OptionalType[int] = None) -> None:
        self.start: int = start
        self.end: int = start if end is None else end
        self.line, self.column = line_col(text, start)
        self.byte_offset: int = len(text[:start].encode("utf-8"))
        super().__init__(self.render())

    @property
    def offset(self) -> int:
        """Character offset into the decoded text. `byte_offset` is the same position in UTF-8."""
        return self.start

    def describe(self) -> str:
        raise NotImplementedError("Subclasses must implement this method")

    def render(self) -> str:
        return f"{self.line}:{self.column}: {self.describe()}"


class StructuralParseError(Lf2ParseError):
    """The input does not match the object grammar at some position."""

    def __init__(
        self,
        text: str,
        offset: int,
        rule: str,
        expected: Iterable[str],
        field: OptionalType[str] = None,
    ) -> None:
        self.rule: str = rule
        self.field: OptionalType[str] = field
        self.expected: Tuple[str, ...] = tuple(expected)
        self.found: str = excerpt(text, offset)
        super().__init__(text, offset)

    def describe(self) -> str:
        if len(self.expected) == 1:
            wanted = f"`{self.expected[0]}`"
        else:
            wanted = "one of " + ", ".join(f"`{e}`" for e in self.expected)
        where = f"`{self.rule}`"
        if self.field:
            where = f"`{self.field}` in {where}"
        return f"expected {wanted} while parsing {where}, found {self.found}"


class NumericRangeError(Lf2ParseError):
    """An integer lexeme does not fit the width of its field."""

    def __init__(
        self,
        text: str,
        start: int,
        end: int,
        field: str,
        value_text: str,
        minimum: int,
        maximum: int,
    ) -> None:
        self.field: str = field
        self.text: str = value_text
        self.minimum: int = minimum
        self.maximum: int = maximum
        super().__init__(text, start, end)

    def describe(self) -> str:
        return (
            f"`{self.field}` value `{self.text}` is out of range "
            f"[{self.minimum}, {self.maximum}]"
        )


class SemanticError(Lf2ParseError):
    """Structurally valid input that is incomplete or inconsistent."""

    def __init__(
        self,
        text: str,
        start: int,
        end: int,
        field: str,
        message: str,
        missing: Iterable[str] = (),
    ) -> None:
        self.field: str = field
        self.message: str = message
        self.missing: Tuple[str, ...] = tuple(missing)
        super().__init__(text, start, end)

    def describe(self) -> str:
        return f"`{self.field}`: {self.message}"


class DecodeError(Lf2ParseError):
    """A bytes buffer is not valid UTF-8. Offsets are byte offsets."""

    def __init__(self, data: bytes, error: UnicodeDecodeError) -> None:
        self.reason: str = error.reason
        prefix = data[:error.start].decode("utf-8", errors="replace")
        self._byte_start = error.start
        super().__init__(prefix, len(prefix))
        self.start = error.start
        self.end = error.end
        self.byte_offset = error.start

    def describe(self) -> str:
        return f"object data is not valid UTF-8 at byte {self._byte_start}: {self.reason}"
