"""
Turns the object grammar's parse tree into the `ObjectData` model.

Handlers run bottom-up. Lexemes become `Lexeme`s, each tag becomes a
`TagValue` holding its converted value, and every block folds the tag values
it collected into a model object. A tag written twice in one block keeps its
last value.
"""

import logging
import re
from decimal import Decimal
from typing import Any, Dict, List, NamedTuple, Tuple

from .errors import NumericRangeError, SemanticError, line_col
from .grammar import LEXEMES, SEGMENT_PATTERN, SEPARATOR_PATTERN, ObjectGrammar
from .model import (
    Bdy,
    BPoint,
    CPoint,
    Frame,
    Itr,
    ObjectData,
    OPoint,
    Path,
    SpriteSheet,
    WPoint,
)
from .walk import TypedASTWalker

logger = logging.getLogger(__name__)

ELEMENT_TYPES = {
    "Bdy": Bdy,
    "BPoint": BPoint,
    "CPoint": CPoint,
    "Itr": Itr,
    "OPoint": OPoint,
    "WPoint": WPoint,
}

SPRITE_SHEET_TAGS = ("w", "h", "row", "col")
PAIR_TAGS = ("catchingact", "caughtact")

_SEGMENT = re.compile(SEGMENT_PATTERN)
_SEPARATOR = re.compile(SEPARATOR_PATTERN)


class Lexeme(NamedTuple):
    kind: str
    text: str
    start: int
    end: int


class TagValue(NamedTuple):
    field: str
    value: Any
    start: int
    end: int


def flatten(values: List[Any]) -> List[Any]:
    """Splice nested lists and drop the `None`s left by literals and empty options."""
    flat: List[Any] = []
    for value in values:
        if isinstance(value, list):
            flat.extend(flatten(value))
        elif value is not None:
            flat.append(value)
    return flat


class ObjectDataMapper:
    """
    Maps parse trees produced with `ObjectGrammar` to `ObjectData`.

    Integers must fit `int_bits`: `Int` fields are signed, `Uint` fields
    unsigned. An instance keeps per-call state, so use one per thread.
    """

    def __init__(self, int_bits: int = 32) -> None:
        self.int_bits = int_bits
        self.int_range: Tuple[int, int] = (-2 ** (int_bits - 1), 2 ** (int_bits - 1) - 1)
        self.uint_range: Tuple[int, int] = (0, 2 ** int_bits - 1)
        self.walker = TypedASTWalker(ObjectData, ObjectGrammar.name)
        self.handlers()

    def map(self, tree: Any, text: str) -> ObjectData:
        """Map `tree`, the parse of `text`, raising `Lf2ParseError` subclasses."""
        self.walker.clear_context()
        self.walker.with_context(source=text, frame_numbers={})
        try:
            return self.walker.walk(tree)
        finally:
            self.walker.clear_context()

    @property
    def source(self) -> str:
        return self.walker.walker.context["source"]

    # Lexeme conversion

    def convert(self, lexeme: Lexeme, field: str) -> Any:
        if lexeme.kind == "Int":
            return self.to_int(lexeme, field, self.int_range)
        if lexeme.kind == "Uint":
            return self.to_int(lexeme, field, self.uint_range)
        if lexeme.kind == "Float":
            return self.to_decimal(lexeme, field)
        if lexeme.kind == "Path":
            return self.to_path(lexeme, field)
        if lexeme.kind in ("ObjectName", "FrameName"):
            return self.to_name(lexeme, field)
        raise SemanticError(
            self.source, lexeme.start, lexeme.end, field, f"unsupported lexeme `{lexeme.kind}`"
        )

    def check_lexical(self, lexeme: Lexeme, field: str) -> None:
        if not LEXEMES[lexeme.kind].compiled.fullmatch(lexeme.text):
            raise SemanticError(
                self.source, lexeme.start, lexeme.end, field,
                f"`{lexeme.text}` is not a valid {lexeme.kind}",
            )

    def to_int(self, lexeme: Lexeme, field: str, bounds: Tuple[int, int]) -> int:
        self.check_lexical(lexeme, field)
        value = int(lexeme.text)
        minimum, maximum = bounds
        if not minimum <= value <= maximum:
            raise NumericRangeError(
                self.source, lexeme.start, lexeme.end, field, lexeme.text, minimum, maximum
            )
        return value

    def to_decimal(self, lexeme: Lexeme, field: str) -> Decimal:
        self.check_lexical(lexeme, field)
        text = lexeme.text
        # `1.` is written by some editors and means `1.0`
        if text.endswith("."):
            text += "0"
        return Decimal(text)

    def to_path(self, lexeme: Lexeme, field: str) -> Path:
        self.check_lexical(lexeme, field)
        separator = _SEPARATOR.search(lexeme.text)
        segments = tuple(_SEPARATOR.split(lexeme.text))
        for segment in segments:
            if not _SEGMENT.fullmatch(segment):
                raise SemanticError(
                    self.source, lexeme.start, lexeme.end, field,
                    f"`{lexeme.text}` has an invalid path segment `{segment}`",
                )
        return Path(segments, separator.group(0) if separator else None)

    def to_name(self, lexeme: Lexeme, field: str) -> str:
        self.check_lexical(lexeme, field)
        return lexeme.text

    # Folding tag values into blocks

    def collect(self, items: List[Any], block: str) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        for item in items:
            if not isinstance(item, TagValue):
                continue
            if item.field in fields:
                logger.debug(f"`{item.field}` in {block} repeated at offset {item.start}, keeping the last value")
            fields[item.field] = item.value
        return fields

    def missing_error(self, node: Dict[str, Any], field: str, missing: List[str], what: str) -> SemanticError:
        names = ", ".join(f"`{name}:`" for name in missing)
        return SemanticError(
            self.source, node["start"], node["end"], field,
            f"{what} is missing {names}", missing=missing,
        )

    def handlers(self):
        walker = self.walker

        @walker.for_node("Literal", auto_traverse=False)
        def literal(w, node, ctx):
            return None

        @walker.for_node("EndOfInput", auto_traverse=False)
        def end_of_input(w, node, ctx):
            return None

        @walker.for_node("Trailing", auto_traverse=False)
        def trailing(w, node, ctx):
            return None

        @walker.for_node("Optional")
        def optional(w, node, ctx):
            return flatten(node["processed_value"])

        @walker.for_node("Or")
        def or_(w, node, ctx):
            return flatten(node["processed_value"])

        @walker.for_node("Minmax")
        def minmax(w, node, ctx):
            return flatten(node["processed_value"])

        @walker.for_node("Conjoined")
        def conjoined(w, node, ctx):
            return flatten(node["processed_value"])

        def lexeme(w, node, ctx):
            return Lexeme(node["name"], node["value"], node["start"], node["end"])

        for name in LEXEMES:
            walker.for_node(name, auto_traverse=False)(lexeme)

        @walker.for_node("Tag")
        def tag_value(w, node, ctx):
            field = node["name"]
            values = tuple(
                self.convert(item, field)
                for item in flatten(node["processed_value"])
                if isinstance(item, Lexeme)
            )
            if field in PAIR_TAGS:
                value = values
            else:
                value = values[0] if len(values) == 1 else values
            return TagValue(field, value, node["start"], node["end"])

        @walker.for_node("SpriteRange")
        def sprite_range(w, node, ctx):
            first, last = (
                self.convert(item, "file")
                for item in flatten(node["processed_value"])
                if isinstance(item, Lexeme)
            )
            return TagValue("range", (first, last), node["start"], node["end"])

        @walker.for_node("SpriteSheet")
        def sprite_sheet(w, node, ctx):
            items = flatten(node["processed_value"])
            path = next(item for item in items if isinstance(item, Lexeme))
            fields = self.collect(items, "file")
            missing = [name for name in SPRITE_SHEET_TAGS if name not in fields]
            if missing:
                raise self.missing_error(node, "file", missing, "sprite sheet")
            first_pic, last_pic = fields.pop("range", (None, None))
            sheet = SpriteSheet(
                file=self.convert(path, "file"),
                first_pic=first_pic,
                last_pic=last_pic,
                **fields,
            )
            return TagValue("sprite_sheets", sheet, node["start"], node["end"])

        @walker.for_node("Header")
        def header(w, node, ctx):
            items = flatten(node["processed_value"])
            sheets = tuple(
                item.value for item in items
                if isinstance(item, TagValue) and item.field == "sprite_sheets"
            )
            fields = self.collect(
                [item for item in items if not (isinstance(item, TagValue) and item.field == "sprite_sheets")],
                "Header",
            )
            if "name" not in fields:
                raise self.missing_error(node, "name", ["name"], "header")
            fields["sprite_sheets"] = sheets
            return fields

        def element(element_type):
            def handler(w, node, ctx):
                fields = self.collect(flatten(node["processed_value"]), node["name"])
                return element_type(**fields)
            return handler

        for name, element_type in ELEMENT_TYPES.items():
            walker.for_node(name)(element(element_type))

        @walker.for_node("Frame")
        def frame(w, node, ctx):
            items = flatten(node["processed_value"])
            number_lexeme, name_lexeme = [item for item in items if isinstance(item, Lexeme)][:2]
            number = self.convert(number_lexeme, "number")
            seen = w.context["frame_numbers"]
            if number in seen:
                line, column = seen[number]
                raise SemanticError(
                    self.source, node["start"], node["end"], "number",
                    f"frame number {number} is already used by the frame at {line}:{column}",
                )
            seen[number] = line_col(self.source, node["start"])

            fields = self.collect(items, f"frame {number}")
            elements = tuple(item for item in items if isinstance(item, tuple(ELEMENT_TYPES.values())))
            return Frame(
                number=number,
                name=self.convert(name_lexeme, "name"),
                elements=elements,
                **fields,
            )

        @walker.for_node(ObjectGrammar.name)
        def object_data(w, node, ctx):
            items = flatten(node["processed_value"])
            fields = next(item for item in items if isinstance(item, dict))
            frames = tuple(item for item in items if isinstance(item, Frame))
            logger.debug(f"mapped `{fields['name']}` with {len(frames)} frames")
            return ObjectData(frames=frames, **fields)

        return [
            literal, end_of_input, trailing, optional, or_, minmax, conjoined,
            tag_value, sprite_range, sprite_sheet, header, frame, object_data,
        ]
