"""
lf2-parse, Little Fighter 2 object data parsing

This is a library for parsing LF2 object data files (characters, weapons,
attacks) into an immutable typed model.
It is built on a small grammar-as-data parser: the grammar is declared with
combinators, parsed into a tree with source spans, then mapped to dataclasses
by a tree walker.
"""

__all__ = [
    "abstract",
    "parser",
    "walk",
    "grammar",
    "model",
    "mapper",
    "errors",
    "kinds",
    "parse_object_data",
    "try_parse_object_data",
    "ObjectData",
    "SpriteSheet",
    "Path",
    "Frame",
    "Bdy",
    "BPoint",
    "CPoint",
    "Itr",
    "OPoint",
    "WPoint",
    "Element",
    "ElementKind",
    "Lf2ParseError",
    "StructuralParseError",
    "NumericRangeError",
    "SemanticError",
    "DecodeError",
]

from typing import Union

from . import abstract
from . import parser
from . import walk
from . import grammar
from . import model
from . import mapper
from . import errors
from . import kinds

from .model import (
    ObjectData,
    SpriteSheet,
    Path,
    Frame,
    Bdy,
    BPoint,
    CPoint,
    Itr,
    OPoint,
    WPoint,
    Element,
    ElementKind,
)
from .errors import (
    Lf2ParseError,
    StructuralParseError,
    NumericRangeError,
    SemanticError,
    DecodeError,
)

_parser = parser.Parser(grammar.ObjectGrammar)


def _decode(text: Union[str, bytes]) -> str:
    if isinstance(text, bytes):
        try:
            return text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(text, e) from e
    return text


def parse_object_data(text: Union[str, bytes]) -> ObjectData:
    """
    Parse one object data file.

    `bytes` are decoded as UTF-8 first. Raises the first `Lf2ParseError`
    found; there is no partial result.
    """
    source = _decode(text)
    tree = _parser.parse(source)
    return mapper.ObjectDataMapper().map(tree, source)


def try_parse_object_data(text: Union[str, bytes]) -> Union[ObjectData, Lf2ParseError]:
    """Like `parse_object_data`, but returns the error instead of raising it."""
    try:
        return parse_object_data(text)
    except Lf2ParseError as e:
        return e
