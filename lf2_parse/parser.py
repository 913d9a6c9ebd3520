import logging
import time
from typing import List, Dict, Tuple, Union, Any, Optional as OptionalType, Type

from .abstract import (
    Literal,
    RegExp,
    Optional,
    Or,
    Conjoined,
    Tag,
    Rest,
    EndOfInput,
    TokenAbstract,
    Grammar,
    GenericMinmax
)
from .errors import StructuralParseError, line_col

logger = logging.getLogger(__name__)


class ASTNode:
    def __init__(
        self,
        node_type: str,
        value: Any = None,
        custom_name: str = None,
        start: int = 0,
        end: int = 0,
    ) -> None:
        self.type: str = node_type
        self.name: str = custom_name or node_type
        self.value: Union[List[Any], Any] = [] if value is None else value
        self.start: int = start
        self.end: int = end

    @property
    def children(self) -> List['ASTNode']:
        if isinstance(self.value, list):
            return [item for item in self.value if isinstance(item, ASTNode)]
        return []

    def find_all(self, name: str) -> List['ASTNode']:
        """All descendants (and self) named `name`, in source order."""
        found = [self] if self.name == name else []
        for child in self.children:
            found.extend(child.find_all(name))
        return found

    def ast(self) -> Dict[str, Any]:
        """
        Convert the ASTNode to an AST (dictionary) representation, with child ASTNodes being also converted.
        """
        result = {"type": self.type, "name": self.name, "start": self.start, "end": self.end}

        if isinstance(self.value, list):
            result["value"] = [item.ast() if isinstance(item, ASTNode) else item for item in self.value]
        elif isinstance(self.value, ASTNode):
            result["value"] = self.value.ast()
        else:
            result["value"] = self.value

        return result

    def __repr__(self) -> str:
        return f"ASTNode({self.type!r}, {self.name!r}, [{self.start}, {self.end}))"


class ParseResult:
    def __init__(self, value: Any, end: int = 0) -> None:
        self.value: Any = value
        self.end: int = end

    def ast(self) -> Any:
        """
        Convert the ParseResult to an AST (dictionary) representation, with child ASTNodes being also converted.
        """
        if isinstance(self.value, ASTNode):
            return self.value.ast()
        return self.value


class ParseState:
    """
    Mutable bookkeeping for one parse call: the input and the furthest
    position where a token failed, with what was expected there.
    """
    def __init__(self, text: str, root_name: str) -> None:
        self.text: str = text
        self.furthest: int = -1
        self.expected: Dict[str, None] = {}
        self.rule: str = root_name
        self.field: OptionalType[str] = None
        self.stack: List[Tuple[str, str]] = [("block", root_name)]

    def fail(self, pos: int, expectation: str) -> None:
        if pos > self.furthest:
            self.furthest = pos
            self.expected = {}
            self.rule = next(name for kind, name in reversed(self.stack) if kind == "block")
            kind, name = self.stack[-1]
            self.field = name if kind == "field" else None
        if pos == self.furthest:
            self.expected.setdefault(expectation)

    def error(self) -> StructuralParseError:
        return StructuralParseError(
            self.text,
            max(self.furthest, 0),
            self.rule,
            self.expected.keys(),
            field=self.field,
        )


class Parser:
    def __init__(self, grammar_class: Type[Grammar]) -> None:
        self.grammar_class: Type[Grammar] = grammar_class
        self.grammar_instance: Grammar = grammar_class(grammar_class.name)
        self.grammar_instance.name = grammar_class.name
        self.ignore_rules: Tuple[str, ...] = tuple(
            rule.value for rule in self.grammar_instance.ignore() if isinstance(rule, Literal)
        )

    def _skip(self, text: str, pos: int) -> int:
        length = len(text)
        while pos < length:
            for ignored in self.ignore_rules:
                if text.startswith(ignored, pos):
                    pos += len(ignored)
                    break
            else:
                return pos
        return pos

    def _parse_optional(self, state: ParseState, pos: int, rule: Optional) -> OptionalType[ParseResult]:
        result: OptionalType[ParseResult] = self._apply_rule(state, pos, rule.rule)
        custom_name = getattr(rule, '_custom_name', None)
        if result:
            node: ASTNode = ASTNode(
                "Optional", value=[result.value], custom_name=custom_name,
                start=result.value.start, end=result.end,
            )
            return ParseResult(node, result.end)
        return ParseResult(ASTNode("Optional", value=[None], custom_name=custom_name, start=pos, end=pos), pos)

    def _parse_minmax(self, state: ParseState, pos: int, rule: GenericMinmax) -> OptionalType[ParseResult]:
        current: int = pos
        values: List[Any] = []

        for _ in range(rule.min_count):
            result: OptionalType[ParseResult] = self._apply_rule(state, current, rule.rule)
            if not result:
                return None
            values.append(result.value)
            current = result.end

        remaining = 0 if rule.max_count == 0 else rule.max_count - rule.min_count
        while rule.max_count == 0 or remaining > 0:
            result: OptionalType[ParseResult] = self._apply_rule(state, current, rule.rule)
            if not result:
                break
            values.append(result.value)
            remaining -= 1

            if result.end == current:
                break

            current = result.end

        custom_name = getattr(rule, '_custom_name', None)
        start = values[0].start if values else current
        return ParseResult(
            ASTNode("Minmax", value=values, custom_name=custom_name, start=start, end=current), current
        )

    def _parse_sequence(self, state: ParseState, pos: int, rules: Tuple[TokenAbstract, ...]) -> OptionalType[Tuple[List[Any], int]]:
        current: int = pos
        values: List[Any] = []

        for sub_rule in rules:
            result: OptionalType[ParseResult] = self._apply_rule(state, current, sub_rule)
            if not result:
                return None
            values.append(result.value)
            current = result.end

        return values, current

    def _parse_conjoined(self, state: ParseState, pos: int, rule: Conjoined) -> OptionalType[ParseResult]:
        custom_name = getattr(rule, '_custom_name', None)
        if custom_name:
            state.stack.append(("block", custom_name))
        try:
            parsed = self._parse_sequence(state, pos, rule.rules)
        finally:
            if custom_name:
                state.stack.pop()

        if parsed is None:
            return None
        values, end = parsed
        start = values[0].start if values else pos
        return ParseResult(
            ASTNode("Conjoined", value=values, custom_name=custom_name, start=start, end=end), end
        )

    def _parse_tag(self, state: ParseState, pos: int, rule: Tag) -> OptionalType[ParseResult]:
        keyword: OptionalType[ParseResult] = self._apply_rule(state, pos, rule.rules[0])
        if not keyword:
            return None

        state.stack.append(("field", rule.field))
        try:
            parsed = self._parse_sequence(state, keyword.end, rule.rules[1:])
        finally:
            state.stack.pop()

        if parsed is None:
            return None
        values, end = parsed
        return ParseResult(
            ASTNode("Tag", value=[keyword.value] + values, custom_name=rule.field,
                    start=keyword.value.start, end=end),
            end,
        )

    def _parse_or(self, state: ParseState, pos: int, rule: Or) -> OptionalType[ParseResult]:
        for sub_rule in rule.rules:
            result: OptionalType[ParseResult] = self._apply_rule(state, pos, sub_rule)
            if result:
                custom_name = getattr(rule, '_custom_name', None)
                node: ASTNode = ASTNode(
                    "Or", value=[result.value], custom_name=custom_name,
                    start=result.value.start, end=result.end,
                )
                return ParseResult(node, result.end)
        return None

    def _parse_literal(self, state: ParseState, pos: int, rule: Literal) -> OptionalType[ParseResult]:
        pos = self._skip(state.text, pos)
        if state.text.startswith(rule.value, pos):
            end = pos + len(rule.value)
            custom_name = getattr(rule, '_custom_name', None)
            node: ASTNode = ASTNode("Literal", value=rule.value, custom_name=custom_name, start=pos, end=end)
            return ParseResult(node, end)
        state.fail(pos, rule.expectation())
        return None

    def _parse_regexp(self, state: ParseState, pos: int, rule: RegExp) -> OptionalType[ParseResult]:
        pos = self._skip(state.text, pos)
        match = rule.compiled.match(state.text, pos)
        if match and match.end() > pos:
            custom_name = getattr(rule, '_custom_name', None)
            node: ASTNode = ASTNode(
                "RegExp", value=match.group(0), custom_name=custom_name, start=pos, end=match.end()
            )
            return ParseResult(node, match.end())
        state.fail(pos, rule.expectation())
        return None

    def _parse_rest(self, state: ParseState, pos: int, rule: Rest) -> ParseResult:
        pos = self._skip(state.text, pos)
        end = len(state.text)
        if pos < end:
            line, column = line_col(state.text, pos)
            logger.warning(
                f"ignoring {end - pos} characters from {line}:{column} to the end of input, "
                f"the first that could not be parsed: {state.error().render()}"
            )
        node = ASTNode("Rest", value=state.text[pos:], custom_name=rule.get_node_name(), start=pos, end=end)
        return ParseResult(node, end)

    def _parse_end_of_input(self, state: ParseState, pos: int, rule: EndOfInput) -> OptionalType[ParseResult]:
        pos = self._skip(state.text, pos)
        if pos == len(state.text):
            return ParseResult(ASTNode("EndOfInput", value="", start=pos, end=pos), pos)
        state.fail(pos, rule.expectation())
        return None

    def _apply_rule(self, state: ParseState, pos: int, rule: TokenAbstract) -> OptionalType[ParseResult]:
        if isinstance(rule, Literal):
            return self._parse_literal(state, pos, rule)
        elif isinstance(rule, RegExp):
            return self._parse_regexp(state, pos, rule)
        elif isinstance(rule, Optional):
            return self._parse_optional(state, pos, rule)
        elif isinstance(rule, Or):
            return self._parse_or(state, pos, rule)
        elif isinstance(rule, Tag):
            return self._parse_tag(state, pos, rule)
        elif isinstance(rule, Conjoined):
            return self._parse_conjoined(state, pos, rule)
        elif isinstance(rule, GenericMinmax):
            return self._parse_minmax(state, pos, rule)
        elif isinstance(rule, Rest):
            return self._parse_rest(state, pos, rule)
        elif isinstance(rule, EndOfInput):
            return self._parse_end_of_input(state, pos, rule)
        else:
            raise ValueError(f"Unsupported rule type: {type(rule)}")

    def parse(self, text: str) -> ParseResult:
        """
        Parse the input text using the defined grammar rules.

        Raises `StructuralParseError` at the furthest position the grammar
        could not get past.
        """
        started = time.perf_counter()
        state = ParseState(text, self.grammar_instance.name)

        result: OptionalType[ParseResult] = self._apply_rule(state, 0, self.grammar_class.lexical_rule_root)
        if not result:
            raise state.error()

        end = self._skip(text, result.end)
        if end < len(text):
            state.fail(end, "end of input")
            raise state.error()

        root = ASTNode(self.grammar_instance.name, [result.value], start=result.value.start, end=result.end)
        elapsed = (time.perf_counter() - started) * 1000
        logger.debug(f"parsed {len(text)} characters with {self.grammar_instance.name} in {elapsed:.2f} ms")
        return ParseResult(root, result.end)
