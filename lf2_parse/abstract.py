import re
from typing import List, Dict, Tuple, Any, Callable, Type, TypeVar, Pattern


class TokenAbstract:
    def __init__(self) -> None:
        raise NotImplementedError("Subclasses must implement this method")

    def ast(self) -> Dict[str, Any]:
        raise NotImplementedError("Subclasses must implement this method")

    def node_type(self) -> str:
        return self.__class__.__name__

    def with_name(self, custom_name: str) -> 'TokenAbstract':
        self._custom_name = custom_name
        return self

    def get_node_name(self) -> str:
        return getattr(self, '_custom_name', None) or self.node_type()

    def leading_keyword(self) -> str:
        """
        The literal text this rule must start with, or an empty string when it
        starts with a lexeme. Used to order alternatives longest first.
        """
        return ""


class Grammar:
    def __init__(self, name: str) -> None:
        self.name: str = name

    def ignore(self) -> Tuple['Literal', ...]:
        """Literals skipped before every token."""
        return tuple()


class Literal(TokenAbstract):
    def __init__(self, value: str) -> None:
        self.value: str = value
        self.name: str = "Literal"

    def leading_keyword(self) -> str:
        return self.value

    def expectation(self) -> str:
        return self.value

    def ast(self) -> Dict[str, str]:
        custom_name = getattr(self, '_custom_name', None)
        return {
            "type": self.name,
            "name": custom_name or self.name,
            "value": self.value
        }


class RegExp(TokenAbstract):
    def __init__(self, pattern: str) -> None:
        self.pattern: str = pattern
        self.name: str = "RegExp"
        self.compiled: Pattern[str] = re.compile(pattern)

    def expectation(self) -> str:
        return getattr(self, '_custom_name', None) or self.pattern

    def ast(self) -> Dict[str, str]:
        custom_name = getattr(self, '_custom_name', None)
        return {
            "type": self.name,
            "name": custom_name or self.name,
            "pattern": self.pattern
        }


class Or(TokenAbstract):
    def __init__(self, *rules: TokenAbstract) -> None:
        self.rules: Tuple[TokenAbstract, ...] = rules

    def ast(self) -> Dict[str, Any]:
        custom_name = getattr(self, '_custom_name', None)
        return {
            "type": "Or",
            "name": custom_name or "Or",
            "rules": [rule.ast() for rule in self.rules]
        }


class Optional(TokenAbstract):
    def __init__(self, rule: TokenAbstract) -> None:
        self.rule: TokenAbstract = rule

    def ast(self) -> Dict[str, Any]:
        custom_name = getattr(self, '_custom_name', None)
        return {
            "type": "Optional",
            "name": custom_name or "Optional",
            "rule": self.rule.ast()
        }


class GenericMinmax(TokenAbstract):
    def __init__(self, rule: TokenAbstract, min_count: int = 0, max_count: int = 0) -> None:
        self.rule: TokenAbstract = rule
        self.min_count: int = min_count
        self.max_count: int = max_count

    def ast(self) -> Dict[str, Any]:
        custom_name = getattr(self, '_custom_name', None)
        return {
            "type": "Minmax",
            "name": custom_name or "Minmax",
            "rule": self.rule.ast(),
            "clamp": [self.min_count, self.max_count]
        }


class Conjoined(TokenAbstract):
    def __init__(self, *rules: TokenAbstract) -> None:
        self.rules: Tuple[TokenAbstract, ...] = rules

    def leading_keyword(self) -> str:
        return self.rules[0].leading_keyword() if self.rules else ""

    def ast(self) -> Dict[str, Any]:
        custom_name = getattr(self, '_custom_name', None)
        return {
            "type": "Conjoined",
            "name": custom_name or "Conjoined",
            "rules": [rule.ast() for rule in self.rules]
        }


class Tag(Conjoined):
    """
    A keyword followed by its value rules, e.g. `x:` followed by an `Int`.

    The node is named after the model field the tag fills. The field only
    becomes the diagnostic context once the keyword itself has matched.
    """
    def __init__(self, field: str, keyword: str, *values: TokenAbstract) -> None:
        super().__init__(Literal(keyword), *values)
        self.field: str = field
        self.keyword: str = keyword
        self._custom_name = field

    def ast(self) -> Dict[str, Any]:
        return {
            "type": "Tag",
            "name": self.field,
            "keyword": self.keyword,
            "rules": [rule.ast() for rule in self.rules[1:]]
        }


class Rest(TokenAbstract):
    """Consumes everything up to the end of input. Always matches."""
    def __init__(self) -> None:
        self.name: str = "Rest"

    def ast(self) -> Dict[str, str]:
        return {"type": self.name, "name": self.get_node_name()}


class EndOfInput(TokenAbstract):
    def __init__(self) -> None:
        self.name: str = "EndOfInput"

    def expectation(self) -> str:
        return "end of input"

    def ast(self) -> Dict[str, str]:
        return {"type": self.name, "name": self.get_node_name()}


T = TypeVar('T')
def grammar(lexical_rule: TokenAbstract) -> Callable[[Type[T]], Type[T]]:
    """
    Define a grammar for a class.
    """
    def decorator(cls: Type[T]) -> Type[T]:
        cls.lexical_rule_root = lexical_rule
        return cls
    return decorator


def either(*rules: TokenAbstract) -> Or:
    """
    Matches the first of the provided rules that matches, in the given order.
    """
    return Or(*rules)


def longest(*rules: TokenAbstract) -> Or:
    """
    Matches any of the provided rules, trying those with the longest leading
    keyword first so `walking_speedz` is never shadowed by `walking_speed`.
    Rules with equally long keywords keep their declared order.
    """
    ordered: List[TokenAbstract] = sorted(
        rules, key=lambda rule: len(rule.leading_keyword()), reverse=True
    )
    return Or(*ordered)


def option(rule: TokenAbstract) -> Optional:
    """
    Matches a rule zero or one time.
    """
    return Optional(rule)


def minmax(min_count: int = 0, max_count: int = 0):
    """
    Matches a minimum-to-maximum number of times. A `max_count` of 0 means
    unbounded.
    """
    def gen(rule: TokenAbstract) -> GenericMinmax:
        return GenericMinmax(rule, min_count, max_count)

    return gen


def joined(*rules: TokenAbstract) -> Conjoined:
    """
    Matches a sequence of rules.
    """
    return Conjoined(*rules)


def tag(field: str, keyword: str, *values: TokenAbstract) -> Tag:
    """
    Matches `keyword` followed by `values`, filling the model field `field`.
    """
    return Tag(field, keyword, *values)
