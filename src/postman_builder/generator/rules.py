"""Example value compiler: turns validation rules into example request data.

Compilation never fails: malformed or partial rules degrade to ``None`` or
empty containers.
"""

import math
from typing import Any

from pydantic import BaseModel

from postman_builder.generator.description import describe, js_number
from postman_builder.parser.base import (
    ArrayRule,
    BooleanRule,
    NumberRule,
    ObjectRule,
    RuleBase,
    RuleNode,
    StringRule,
    representative,
)


class ExampleValue(BaseModel):
    """A compiled value and the description of the rule it came from.

    ``value`` is a JSON scalar, a list of ``ExampleValue`` or a dict of
    ``ExampleValue``. Defaults are copied verbatim, so containers taken from
    a default hold plain JSON data instead.
    """

    value: Any
    description: str | None = None

    def to_data(self) -> Any:
        """Strip descriptions and return plain JSON data."""
        return _plain(self.value)


def _plain(value: Any) -> Any:
    if isinstance(value, ExampleValue):
        return value.to_data()
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def compile_rule(node: RuleNode | None) -> ExampleValue:
    """Compile a rule (or the representative of a list of alternatives)."""
    return ExampleValue(value=_compile_value(representative(node)), description=describe(node))


def _compile_value(rule: RuleBase | None) -> Any:
    if rule is None:
        return None
    if rule.has_default():
        return rule.default

    if isinstance(rule, BooleanRule):
        return False
    if isinstance(rule, StringRule):
        return rule.values[0] if rule.values and rule.values[0] else ""
    if isinstance(rule, NumberRule):
        first = rule.values[0] if rule.values else None
        return first if _is_finite_number(first) else 0
    if isinstance(rule, ObjectRule):
        if rule.schema_ is None:
            return {}
        return {key: compile_rule(child) for key, child in rule.schema_.items()}
    if isinstance(rule, ArrayRule):
        return _compile_array(rule)
    return None


def _compile_array(rule: ArrayRule) -> list[ExampleValue]:
    if rule.schema_ is not None:
        size = len(rule.schema_)
        if rule.nested is not None and rule.length is not None and rule.length > size:
            size = rule.length
        return [
            compile_rule(rule.schema_[index] if index < len(rule.schema_) else rule.nested)
            for index in range(size)
        ]
    if rule.nested is None:
        return []
    element = compile_rule(rule.nested)
    return [element] * (rule.length or 1)


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def compile_scalar(rule: RuleBase | None) -> str:
    """Compile a rule to the string form used by query parameters and form fields."""
    if rule is None:
        return ""
    if rule.has_default():
        if isinstance(rule.default, bool):
            return "1" if rule.default else "0"
        if isinstance(rule.default, str):
            return rule.default
        if isinstance(rule.default, (int, float)):
            return js_number(rule.default)
    if rule.values is not None:
        return _stringify(rule.values[0]) if rule.values else ""

    if isinstance(rule, NumberRule):
        return "0" if rule.integer else "0.0"
    if isinstance(rule, BooleanRule):
        return "0"
    return ""


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (int, float)):
        return js_number(value)
    return str(value)
