"""Human-readable dumps of validation rules.

The dump looks like ``{ type: 'string', values: [ 'a', 'b' ], optional: true }``.
Fields are written in a fixed order (extras last, in declared order) and
fields that were never set are skipped. The multi-line form keeps a mapping
on one line while it fits in 80 columns and otherwise puts every field on its
own line; the single-line form is the multi-line one with each line break and
the indentation after it collapsed into one space.
"""

import math
import re
from typing import Any

from postman_builder.parser.base import RuleBase, RuleNode, is_container

FIELD_ORDER = ("type", "integer", "default", "values", "length", "nested", "schema")
STRUCTURAL_FIELDS = ("nested", "schema")
INDENT = "  "
BREAK_LENGTH = 80

_LINE_BREAKS = re.compile(r"\n+ *")
_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t", "\b": "\\b", "\f": "\\f", "\v": "\\v"}


def rule_fields(rule: RuleBase, strip_nested: bool = False) -> list[tuple[str, Any]]:
    """Return the ``(name, value)`` pairs set on *rule*."""
    pairs: list[tuple[str, Any]] = []
    for name in FIELD_ORDER:
        if strip_nested and name in STRUCTURAL_FIELDS:
            continue
        attr = "schema_" if name == "schema" else name
        if name == "type":
            if rule.type is not None:
                pairs.append((name, rule.type))
        elif attr in rule.model_fields_set:
            value = getattr(rule, attr)
            # fields dropped as malformed hold None; only default may be null
            if value is not None or name == "default":
                pairs.append((name, value))
    pairs.extend((rule.model_extra or {}).items())
    return pairs


def format_rule(node: RuleNode | None, strip_nested: bool = False, multiline: bool = False) -> str | None:
    """Dump a rule (or a list of alternatives) as text.

    Returns ``None`` when there is nothing to show.
    """
    if node is None:
        return None
    if isinstance(node, list):
        items = [rule_fields(rule, strip_nested) for rule in node]
        items = [pairs for pairs in items if pairs]
        if not items:
            return None
        text = "[ " + ", ".join(_render_pairs(pairs, 0) for pairs in items) + " ]"
    else:
        pairs = rule_fields(node, strip_nested)
        if not pairs:
            return None
        text = _render_pairs(pairs, 0)
    if multiline:
        return text
    return collapse(text)


def collapse(text: str) -> str:
    return _LINE_BREAKS.sub(" ", text).strip()


def describe(node: RuleNode | None) -> str | None:
    """Single-line summary of a rule used for comments and parameter descriptions.

    Containers are summarised without their children, unless their only
    child is a ``nested`` primitive rule. For a list of alternatives only the
    container variants are kept.
    """
    if node is None:
        return None
    if isinstance(node, list):
        kept = [rule for rule in node if is_container(rule)]
        items = [rule_fields(rule, strip_nested=not _has_primitive_nested(rule)) for rule in kept]
        if not items:
            return None
        return collapse("[ " + ", ".join(_render_pairs(pairs, 0) for pairs in items) + " ]")
    strip = is_container(node) and not _has_primitive_nested(node)
    return format_rule(node, strip_nested=strip)


def _has_primitive_nested(rule: RuleBase) -> bool:
    nested = getattr(rule, "nested", None)
    return nested is not None and not isinstance(nested, list) and not is_container(nested)


def js_number(value: int | float) -> str:
    """Write a number the way JavaScript prints it (``1.0`` -> ``1``)."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


def _render(value: Any, level: int) -> str:
    if isinstance(value, RuleBase):
        return _render_pairs(rule_fields(value), level)
    if isinstance(value, dict):
        return _render_pairs(list(value.items()), level)
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        return "[ " + ", ".join(_render(item, level) for item in value) + " ]"
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return js_number(value)
    if callable(value):
        return f"[Function: {getattr(value, '__name__', 'anonymous')}]"
    return str(value)


def _quote(text: str) -> str:
    quote = "'"
    if "'" in text:
        if '"' not in text:
            quote = '"'
        elif "`" not in text and "${" not in text:
            quote = "`"
    escaped = "".join(_ESCAPES.get(char, char) for char in text)
    if quote == "'":
        escaped = escaped.replace("'", "\\'")
    return quote + escaped + quote


def _render_pairs(pairs: list[tuple[str, Any]], level: int) -> str:
    if not pairs:
        return "{}"
    entries = [f"{_render_key(name)}: {_render(value, level + 1)}" for name, value in pairs]
    single = "{ " + ", ".join(entries) + " }"
    if "\n" not in single and len(INDENT * level) + len(single) <= BREAK_LENGTH:
        return single
    inner = INDENT * (level + 1)
    return "{\n" + ",\n".join(inner + entry for entry in entries) + "\n" + INDENT * level + "}"


def _render_key(name: str) -> str:
    return name if name.isidentifier() else _render(name, 0)
