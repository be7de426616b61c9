"""Annotated JSON rendering of compiled example values.

Output is tab-indented JSON where every value below the root may be followed
by a ``// description`` line comment taken from its ``ExampleValue``.
"""

import json
from typing import Any

from postman_builder.generator.rules import ExampleValue


def render_jsonc(value: ExampleValue | Any, comments: bool = True) -> str:
    """Render a compiled value; the root never carries a comment."""
    root = value.value if isinstance(value, ExampleValue) else value
    return _render(ExampleValue(value=root), last=True, indent=0, comments=comments)


def _render(node: ExampleValue | Any, last: bool, indent: int, comments: bool) -> str:
    if not isinstance(node, ExampleValue):
        node = ExampleValue(value=node)

    suffix = "" if last else ","
    if comments and node.description:
        suffix += f" // {node.description}"
    suffix += "\n"

    value = node.value
    closing = "\t" * indent
    inner = "\t" * (indent + 1)

    if isinstance(value, dict):
        if not value:
            return "{}" + suffix
        entries = list(value.items())
        body = "".join(
            f"{inner}{json.dumps(key, ensure_ascii=False)}: {_render(item, i == len(entries) - 1, indent + 1, comments)}"
            for i, (key, item) in enumerate(entries)
        )
        return "{\n" + body + closing + "}" + suffix

    if isinstance(value, list):
        if not value:
            return "[]" + suffix
        body = "".join(
            f"{inner}{_render(item, i == len(value) - 1, indent + 1, comments)}"
            for i, item in enumerate(value)
        )
        return "[\n" + body + closing + "]" + suffix

    return json.dumps(value, ensure_ascii=False, default=str) + suffix
