"""Query parameter and multipart form compilation.

Both produce flat, string-valued entries in the declared field order.
"""

from postman_builder.generator.description import describe
from postman_builder.generator.rules import compile_scalar
from postman_builder.parser.base import ObjectRule, RuleNode, representative


def compile_query(query: dict[str, RuleNode] | None) -> list[dict]:
    """Compile query rules into Postman ``{key, value, description}`` entries."""
    if not query:
        return []
    return [
        _entry(key=key, value=compile_scalar(representative(node)), description=describe(node))
        for key, node in query.items()
    ]


def compile_multipart(schema: dict[str, RuleNode]) -> list[dict]:
    """Compile the fields of a multipart body into Postman formdata entries.

    Object fields become file placeholders, everything else a text field.
    """
    fields = []
    for key, node in schema.items():
        rule = representative(node)
        if isinstance(rule, ObjectRule):
            fields.append(_entry(type="file", key=key, src=None, description=describe(node), keep=("src",)))
        else:
            fields.append(_entry(type="text", key=key, value=compile_scalar(rule), description=describe(node)))
    return fields


def _entry(keep: tuple[str, ...] = (), **fields) -> dict:
    return {name: value for name, value in fields.items() if value is not None or name in keep}
