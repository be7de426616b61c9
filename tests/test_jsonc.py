import json
import re

from pydantic import TypeAdapter

from postman_builder.generator.jsonc import render_jsonc
from postman_builder.generator.rules import ExampleValue, compile_rule
from postman_builder.parser.base import RuleNode

_rule = TypeAdapter(RuleNode).validate_python

USER = {
    "type": "object",
    "schema": {
        "name": {"type": "string", "values": ["Ann"]},
        "age": {"type": "number", "integer": True},
        "tags": {"type": "array", "nested": {"type": "string"}, "length": 2},
        "address": {"type": "object", "schema": {"zip": {"type": "string"}}},
        "meta": {"type": "object"},
        "note": {"type": "string", "default": None},
    },
}


def _strip_comments(text: str) -> str:
    return re.sub(r" // .*$", "", text, flags=re.MULTILINE)


class TestRenderJsonc:
    def test_plain(self):
        value = compile_rule(_rule({"type": "object", "schema": {"a": {"type": "string"}, "b": {"type": "number"}}}))
        assert render_jsonc(value, comments=False) == '{\n\t"a": "",\n\t"b": 0\n}\n'

    def test_comments_after_value_and_comma(self):
        value = compile_rule(_rule({"type": "object", "schema": {"a": {"type": "string"}, "b": {"type": "number"}}}))
        assert render_jsonc(value) == "{\n\t\"a\": \"\", // { type: 'string' }\n\t\"b\": 0 // { type: 'number' }\n}\n"

    def test_root_never_has_a_comment(self):
        assert render_jsonc(compile_rule(_rule({"type": "string"}))) == '""\n'

    def test_empty_containers(self):
        assert render_jsonc(compile_rule(_rule({"type": "object"}))) == "{}\n"
        assert render_jsonc(compile_rule(_rule({"type": "array"}))) == "[]\n"

    def test_nested_indentation(self):
        value = compile_rule(_rule({"type": "array", "nested": {"type": "boolean"}, "length": 2}))
        assert render_jsonc(value, comments=False) == "[\n\tfalse,\n\tfalse\n]\n"

    def test_default_containers(self):
        value = compile_rule(_rule({"type": "object", "default": {"x": [1, 2]}}))
        assert render_jsonc(value, comments=False) == '{\n\t"x": [\n\t\t1,\n\t\t2\n\t]\n}\n'

    def test_plain_data(self):
        assert render_jsonc({"ok": True, "n": None}, comments=False) == '{\n\t"ok": true,\n\t"n": null\n}\n'

    def test_roundtrip_without_comments(self):
        value = compile_rule(_rule(USER))
        assert json.loads(render_jsonc(value, comments=False)) == value.to_data()

    def test_roundtrip_with_comments_stripped(self):
        value = compile_rule(_rule(USER))
        text = render_jsonc(value)
        assert "// { type: 'object' }" in text
        assert json.loads(_strip_comments(text)) == value.to_data()

    def test_strings_are_escaped(self):
        value = ExampleValue(value={"q": 'say "hi"'})
        assert json.loads(render_jsonc(value)) == {"q": 'say "hi"'}
