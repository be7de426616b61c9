from postman_builder.generator.collection import (
    COLLECTION_SCHEMA,
    JSON_HEADER,
    build_body,
    build_collection,
    insert_item,
)
from postman_builder.parser.base import Endpoint, bearer_auth


def _ep(method, path, **kwargs):
    return Endpoint(method=method, path=path, **kwargs)


def _folder_names(items):
    return [i["name"] for i in items if "item" in i]


USER_BODY = {"type": "object", "schema": {"name": {"type": "string"}}}


class TestInsertItem:
    def test_creates_missing_folders(self):
        tree = []
        insert_item(tree, ["users", ":id"], {"name": "/users/:id"})
        assert tree == [{"name": "users", "item": [{"name": ":id", "item": [{"name": "/users/:id"}]}]}]

    def test_reuses_existing_folder(self):
        tree = []
        insert_item(tree, ["users", ":id"], {"name": "a"})
        insert_item(tree, ["users", ":id"], {"name": "b"})
        assert len(tree) == 1
        assert len(tree[0]["item"]) == 1
        assert tree[0]["item"][0]["item"] == [{"name": "a"}, {"name": "b"}]

    def test_request_items_are_not_folders(self):
        tree = [{"name": "users", "request": {}}]
        insert_item(tree, ["users"], {"name": "x"})
        assert tree[1] == {"name": "users", "item": [{"name": "x"}]}

    def test_no_folders(self):
        tree = []
        insert_item(tree, [], {"name": "x"})
        assert tree == [{"name": "x"}]


class TestBuildCollection:
    def test_info(self):
        collection = build_collection("Shop", [])
        assert collection == {"info": {"name": "Shop", "schema": COLLECTION_SCHEMA}, "item": []}

    def test_shared_prefix_makes_one_folder_pair(self):
        collection = build_collection("Shop", [
            _ep("GET", "/users/:id/orders", params={"id": {"type": "number"}}),
            _ep("GET", "/users/:id/invoices", params={"id": {"type": "number"}}),
        ])
        assert _folder_names(collection["item"]) == ["users"]
        users = collection["item"][0]
        assert _folder_names(users["item"]) == [":id"]
        leaves = users["item"][0]["item"]
        assert [leaf["name"] for leaf in leaves] == ["/users/:id/orders", "/users/:id/invoices"]

    def test_max_folders_zero_is_flat(self):
        collection = build_collection("Shop", [
            _ep("GET", "/users"),
            _ep("GET", "/users/:id"),
        ], max_folders=0)
        assert [i["name"] for i in collection["item"]] == ["/users", "/users/:id"]
        assert all("request" in i for i in collection["item"])

    def test_request_item_shape(self):
        collection = build_collection("Shop", [
            _ep("GET", "/users/:id", params={"id": {"type": "number"}}, query={"full": {"type": "boolean"}}),
        ], max_folders=0)
        item = collection["item"][0]
        assert item["response"] == []
        request = item["request"]
        assert list(request) == ["method", "header", "url"]
        assert request["method"] == "GET"
        assert request["header"] == []
        assert request["url"]["raw"] == "{{host}}/users/:id"
        assert request["url"]["host"] == ["{{host}}"]
        assert request["url"]["path"] == ["users", ":id"]
        assert request["url"]["variable"][0]["key"] == "id"
        assert request["url"]["query"] == [{"key": "full", "value": "0", "description": "{ type: 'boolean' }"}]

    def test_json_body_gets_content_type(self):
        collection = build_collection("Shop", [
            _ep("POST", "/users", body=USER_BODY, body_type="json"),
        ], max_folders=0)
        request = collection["item"][0]["request"]
        assert request["header"] == [JSON_HEADER]
        assert request["body"]["mode"] == "raw"
        assert request["body"]["raw"] == "{\n\t\"name\": \"\" // { type: 'string' }\n}\n"

    def test_json_body_without_comments(self):
        collection = build_collection("Shop", [
            _ep("POST", "/users", body=USER_BODY, body_type="json"),
        ], max_folders=0, comments_in_json=False)
        assert collection["item"][0]["request"]["body"]["raw"] == '{\n\t"name": ""\n}\n'

    def test_authorization_callback(self):
        auth = bearer_auth("{{accessKey}}")
        collection = build_collection("Shop", [
            _ep("GET", "/users"),
            _ep("GET", "/health"),
        ], max_folders=0, authorization=lambda e: auth if e.path != "/health" else None)
        users, health = collection["item"]
        assert users["request"]["auth"] == {
            "type": "bearer",
            "bearer": [{"key": "token", "value": "{{accessKey}}", "type": "string"}],
        }
        assert "auth" not in health["request"]


class TestBuildBody:
    def test_body_ignored_for_get(self):
        assert build_body(_ep("GET", "/users", body=USER_BODY, body_type="json")) is None

    def test_no_body_rule(self):
        assert build_body(_ep("POST", "/users", body_type="json")) is None

    def test_unknown_encoding(self):
        assert build_body(_ep("POST", "/users", body=USER_BODY)) is None

    def test_delete_with_body(self):
        body = build_body(_ep("DELETE", "/users", body=USER_BODY, body_type="json"), comments_in_json=False)
        assert body == {"mode": "raw", "raw": '{\n\t"name": ""\n}\n'}

    def test_malformed_schema_degrades_to_empty_body(self):
        endpoint = _ep("POST", "/users", body={"type": "object", "schema": [{"type": "string"}]}, body_type="json")
        assert build_body(endpoint) == {"mode": "raw", "raw": "{}\n"}

    def test_multipart(self):
        body = build_body(_ep("PUT", "/avatar", body={
            "type": "object",
            "schema": {"file": {"type": "object"}, "caption": {"type": "string"}},
        }, body_type="multipart"))
        assert body["mode"] == "formdata"
        assert [f["type"] for f in body["formdata"]] == ["file", "text"]

    def test_multipart_needs_object_schema(self):
        assert build_body(_ep("PUT", "/avatar", body={"type": "string"}, body_type="multipart")) is None
        assert build_body(_ep("PUT", "/avatar", body={"type": "object"}, body_type="multipart")) is None

    def test_multipart_without_header(self):
        collection = build_collection("Shop", [
            _ep("PATCH", "/avatar", body={"type": "object", "schema": {}}, body_type="multipart"),
        ], max_folders=0)
        request = collection["item"][0]["request"]
        assert request["header"] == []
        assert request["body"] == {"mode": "formdata", "formdata": []}
