"""Collection assembly: request items grouped into a folder tree.

Builds a Postman Collection v2.1 document from endpoint descriptors.
"""

from postman_builder.generator.jsonc import render_jsonc
from postman_builder.generator.location import Location, parse_location
from postman_builder.generator.query import compile_multipart, compile_query
from postman_builder.generator.rules import compile_rule
from postman_builder.parser.base import Auth, AuthBuilder, Endpoint, ObjectRule, representative

COLLECTION_SCHEMA = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"

BODY_METHODS = ("POST", "PUT", "PATCH", "DELETE")

JSON_HEADER = {"key": "Content-Type", "value": "application/json"}


def new_collection(name: str) -> dict:
    return {"info": {"name": name, "schema": COLLECTION_SCHEMA}, "item": []}


def build_collection(
    name: str,
    endpoints: list[Endpoint],
    max_folders: int = 2,
    comments_in_json: bool = True,
    authorization: AuthBuilder | None = None,
) -> dict:
    """Build a whole collection document from a list of endpoints."""
    collection = new_collection(name)
    for endpoint in endpoints:
        add_endpoint(collection["item"], endpoint, max_folders, comments_in_json, authorization)
    return collection


def add_endpoint(
    tree: list[dict],
    endpoint: Endpoint,
    max_folders: int = 2,
    comments_in_json: bool = True,
    authorization: AuthBuilder | None = None,
) -> dict:
    """Compile one endpoint and insert its request item into *tree*."""
    location = parse_location(endpoint.path, endpoint.params, endpoint.param_order or [], max_folders)
    item = build_item(endpoint, location, comments_in_json, authorization)
    insert_item(tree, location.folders, item)
    return item


def insert_item(tree: list[dict], folders: list[str], item: dict) -> None:
    """Append *item* under the folder path *folders*, creating missing folders.

    Sibling folders are matched by exact name; the first match wins.
    """
    level = tree
    for name in folders:
        folder = next((node for node in level if "item" in node and node["name"] == name), None)
        if folder is None:
            folder = {"name": name, "item": []}
            level.append(folder)
        level = folder["item"]
    level.append(item)


def build_body(endpoint: Endpoint, comments_in_json: bool = True) -> dict | None:
    """Return the Postman body envelope, or None when the request has no body."""
    if endpoint.method not in BODY_METHODS or endpoint.body is None:
        return None

    if endpoint.body_type == "json":
        return {"mode": "raw", "raw": render_jsonc(compile_rule(endpoint.body), comments_in_json)}

    if endpoint.body_type == "multipart":
        rule = representative(endpoint.body)
        if isinstance(rule, ObjectRule) and rule.schema_ is not None:
            return {"mode": "formdata", "formdata": compile_multipart(rule.schema_)}

    return None


def build_item(
    endpoint: Endpoint,
    location: Location,
    comments_in_json: bool = True,
    authorization: AuthBuilder | None = None,
) -> dict:
    body = build_body(endpoint, comments_in_json)

    request: dict = {
        "method": endpoint.method,
        "header": [dict(JSON_HEADER)] if body and body["mode"] == "raw" else [],
    }
    if body is not None:
        request["body"] = body
    request["url"] = {
        "raw": location.url,
        "host": location.host,
        "path": location.path,
        "variable": location.variable,
        "query": compile_query(endpoint.query),
    }

    auth = authorization(endpoint) if authorization else None
    if auth is not None:
        request["auth"] = auth.model_dump() if isinstance(auth, Auth) else auth

    return {"name": location.name, "request": request, "response": []}
