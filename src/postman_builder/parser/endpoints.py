"""Endpoint descriptor parser.

Reads a YAML or JSON file holding a list of endpoints (or a mapping with an
``endpoints`` list) into Endpoint models.
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from postman_builder.exceptions import DescriptorError
from postman_builder.parser.base import Endpoint


def parse_endpoints(file_path: Path) -> list[Endpoint]:
    """Parse an endpoint descriptor file into a list of Endpoint."""
    try:
        doc = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise DescriptorError(f"Cannot read {file_path}: {e}") from e

    if isinstance(doc, dict):
        doc = doc.get("endpoints")
    if not isinstance(doc, list):
        raise DescriptorError(f"{file_path} must contain a list of endpoints")

    endpoints = []
    for index, data in enumerate(doc):
        if not isinstance(data, dict):
            raise DescriptorError(f"{file_path}: endpoint #{index} is not a mapping")
        try:
            endpoints.append(Endpoint(**data))
        except ValidationError as e:
            raise DescriptorError(f"{file_path}: endpoint #{index} is invalid: {e}") from e
    return endpoints
