"""Builder options and their YAML config file.

Example ``postman.yaml``::

    name: Shop API
    files:
      collection: build/shop.postman_collection.json
      environment: build/shop.postman_environment.json
    environments:
      host: http://localhost:8080
      accessKey: ""
    max_folders: 2
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from postman_builder.exceptions import ConfigError
from postman_builder.parser.base import AuthBuilder

REQUIRED_ENVIRONMENTS = ("host", "accessKey")


class OutputFiles(BaseModel):
    collection: Path
    environment: Path


class BuilderOptions(BaseModel):
    """Everything a build needs besides the endpoints themselves."""

    name: str
    files: OutputFiles
    environments: dict[str, str]
    api_keys: list[str] = []
    debug: bool = False
    max_folders: int = Field(default=2, ge=0)
    comments_in_json: bool = True
    authorization: AuthBuilder | None = None
    upload_timeout: float = Field(default=30.0, gt=0)
    upload_deadline: float = Field(default=120.0, gt=0)

    @field_validator("environments")
    @classmethod
    def _require_host_and_key(cls, value: dict[str, str]) -> dict[str, str]:
        missing = [key for key in REQUIRED_ENVIRONMENTS if key not in value]
        if missing:
            raise ValueError(f"missing environment variable(s): {', '.join(missing)}")
        return value


def load_options(file_path: Path, **overrides: Any) -> BuilderOptions:
    """Load options from a YAML file; non-None *overrides* win over file values."""
    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {file_path} must be a mapping")

    for key, value in overrides.items():
        if value is None:
            continue
        if key in ("collection", "environment"):
            data.setdefault("files", {})[key] = value
        else:
            data[key] = value

    try:
        return BuilderOptions(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {file_path}: {e}") from e
