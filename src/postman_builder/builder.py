"""Postman builder: compiles endpoints and writes or uploads the documents."""

import copy
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from postman_builder.config import BuilderOptions
from postman_builder.generator.collection import add_endpoint, new_collection
from postman_builder.generator.environment import build_environment
from postman_builder.parser.base import Endpoint
from postman_builder.upload import PostmanClient, UploadReport, upload

logger = logging.getLogger(__name__)


def dump_json(data: dict) -> str:
    return json.dumps(data, indent="\t", ensure_ascii=False)


class PostmanBuilder:
    """Owns one collection tree and one environment for a compilation pass."""

    def __init__(self, options: BuilderOptions, client: PostmanClient | None = None):
        self.options = options
        self.client = client
        self.collection = new_collection(options.name)
        self.environment = build_environment(options.name, options.environments)

    def add_endpoints(self, endpoints: list[Endpoint]) -> None:
        """Compile each endpoint in order and insert it into the collection."""
        debug = self.options.debug
        if debug:
            logger.debug("start generate")

        for endpoint in endpoints:
            item = add_endpoint(
                self.collection["item"],
                endpoint,
                max_folders=self.options.max_folders,
                comments_in_json=self.options.comments_in_json,
                authorization=self.options.authorization,
            )
            if debug:
                logger.debug("added %s %s", endpoint.method, item["name"])

        if debug:
            logger.debug("end generate")

    def generate(self) -> bool:
        """Write both documents; returns False when the collection file is already up to date."""
        files = self.options.files
        files.collection.parent.mkdir(parents=True, exist_ok=True)
        files.environment.parent.mkdir(parents=True, exist_ok=True)

        if not self._collection_changed(files.collection):
            return False

        self._write(files.collection, self.collection)
        self._write(files.environment, self.environment)
        return True

    def generate_and_send(self) -> UploadReport | None:
        """Generate, then upload a timestamped copy of the collection to every API key.

        Returns None when nothing changed and nothing was uploaded.
        """
        if not self.generate():
            return None

        collection = copy.deepcopy(self.collection)
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        collection["info"]["name"] += f" {stamp}"

        return upload(
            collection,
            self.options.api_keys,
            timeout=self.options.upload_timeout,
            deadline=self.options.upload_deadline,
            client=self.client,
        )

    def _collection_changed(self, path: Path) -> bool:
        return not path.exists() or path.read_text(encoding="utf-8") != dump_json(self.collection)

    def _write(self, path: Path, data: dict) -> None:
        path.write_text(dump_json(data), encoding="utf-8")
