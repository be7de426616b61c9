"""Path template parsing: folder prefix, Postman URL and path variables."""

import re
from dataclasses import dataclass, field

from postman_builder.generator.description import format_rule
from postman_builder.parser.base import RuleNode

HOST = "{{host}}"

_PATH_PARAM = re.compile(r"^:([a-z_$][a-z0-9_$]*)(\(.*\))?$", re.IGNORECASE)


@dataclass
class Location:
    folders: list[str]
    url: str
    host: list[str]
    path: list[str]
    variable: list[dict] = field(default_factory=list)

    @property
    def name(self) -> str:
        """The request name: the URL without its host part."""
        return self.url[len(self.host[0]):]


def path_param_name(segment: str) -> str | None:
    """Return the parameter name of a ``:name`` or ``:name(regex)`` segment."""
    match = _PATH_PARAM.match(segment)
    return match.group(1) if match else None


def parse_location(
    path: str,
    params: dict[str, RuleNode],
    param_order: list[str],
    max_folders: int = 2,
) -> Location:
    """Split a path template into folders, a normalised URL and variables.

    Folder names are the raw leading segments. Parameter segments lose their
    inline constraint in the URL. Variables follow *param_order* and are
    described with the multi-line rule dump.
    """
    segments = (path[1:] if path.startswith("/") else path).split("/")
    folders = segments[:max(max_folders, 0)]

    rewritten = []
    for segment in segments:
        name = path_param_name(segment)
        rewritten.append(f":{name}" if name else segment)
    joined = "/".join(rewritten)

    variable = []
    for key in param_order:
        entry = {"key": key, "value": ""}
        description = format_rule(params.get(key), multiline=True)
        if description is not None:
            entry["description"] = description
        variable.append(entry)

    return Location(
        folders=folders,
        url=f"{HOST}/{joined}",
        host=[HOST],
        path=joined.split("/"),
        variable=variable,
    )
