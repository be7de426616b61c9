"""Postman environment document."""


def build_environment(name: str, environments: dict[str, str]) -> dict:
    """One enabled entry per variable, in insertion order."""
    return {
        "name": name,
        "values": [{"key": key, "value": value, "enabled": True} for key, value in environments.items()],
    }
