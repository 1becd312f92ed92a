"""Access to the JSON schemas shipped with covfold."""

from __future__ import annotations

import json
from functools import cache
from importlib import resources

_SCHEMA_FILES: dict[str, str] = {
    "file_coverage": "file_coverage.schema.json",
}


@cache
def get_schema(name: str = "file_coverage") -> dict[str, object]:
    """Load and cache a packaged JSON schema."""
    try:
        filename = _SCHEMA_FILES[name]
    except KeyError as exc:
        choices = ", ".join(sorted(_SCHEMA_FILES))
        msg = f"Unsupported schema: {name!r}. Available schemas: {choices}"
        raise ValueError(msg) from exc
    return json.loads(resources.files("covfold.data").joinpath(filename).read_text(encoding="utf-8"))


__all__ = ["get_schema"]
