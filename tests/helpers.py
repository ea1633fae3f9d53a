"""Shared test helpers for the test suite."""

import json
from pathlib import Path
from typing import Any


def fn_entry(
    name: str,
    params: list[int] | None = None,
    namespace: str | None = None,
    is_async: bool = False,
    primary_sync: bool = False,
) -> dict[str, Any]:
    """Build a raw catalog function entry as it appears in the JSON file."""
    return {
        "name": name,
        "namespace": namespace,
        "params": params if params is not None else [0],
        "async": is_async,
        "primarySync": primary_sync,
    }


def catalog_data(
    system: list[dict[str, Any]] | None = None,
    extensions: dict[str, list[dict[str, Any]]] | None = None,
    generated_at: str = "2025-01-01T00:00:00Z",
) -> dict[str, Any]:
    return {
        "generatedAt": generated_at,
        "system": system or [],
        "extensions": extensions or {},
    }


def write_catalog(path: Path, data: Any) -> Path:
    """Write a catalog document (or any JSON value) to path."""
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
