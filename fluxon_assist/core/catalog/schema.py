"""Function catalog schema and structural validation."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CatalogFunction(BaseModel):
    """A built-in or host-extension function known to the catalog.

    Each value in ``params`` is one independently supported argument count:
    ``(1, 3)`` means "1 or 3 arguments", never "1 to 3".
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    namespace: str | None = None
    params: tuple[int, ...] = (0,)
    is_async: bool = Field(default=False, alias="async")
    primary_sync: bool = Field(default=False, alias="primarySync")

    @field_validator("params")
    @classmethod
    def normalize_params(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if any(p < 0 for p in value):
            raise ValueError("params must be non-negative")
        if not value:
            return (0,)
        return tuple(sorted(set(value)))

    @property
    def key(self) -> tuple[str | None, str]:
        """Identity of the function: same namespace and name means same function."""
        return (self.namespace, self.name)

    @property
    def min_arity(self) -> int:
        return self.params[0]


class Catalog(BaseModel):
    """The full function catalog, replaced wholesale on every reload."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    generated_at: str = Field(alias="generatedAt")
    system: tuple[CatalogFunction, ...] = ()
    extensions: dict[str, tuple[CatalogFunction, ...]] = Field(default_factory=dict)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_catalog(obj: Any) -> bool:
    """Check the top-level shape of a parsed catalog document."""
    if not isinstance(obj, dict):
        return False
    return (
        isinstance(obj.get("generatedAt"), str)
        and isinstance(obj.get("system"), list)
        and isinstance(obj.get("extensions"), dict)
    )


def is_catalog_function(obj: Any) -> bool:
    """Check the shape of a single function entry."""
    if not isinstance(obj, dict):
        return False
    namespace = obj.get("namespace", ...)
    params = obj.get("params")
    return (
        isinstance(obj.get("name"), str)
        and (namespace is None or isinstance(namespace, str))
        and isinstance(params, list)
        and all(_is_int(p) for p in params)
        and isinstance(obj.get("async"), bool)
        and isinstance(obj.get("primarySync"), bool)
    )


def parse_catalog(data: Any) -> Catalog:
    """Validate a parsed JSON document and build a Catalog.

    The whole document is rejected if the top level or any single entry is
    structurally invalid.

    Raises:
        ValueError: If the document does not match the catalog schema.
    """
    if not is_catalog(data):
        raise ValueError("expected generatedAt (string), system (list) and extensions (object)")

    for index, entry in enumerate(data["system"]):
        if not is_catalog_function(entry):
            raise ValueError(f"invalid function entry system[{index}]")

    for host_type, entries in data["extensions"].items():
        if not isinstance(entries, list):
            raise ValueError(f"extensions[{host_type!r}] must be a list")
        for index, entry in enumerate(entries):
            if not is_catalog_function(entry):
                raise ValueError(f"invalid function entry extensions[{host_type!r}][{index}]")

    return Catalog.model_validate(data)
