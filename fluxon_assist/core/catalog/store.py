"""Loading, caching and merging of the function catalog."""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from .schema import Catalog, CatalogFunction, parse_catalog

logger = logging.getLogger("fluxon_assist.catalog")


class CatalogError(Exception):
    """Base class for catalog store failures."""


class NotInitializedError(CatalogError):
    """Raised when the store is used before initialize()."""


class NotLoadedError(CatalogError):
    """Raised when no catalog has been loaded successfully."""


class CatalogFileNotFoundError(CatalogError):
    """Raised when neither the preferred nor the fallback path exists."""


class InvalidCatalogSchemaError(CatalogError):
    """Raised when the catalog file cannot be parsed or fails validation."""


def merge_params(first: tuple[int, ...], second: tuple[int, ...]) -> tuple[int, ...]:
    """Union of two arity sets: merging (1, 3) and (2,) gives (1, 2, 3)."""
    return tuple(sorted(set(first) | set(second)))


class CatalogStore:
    """Holds the active catalog and the merged view of its extension functions.

    A reload only ever swaps the catalog reference after the new document has
    been fully validated, so a failed reload leaves the previous catalog in
    place.
    """

    def __init__(self) -> None:
        self._catalog: Catalog | None = None
        self._preferred_path: Path | None = None
        self._fallback_path: Path | None = None
        self._active_path: Path | None = None
        # Merged view paired with the catalog it was built from
        self._merged_extensions: tuple[Catalog, list[CatalogFunction]] | None = None
        self._initialized = False

    def initialize(self, preferred_path: str | Path, fallback_path: str | Path) -> None:
        """Record both paths and perform the first load.

        An empty preferred path degrades to the fallback path.
        """
        self._fallback_path = Path(fallback_path) if fallback_path else None
        self._preferred_path = Path(preferred_path) if preferred_path else self._fallback_path
        self._initialized = True
        self.reload()

    def reload(self, new_path: str | Path | None = None) -> None:
        """Reload the catalog, optionally switching the preferred path.

        Raises:
            NotInitializedError: If initialize() has not been called.
            CatalogFileNotFoundError: If no candidate path exists.
            InvalidCatalogSchemaError: If the file is not a valid catalog.
        """
        if not self._initialized:
            raise NotInitializedError("Catalog store not initialized. Call initialize() first.")
        if new_path is not None:
            self._preferred_path = Path(new_path) if new_path else self._fallback_path

        target = self._resolve_path()
        catalog = self._read(target)

        self._merged_extensions = None
        self._catalog = catalog
        self._active_path = target
        logger.info(
            "Loaded catalog from %s: %d system functions, %d host types",
            target,
            len(catalog.system),
            len(catalog.extensions),
        )

    def _resolve_path(self) -> Path:
        target = self._preferred_path
        if (target is None or not target.exists()) and self._fallback_path is not None:
            if self._fallback_path.exists():
                if target is not None and target != self._fallback_path:
                    logger.warning("Catalog file %s not found, using fallback %s", target, self._fallback_path)
                target = self._fallback_path
        if target is None or not target.exists():
            logger.error("Catalog file not found: %s", target)
            raise CatalogFileNotFoundError(f"Catalog file not found: {target}")
        return target

    def _read(self, path: Path) -> Catalog:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            return parse_catalog(data)
        except (OSError, ValueError) as e:
            logger.error("Rejected catalog %s: %s", path, e)
            raise InvalidCatalogSchemaError(f"Invalid catalog schema in {path}: {e}") from e

    def _require_catalog(self) -> Catalog:
        if not self._initialized:
            raise NotInitializedError("Catalog store not initialized. Call initialize() first.")
        if self._catalog is None:
            raise NotLoadedError("Catalog not loaded.")
        return self._catalog

    def is_loaded(self) -> bool:
        return self._catalog is not None

    @property
    def active_path(self) -> Path | None:
        """Path of the most recently loaded catalog file."""
        return self._active_path

    @property
    def generated_at(self) -> str | None:
        return self._catalog.generated_at if self._catalog is not None else None

    def system_functions(self) -> tuple[CatalogFunction, ...]:
        return self._require_catalog().system

    def extension_functions(self) -> Mapping[str, tuple[CatalogFunction, ...]]:
        """Read-only view of the host type table."""
        return MappingProxyType(self._require_catalog().extensions)

    def extensions_for_host(self, host_type: str) -> tuple[CatalogFunction, ...]:
        """Extension functions of one host type; empty for an unknown host."""
        return self.extension_functions().get(host_type, ())

    def merged_extension_functions(self) -> list[CatalogFunction]:
        """One entry per (namespace, name) across all host types.

        Arity sets are unioned and the async/primarySync flags are OR-ed, so no
        contributing declaration loses information. The result is cached until
        the next successful reload.
        """
        catalog = self._require_catalog()
        cached = self._merged_extensions
        if cached is not None and cached[0] is catalog:
            return cached[1]

        merged: dict[tuple[str | None, str], CatalogFunction] = {}
        for functions in catalog.extensions.values():
            for fn in functions:
                existing = merged.get(fn.key)
                if existing is None:
                    merged[fn.key] = fn
                    continue
                merged[fn.key] = existing.model_copy(
                    update={
                        "params": merge_params(existing.params, fn.params),
                        "is_async": existing.is_async or fn.is_async,
                        "primary_sync": existing.primary_sync or fn.primary_sync,
                    }
                )

        functions = list(merged.values())
        self._merged_extensions = (catalog, functions)
        logger.debug("Merged %d extension functions", len(functions))
        return functions
