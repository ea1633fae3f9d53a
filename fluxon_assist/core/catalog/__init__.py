# Function catalog for Fluxon completion

from .schema import Catalog, CatalogFunction, is_catalog, is_catalog_function, parse_catalog
from .store import (
    CatalogError,
    CatalogFileNotFoundError,
    CatalogStore,
    InvalidCatalogSchemaError,
    NotInitializedError,
    NotLoadedError,
    merge_params,
)

__all__ = [
    "Catalog",
    "CatalogError",
    "CatalogFileNotFoundError",
    "CatalogFunction",
    "CatalogStore",
    "InvalidCatalogSchemaError",
    "NotInitializedError",
    "NotLoadedError",
    "is_catalog",
    "is_catalog_function",
    "merge_params",
    "parse_catalog",
]
