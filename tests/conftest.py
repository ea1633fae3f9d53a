"""Shared test fixtures for the test suite."""

from pathlib import Path

import pytest

from fluxon_assist.core.catalog import CatalogStore
from fluxon_assist.core.config import Settings
from fluxon_assist.core.provider import CompletionProvider
from fluxon_assist.core.user_functions import UserFunctionExtractor
from tests.helpers import catalog_data, fn_entry, write_catalog


@pytest.fixture
def sample_catalog() -> dict:
    return catalog_data(
        system=[
            fn_entry("sum", [1, 2]),
            fn_entry("print", [0, 1]),
            fn_entry("sleep", [1], namespace="time", is_async=True),
            fn_entry("broadcast", [1], namespace="server", primary_sync=True),
        ],
        extensions={
            "java.lang.String": [
                fn_entry("length", [0]),
                fn_entry("split", [1, 3]),
                fn_entry("matches", [1], namespace="regex"),
            ],
            "java.util.List": [
                fn_entry("length", [0]),
                fn_entry("split", [2], is_async=True),
                fn_entry("get", [1]),
            ],
        },
    )


@pytest.fixture
def catalog_file(tmp_path: Path, sample_catalog: dict) -> Path:
    return write_catalog(tmp_path / "catalog.json", sample_catalog)


@pytest.fixture
def fallback_file(tmp_path: Path) -> Path:
    return write_catalog(
        tmp_path / "fallback.json",
        catalog_data(system=[fn_entry("fallbackOnly", [0])], generated_at="fallback"),
    )


@pytest.fixture
def store(catalog_file: Path, fallback_file: Path) -> CatalogStore:
    s = CatalogStore()
    s.initialize(catalog_file, fallback_file)
    return s


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def extractor() -> UserFunctionExtractor:
    return UserFunctionExtractor()


@pytest.fixture
def provider(store: CatalogStore, extractor: UserFunctionExtractor, settings: Settings) -> CompletionProvider:
    return CompletionProvider(store, extractor, settings)
