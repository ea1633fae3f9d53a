# Completion core for Fluxon documents

from .catalog import (
    CatalogError,
    CatalogFileNotFoundError,
    CatalogFunction,
    CatalogStore,
    InvalidCatalogSchemaError,
    NotInitializedError,
    NotLoadedError,
)
from .context import classify
from .documents import DocumentTracker
from .provider import CompletionProvider
from .types import (
    ALL_HOSTS,
    CandidateKind,
    CompletionCandidate,
    ContextKind,
    ContextVerdict,
    DocumentKind,
    rank,
)
from .user_functions import SourceSpan, UserFunction, UserFunctionExtractor

__all__ = [
    "ALL_HOSTS",
    "CandidateKind",
    "CatalogError",
    "CatalogFileNotFoundError",
    "CatalogFunction",
    "CatalogStore",
    "CompletionCandidate",
    "CompletionProvider",
    "ContextKind",
    "ContextVerdict",
    "DocumentKind",
    "DocumentTracker",
    "InvalidCatalogSchemaError",
    "NotInitializedError",
    "NotLoadedError",
    "SourceSpan",
    "UserFunction",
    "UserFunctionExtractor",
    "classify",
    "rank",
]
