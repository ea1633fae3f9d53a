"""HTTP endpoints for completion, document events and catalog refresh."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from starlette.requests import HTTPConnection

from ..core.catalog import CatalogError, CatalogStore
from ..core.config import Settings
from ..core.documents import DocumentTracker
from ..core.provider import CompletionProvider
from ..core.types import DocumentKind

logger = logging.getLogger("fluxon_assist.api")

router = APIRouter()


class CompletionRequest(BaseModel):
    """A completion request for one cursor position."""

    document_id: str
    line: str
    character: int
    language: DocumentKind = DocumentKind.FLUXON


class DocumentEvent(BaseModel):
    """Open or change notification carrying the full document text."""

    document_id: str
    text: str
    language: DocumentKind = DocumentKind.FLUXON


class DocumentClose(BaseModel):
    document_id: str


class RefreshRequest(BaseModel):
    path: str | None = None


# --- Dependency injection helpers ---


def get_settings(conn: HTTPConnection) -> Settings:
    return conn.app.state.settings  # type: ignore[no-any-return]


def get_catalog_store(conn: HTTPConnection) -> CatalogStore:
    """Get the catalog store from app state."""
    return conn.app.state.catalog_store  # type: ignore[no-any-return]


def get_document_tracker(conn: HTTPConnection) -> DocumentTracker:
    return conn.app.state.document_tracker  # type: ignore[no-any-return]


def get_completion_provider(conn: HTTPConnection) -> CompletionProvider:
    return conn.app.state.completion_provider  # type: ignore[no-any-return]


@router.post("/completion")
async def complete(
    request: CompletionRequest,
    provider: CompletionProvider = Depends(get_completion_provider),
):
    """Return completion candidates for a cursor position."""
    try:
        items = provider.provide(request.document_id, request.line, request.character, request.language)
    except Exception:
        logger.exception("Completion failed for %s", request.document_id)
        items = []
    return {"items": [item.to_dict() for item in items]}


@router.post("/documents/open")
async def open_document(event: DocumentEvent, tracker: DocumentTracker = Depends(get_document_tracker)):
    tracked = tracker.open(event.document_id, event.text, event.language)
    return {"tracked": tracked}


@router.post("/documents/change")
async def change_document(event: DocumentEvent, tracker: DocumentTracker = Depends(get_document_tracker)):
    """Schedule a debounced re-scan of the document."""
    tracked = tracker.change(event.document_id, event.text, event.language)
    return {"tracked": tracked}


@router.post("/documents/close")
async def close_document(event: DocumentClose, tracker: DocumentTracker = Depends(get_document_tracker)):
    tracker.close(event.document_id)
    return {"message": f"Document {event.document_id} closed"}


@router.post("/catalog/refresh")
async def refresh_catalog(
    request: RefreshRequest | None = None,
    store: CatalogStore = Depends(get_catalog_store),
    settings: Settings = Depends(get_settings),
):
    """Reload the catalog from the requested or configured path.

    Failures are reported to the caller and leave the loaded catalog in place.
    """
    path = request.path if request and request.path is not None else settings.resolved_catalog_path()
    try:
        store.reload(settings.resolve_path(path))
    except CatalogError as e:
        logger.error("Catalog refresh failed: %s", e)
        return {"success": False, "message": f"Failed to refresh catalog: {e}"}
    return {"success": True, "message": "Catalog refreshed successfully"}


@router.get("/catalog")
async def catalog_status(store: CatalogStore = Depends(get_catalog_store)):
    """Report what is currently loaded."""
    if not store.is_loaded():
        return {"loaded": False}
    return {
        "loaded": True,
        "path": str(store.active_path),
        "generated_at": store.generated_at,
        "system_functions": len(store.system_functions()),
        "host_types": len(store.extension_functions()),
        "extension_functions": len(store.merged_extension_functions()),
    }
