"""Document lifecycle tracking with debounced user-function re-scans."""

import asyncio
import logging

from .types import DocumentKind
from .user_functions import UserFunctionExtractor

logger = logging.getLogger("fluxon_assist.documents")

DEFAULT_DEBOUNCE_SECONDS = 0.5


class DocumentTracker:
    """Feeds open/change/close notifications into the user-function cache.

    Opening a document scans it at once. Changes are debounced: each change
    replaces the pending re-scan for that document, so only the text present
    after a quiet period is scanned. Completion never waits for a pending
    scan and reads whatever the cache holds.
    """

    def __init__(self, extractor: UserFunctionExtractor, debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS) -> None:
        self.extractor = extractor
        self.debounce_seconds = debounce_seconds
        self._pending: dict[str, asyncio.Task[None]] = {}

    @staticmethod
    def _is_tracked(language: DocumentKind | str) -> bool:
        return language == DocumentKind.FLUXON

    def open(self, document_id: str, text: str, language: DocumentKind | str = DocumentKind.FLUXON) -> bool:
        """Scan a newly opened document. Returns False for untracked languages."""
        if not self._is_tracked(language):
            return False
        self._cancel_pending(document_id)
        self.extractor.update_cache(document_id, text)
        return True

    def change(self, document_id: str, text: str, language: DocumentKind | str = DocumentKind.FLUXON) -> bool:
        """Schedule a debounced re-scan. Returns False for untracked languages.

        Without a running event loop, or with a zero debounce, the scan runs
        immediately.
        """
        if not self._is_tracked(language):
            return False
        self._cancel_pending(document_id)

        if self.debounce_seconds <= 0:
            self.extractor.update_cache(document_id, text)
            return True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.extractor.update_cache(document_id, text)
            return True

        self._pending[document_id] = loop.create_task(self._rescan_later(document_id, text))
        return True

    def close(self, document_id: str) -> None:
        self._cancel_pending(document_id)
        self.extractor.clear_cache(document_id)

    def pending(self) -> list[str]:
        """Documents with a re-scan still waiting for its quiet period."""
        return list(self._pending.keys())

    async def flush(self) -> None:
        """Wait for every pending re-scan to finish."""
        tasks = list(self._pending.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def shutdown(self) -> None:
        for document_id in list(self._pending):
            self._cancel_pending(document_id)
        self.extractor.clear_all()

    def _cancel_pending(self, document_id: str) -> None:
        task = self._pending.pop(document_id, None)
        if task is not None and not task.done():
            task.cancel()

    async def _rescan_later(self, document_id: str, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if self._pending.get(document_id) is asyncio.current_task():
            del self._pending[document_id]
        try:
            self.extractor.update_cache(document_id, text)
        except Exception:
            logger.exception("Re-scan of %s failed", document_id)
