"""prompt_toolkit adapter for Fluxon completion."""

import re
from collections.abc import Iterable

from prompt_toolkit.completion import Completer, Completion

from ..core.provider import CompletionProvider
from ..core.types import CandidateKind, CompletionCandidate, DocumentKind, rank

_WORD = re.compile(r"\w*$")
_NAMESPACE_WORD = re.compile(r"[\w:.\-]*$")


def typed_word(prefix: str, candidate: CompletionCandidate) -> str:
    """The partial word a candidate replaces."""
    if candidate.kind == CandidateKind.OPERATOR:
        return ""
    pattern = _NAMESPACE_WORD if candidate.kind == CandidateKind.MODULE else _WORD
    match = pattern.search(prefix)
    return match.group(0) if match else ""


class FluxonCompleter(Completer):
    """Auto-completer for Fluxon source typed at a prompt.

    Candidates come from the completion provider, ranked by sort key and
    filtered by the word under the cursor.
    """

    def __init__(
        self,
        provider: CompletionProvider,
        document_id: str,
        document_kind: DocumentKind = DocumentKind.FLUXON,
    ):
        self.provider = provider
        self.document_id = document_id
        self.document_kind = document_kind

    def get_completions(self, document, complete_event) -> Iterable[Completion]:
        prefix = document.current_line_before_cursor
        candidates = self.provider.provide(
            self.document_id,
            document.current_line,
            document.cursor_position_col,
            self.document_kind,
        )
        for candidate in rank(candidates):
            word = typed_word(prefix, candidate)
            if word and not candidate.label.startswith(word):
                continue
            yield Completion(
                candidate.plain_text(),
                start_position=-len(word),
                display=candidate.label,
                display_meta=candidate.detail,
            )
