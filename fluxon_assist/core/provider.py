"""Completion candidate synthesis for Fluxon documents."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .catalog import CatalogError, CatalogFunction, CatalogStore
from .config import Settings
from .context import classify, import_match, line_prefix
from .types import (
    ALL_HOSTS,
    DEMOTED_TIER,
    PRIMARY_TIER,
    STATIC_TIER,
    USER_TIER,
    CandidateKind,
    CompletionCandidate,
    ContextKind,
    ContextVerdict,
    DocumentKind,
    sort_key,
)
from .user_functions import UserFunction, UserFunctionExtractor

logger = logging.getLogger("fluxon_assist.provider")

CONTROL_KEYWORDS = (
    "if", "then", "else", "when", "is", "for", "in", "while",
    "break", "continue", "return", "try", "catch", "finally",
)
DECLARATION_KEYWORDS = ("import", "def", "fun", "val", "var", "async", "sync", "await")
CONSTANTS = ("true", "false", "null")


@dataclass(frozen=True)
class Annotation:
    name: str
    params: tuple[str, ...]
    description: str


ANNOTATIONS = (
    Annotation(
        name="except",
        params=(),
        description="Makes an async function print any exception it raises.",
    ),
)


def build_call_snippet(name: str, min_arity: int) -> str:
    """Call snippet with one placeholder per required argument.

    Zero arity leaves the cursor inside the parentheses.
    """
    if min_arity == 0:
        return f"{name}($0)"
    placeholders = ", ".join(f"${{{i}:arg{i}}}" for i in range(1, min_arity + 1))
    return f"{name}({placeholders})"


def describe_arity(params: tuple[int, ...]) -> str:
    """Human-readable arity; every value is an independently supported count."""
    if len(params) == 1:
        return f"{params[0]} parameter(s)"
    counts = ", ".join(str(p) for p in params[:-1])
    return f"{counts} or {params[-1]} parameters"


class CompletionProvider:
    """Turns a cursor position into a list of completion candidates.

    The context classifier decides which branch runs; the provider never
    re-reads the raw line except to see whether an import quote was typed.
    """

    def __init__(self, store: CatalogStore, extractor: UserFunctionExtractor, settings: Settings) -> None:
        self.store = store
        self.extractor = extractor
        self.settings = settings

    def provide(
        self,
        document_id: str,
        line: str,
        cursor_offset: int,
        document_kind: DocumentKind | str = DocumentKind.FLUXON,
        cancelled: bool = False,
    ) -> list[CompletionCandidate]:
        """Return candidates for the cursor position, or [] when none apply.

        Never raises for catalog problems: completion is best effort.
        """
        if cancelled or not self.store.is_loaded():
            return []

        verdict = classify(line, cursor_offset, document_kind)
        logger.debug("Context for %s at %d: %s", document_id, cursor_offset, verdict.kind.value)
        try:
            return self._candidates_for(verdict, document_id, line_prefix(line, cursor_offset))
        except CatalogError as e:
            logger.warning("Completion skipped: %s", e)
            return []

    def _candidates_for(self, verdict: ContextVerdict, document_id: str, prefix: str) -> list[CompletionCandidate]:
        kind = verdict.kind
        if kind == ContextKind.TOP_LEVEL:
            return self._top_level(document_id)
        if kind == ContextKind.EXTENSION_CALL:
            return self._extension_call(verdict.host_selector or ALL_HOSTS)
        if kind == ContextKind.SINGLE_COLON:
            return [self._colon_candidate()]
        if kind == ContextKind.ANNOTATION:
            return self._annotations()
        if kind == ContextKind.IMPORT_NAMESPACE:
            return self._namespaces(prefix)
        return []

    # --- Branches ---

    def _top_level(self, document_id: str) -> list[CompletionCandidate]:
        items = self._keywords()
        items.extend(self._catalog_candidate(fn) for fn in self.store.system_functions())
        if self.settings.include_user_functions:
            items.extend(self._user_candidate(fn) for fn in self.extractor.get_cached(document_id))
        return items

    def _extension_call(self, host_selector: str) -> list[CompletionCandidate]:
        items: list[CompletionCandidate] = []
        if self.settings.enable_extensions:
            if host_selector == ALL_HOSTS:
                extensions: Iterable[CatalogFunction] = self.store.merged_extension_functions()
            else:
                extensions = self.store.extensions_for_host(host_selector)
            items.extend(self._catalog_candidate(fn) for fn in extensions)
        # System functions stay reachable after ::, ranked below extensions
        items.extend(self._catalog_candidate(fn, tier=DEMOTED_TIER) for fn in self.store.system_functions())
        return items

    def _namespaces(self, prefix: str) -> list[CompletionCandidate]:
        namespaces = {fn.namespace for fn in self.store.system_functions() if fn.namespace}
        for functions in self.store.extension_functions().values():
            namespaces.update(fn.namespace for fn in functions if fn.namespace)

        match = import_match(prefix)
        open_quote = match.group(1) if match else None

        items = []
        for namespace in sorted(namespaces):
            insert = f"{namespace}{open_quote}" if open_quote else f'"{namespace}"'
            items.append(
                CompletionCandidate(
                    label=namespace,
                    kind=CandidateKind.MODULE,
                    insert_text=insert,
                    detail="namespace",
                    sort_text=sort_key(PRIMARY_TIER, namespace),
                    documentation=f"**Namespace:** `{namespace}`",
                )
            )
        return items

    # --- Candidate builders ---

    def _keywords(self) -> list[CompletionCandidate]:
        items = []
        for keyword in CONTROL_KEYWORDS + DECLARATION_KEYWORDS:
            items.append(
                CompletionCandidate(
                    label=keyword,
                    kind=CandidateKind.KEYWORD,
                    insert_text=keyword,
                    detail="keyword",
                    sort_text=sort_key(STATIC_TIER, keyword),
                )
            )
        for constant in CONSTANTS:
            items.append(
                CompletionCandidate(
                    label=constant,
                    kind=CandidateKind.CONSTANT,
                    insert_text=constant,
                    detail="constant",
                    sort_text=sort_key(STATIC_TIER, constant),
                )
            )
        return items

    def _annotations(self) -> list[CompletionCandidate]:
        items = []
        for annotation in ANNOTATIONS:
            name, params = annotation.name, annotation.params
            if params:
                placeholders = ", ".join(f"${{{i}:{p}}}" for i, p in enumerate(params, start=1))
                insert = f"{name}({placeholders})"
            else:
                insert = f"{name}$0"
            doc = f"**@{name}**\n\n{annotation.description}"
            if params:
                doc += f"\n\n**Parameters:** {', '.join(params)}"
            items.append(
                CompletionCandidate(
                    label=name,
                    kind=CandidateKind.ANNOTATION,
                    insert_text=insert,
                    detail="annotation",
                    sort_text=sort_key(STATIC_TIER, name),
                    documentation=doc,
                )
            )
        return items

    def _colon_candidate(self) -> CompletionCandidate:
        return CompletionCandidate(
            label=":",
            kind=CandidateKind.OPERATOR,
            insert_text=":",
            detail="extension call (::)",
            sort_text=sort_key(STATIC_TIER, ":"),
            documentation="Type a second colon to call an extension function.",
            retrigger=True,
        )

    def _catalog_candidate(self, fn: CatalogFunction, tier: int = PRIMARY_TIER) -> CompletionCandidate:
        parts: list[str] = []
        if fn.namespace and self.settings.show_namespaces:
            parts.append(f"namespace: {fn.namespace}")
        parts.append(f"params: [{', '.join(str(p) for p in fn.params)}]")
        if fn.is_async:
            parts.append("async")
        if fn.primary_sync:
            parts.append("primarySync")

        docs: list[str] = []
        if fn.namespace:
            docs.append(f"**Namespace:** `{fn.namespace}`")
        docs.append(f"**Parameters:** {describe_arity(fn.params)}")
        if fn.is_async:
            docs.append("**Async:** Yes")
        if fn.primary_sync:
            docs.append("**Primary sync:** Yes")

        return CompletionCandidate(
            label=fn.name,
            kind=CandidateKind.FUNCTION,
            insert_text=build_call_snippet(fn.name, fn.min_arity),
            detail=" | ".join(parts),
            sort_text=sort_key(tier, fn.name),
            documentation="\n\n".join(docs),
        )

    def _user_candidate(self, fn: UserFunction) -> CompletionCandidate:
        parts = ["user-defined"]
        if fn.is_async:
            parts.append("async")
        if fn.is_sync:
            parts.append("sync")
        parts.append(f"params: [{fn.arity}]")

        return CompletionCandidate(
            label=fn.name,
            kind=CandidateKind.FUNCTION,
            insert_text=build_call_snippet(fn.name, fn.arity),
            detail=" | ".join(parts),
            sort_text=sort_key(USER_TIER, fn.name),
            documentation=(
                f"**User-defined function**\n\n**Parameters:** {fn.arity}\n\n"
                f"Declared on line {fn.span.line + 1}"
            ),
        )
