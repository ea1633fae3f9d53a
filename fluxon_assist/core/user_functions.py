"""Extraction of user-defined function signatures from Fluxon source text.

Three declaration styles are recognized:

    def add(x, y) = x + y      # parenthesized
    async fun wait x y = ...   # bare, comma or whitespace separated
    def noop = 1               # nullary

Lines that do not look like a declaration are skipped without error.
"""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger("fluxon_assist.user_functions")

COMMENT_MARKERS = ("//", "#")

_DECLARATION = re.compile(r"^(async\s+|sync\s+)?(def|fun)\s+([A-Za-z_][A-Za-z0-9_]*)\s*(.*)$")
_PARENTHESIZED = re.compile(r"^\(([^)]*)\)")
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class SourceSpan:
    """Location of a declaration: the whole line it sits on."""

    line: int
    start_column: int
    end_column: int


@dataclass(frozen=True)
class UserFunction:
    """A function declared in the current document."""

    name: str
    arity: int
    is_async: bool
    is_sync: bool
    span: SourceSpan


def split_lines(text: str) -> list[str]:
    """Split on editor line breaks only: \\n, \\r\\n and \\r."""
    return _LINE_BREAK.split(text)


def count_params(rest: str) -> int:
    """Count parameters in the text following the function name."""
    paren = _PARENTHESIZED.match(rest)
    if paren:
        inner = paren.group(1).strip()
        return 0 if not inner else len(inner.split(","))

    if rest and not rest.startswith(("=", "{")):
        before_body = re.split(r"[={]", rest, maxsplit=1)[0].strip()
        if before_body:
            tokens = re.split(r"[,\s]+", before_body)
            return sum(1 for token in tokens if _IDENTIFIER.match(token))

    return 0


def parse_declaration(line: str, line_number: int = 0) -> UserFunction | None:
    """Parse a single source line, returning None if it declares nothing."""
    text = line.strip()
    if not text or text.startswith(COMMENT_MARKERS):
        return None

    match = _DECLARATION.match(text)
    if not match:
        return None

    modifier = (match.group(1) or "").strip()
    return UserFunction(
        name=match.group(3),
        arity=count_params(match.group(4).strip()),
        is_async=modifier == "async",
        is_sync=modifier == "sync",
        span=SourceSpan(line=line_number, start_column=0, end_column=len(line)),
    )


class UserFunctionExtractor:
    """Scans documents for user declarations and caches the result per document."""

    def __init__(self) -> None:
        self._cache: dict[str, list[UserFunction]] = {}

    def scan(self, text: str, document_id: str = "") -> list[UserFunction]:
        functions: list[UserFunction] = []
        for line_number, line in enumerate(split_lines(text)):
            fn = parse_declaration(line, line_number)
            if fn is not None:
                functions.append(fn)
        logger.debug("Found %d functions in %s", len(functions), document_id or "<text>")
        return functions

    def update_cache(self, document_id: str, text: str) -> list[UserFunction]:
        """Re-scan a document and replace its cache entry wholesale."""
        functions = self.scan(text, document_id)
        self._cache[document_id] = functions
        return functions

    def get_cached(self, document_id: str) -> list[UserFunction]:
        return list(self._cache.get(document_id, ()))

    def clear_cache(self, document_id: str) -> None:
        self._cache.pop(document_id, None)

    def clear_all(self) -> None:
        self._cache.clear()

    def cached_documents(self) -> list[str]:
        return list(self._cache.keys())
