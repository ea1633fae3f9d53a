"""Cursor context classification for Fluxon completion.

Classification looks only at the current line. Guards run in a fixed order
and the first one that matches decides the verdict:

1. YAML lines outside an embedded ``: ;`` block are ignored.
2. Line comments (``#`` or ``//``) are ignored.
3. ``import`` statements complete namespaces. This runs before the string
   guard since ``import "`` leaves an unterminated quote on purpose.
4. An odd number of quotes means the cursor is inside a string.
5. A single trailing colon may be the start of ``::``.
6. ``receiver::name`` completes extension functions.
7. ``@name`` completes annotations.
8. Anything else is a top-level identifier.
"""

import re

from .types import ALL_HOSTS, ContextKind, ContextVerdict, DocumentKind

_EMBEDDED_MARKER = re.compile(r":\s*;")
_COMMENT = re.compile(r"^\s*(#|//)")
# Identifier classes are ASCII-only, like editor word patterns for Fluxon
_IMPORT = re.compile(r"\bimport\s+(['\"])?([\w:.\-]*)$", re.ASCII)
_SINGLE_COLON = re.compile(r"\S:$", re.ASCII)
_EXTENSION_CALL = re.compile(r"\S\s*::\w*$", re.ASCII)
_ANNOTATION = re.compile(r"@\w*$", re.ASCII)


def is_outside_embedded_code(line: str, document_kind: DocumentKind | str) -> bool:
    return document_kind == DocumentKind.YAML and not _EMBEDDED_MARKER.search(line)


def is_comment(prefix: str) -> bool:
    return bool(_COMMENT.match(prefix))


def import_match(prefix: str) -> re.Match[str] | None:
    """Match an in-progress import; group 1 is the opening quote, if typed."""
    return _IMPORT.search(prefix)


def is_inside_string(prefix: str) -> bool:
    return prefix.count("'") % 2 != 0 or prefix.count('"') % 2 != 0


def is_single_colon(prefix: str) -> bool:
    return bool(_SINGLE_COLON.search(prefix)) and not prefix.endswith("::")


def is_extension_call(prefix: str) -> bool:
    return bool(_EXTENSION_CALL.search(prefix))


def is_annotation(prefix: str) -> bool:
    return bool(_ANNOTATION.search(prefix))


def line_prefix(line: str, cursor_offset: int) -> str:
    """Text from line start to the cursor, with the offset clamped to the line."""
    return line[: max(0, min(cursor_offset, len(line)))]


def classify(line: str, cursor_offset: int, document_kind: DocumentKind | str = DocumentKind.FLUXON) -> ContextVerdict:
    """Classify the cursor position within a single line."""
    prefix = line_prefix(line, cursor_offset)

    if is_outside_embedded_code(line, document_kind):
        return ContextVerdict.of(ContextKind.IGNORED)
    if is_comment(prefix):
        return ContextVerdict.of(ContextKind.IGNORED)
    if import_match(prefix):
        return ContextVerdict.of(ContextKind.IMPORT_NAMESPACE)
    if is_inside_string(prefix):
        return ContextVerdict.of(ContextKind.IGNORED)
    if is_single_colon(prefix):
        return ContextVerdict.of(ContextKind.SINGLE_COLON)
    if is_extension_call(prefix):
        # Receiver types are not inferred, so every host is offered
        return ContextVerdict.extension_call(ALL_HOSTS)
    if is_annotation(prefix):
        return ContextVerdict.of(ContextKind.ANNOTATION)
    return ContextVerdict.of(ContextKind.TOP_LEVEL)
