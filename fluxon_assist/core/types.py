"""Data types shared by the context classifier and the completion provider."""

import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

# Host selector meaning "every host type in the catalog"
ALL_HOSTS = "*"

# Sort tiers, lowest sorts first
STATIC_TIER = 0
PRIMARY_TIER = 1
DEMOTED_TIER = 2
USER_TIER = 3

_SNIPPET_PLACEHOLDER = re.compile(r"\$\{\d+:([^}]*)\}")
_SNIPPET_TABSTOP = re.compile(r"\$\d+")


class DocumentKind(str, Enum):
    """Languages a completion request can come from."""

    FLUXON = "fluxon"
    YAML = "yaml"


class ContextKind(str, Enum):
    """What kind of syntactic position the cursor occupies."""

    TOP_LEVEL = "top_level"
    EXTENSION_CALL = "extension_call"
    SINGLE_COLON = "single_colon"
    IMPORT_NAMESPACE = "import_namespace"
    ANNOTATION = "annotation"
    IGNORED = "ignored"


class CandidateKind(str, Enum):
    """Kind of a completion candidate, used by hosts for icons."""

    KEYWORD = "keyword"
    CONSTANT = "constant"
    FUNCTION = "function"
    ANNOTATION = "annotation"
    MODULE = "module"
    OPERATOR = "operator"


@dataclass(frozen=True)
class ContextVerdict:
    """Result of classifying a cursor position."""

    kind: ContextKind
    host_selector: str | None = None

    @classmethod
    def of(cls, kind: ContextKind) -> "ContextVerdict":
        return cls(kind=kind)

    @classmethod
    def extension_call(cls, host_selector: str = ALL_HOSTS) -> "ContextVerdict":
        return cls(kind=ContextKind.EXTENSION_CALL, host_selector=host_selector)


@dataclass
class CompletionCandidate:
    """A single insertable completion entry.

    ``insert_text`` uses snippet syntax: ``${1:arg1}`` for placeholders and
    ``$0`` for the final cursor position.
    """

    label: str
    kind: CandidateKind
    insert_text: str
    detail: str
    sort_text: str
    documentation: str = ""
    retrigger: bool = False

    def plain_text(self) -> str:
        """Insert text with snippet markers removed, for hosts without snippet support."""
        text = _SNIPPET_PLACEHOLDER.sub(r"\1", self.insert_text)
        return _SNIPPET_TABSTOP.sub("", text)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


def sort_key(tier: int, name: str) -> str:
    return f"{tier}_{name}"


def rank(candidates: list[CompletionCandidate]) -> list[CompletionCandidate]:
    """Order candidates by sort key (tier first, then name)."""
    return sorted(candidates, key=lambda c: c.sort_text)
