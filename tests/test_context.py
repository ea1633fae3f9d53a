"""Tests for cursor context classification."""

import pytest

from fluxon_assist.core.context import (
    classify,
    import_match,
    is_annotation,
    is_comment,
    is_extension_call,
    is_inside_string,
    is_single_colon,
    line_prefix,
)
from fluxon_assist.core.types import ALL_HOSTS, ContextKind, ContextVerdict, DocumentKind


def kind_at_end(line: str, document_kind: DocumentKind = DocumentKind.FLUXON) -> ContextKind:
    return classify(line, len(line), document_kind).kind


class TestGuards:
    def test_comment(self) -> None:
        assert is_comment("# note")
        assert is_comment("   // note")
        assert not is_comment("x = 1 # trailing")

    def test_import(self) -> None:
        assert import_match('import "')
        assert import_match("import 'time")
        assert import_match("import server.util")
        assert not import_match("import")
        assert not import_match("imports x")

    def test_import_captures_open_quote(self) -> None:
        match = import_match("import 'ti")
        assert match is not None
        assert match.group(1) == "'"
        match = import_match("import ti")
        assert match is not None
        assert match.group(1) is None

    def test_inside_string(self) -> None:
        assert is_inside_string('print("hello')
        assert is_inside_string("x = 'a")
        assert not is_inside_string('print("hello") + ')

    def test_single_colon(self) -> None:
        assert is_single_colon("foo:")
        assert not is_single_colon("foo::")
        assert not is_single_colon(":")
        assert not is_single_colon("foo: ")

    def test_extension_call(self) -> None:
        assert is_extension_call("foo::")
        assert is_extension_call("foo::ba")
        assert is_extension_call("list ::len")
        assert not is_extension_call("foo::ba(")

    def test_annotation(self) -> None:
        assert is_annotation("@")
        assert is_annotation("  @exc")
        assert not is_annotation("@exc ")


class TestClassify:
    @pytest.mark.parametrize(
        "line,expected",
        [
            ("", ContextKind.TOP_LEVEL),
            ("val x = su", ContextKind.TOP_LEVEL),
            ("# comment su", ContextKind.IGNORED),
            ("  // comment", ContextKind.IGNORED),
            ('import "', ContextKind.IMPORT_NAMESPACE),
            ("import 'ti", ContextKind.IMPORT_NAMESPACE),
            ("import ", ContextKind.IMPORT_NAMESPACE),
            ('print("hel', ContextKind.IGNORED),
            ("foo:", ContextKind.SINGLE_COLON),
            ("foo::", ContextKind.EXTENSION_CALL),
            ("foo::ba", ContextKind.EXTENSION_CALL),
            ("@", ContextKind.ANNOTATION),
            ("@exc", ContextKind.ANNOTATION),
        ],
    )
    def test_verdicts(self, line: str, expected: ContextKind) -> None:
        assert kind_at_end(line) == expected

    def test_import_wins_over_open_quote(self) -> None:
        prefix = 'import "'
        assert is_inside_string(prefix)
        assert classify(prefix, len(prefix), DocumentKind.FLUXON).kind == ContextKind.IMPORT_NAMESPACE

    def test_extension_call_targets_all_hosts(self) -> None:
        verdict = classify("name::", 6, DocumentKind.FLUXON)
        assert verdict == ContextVerdict.extension_call()
        assert verdict.host_selector == ALL_HOSTS

    def test_quoted_colon_is_ignored(self) -> None:
        assert kind_at_end('x = "a:') == ContextKind.IGNORED

    def test_only_prefix_matters(self) -> None:
        line = "foo::bar # trailing"
        assert classify(line, 5, DocumentKind.FLUXON).kind == ContextKind.EXTENSION_CALL
        assert classify(line, 4, DocumentKind.FLUXON).kind == ContextKind.SINGLE_COLON

    def test_cursor_offset_is_clamped(self) -> None:
        assert line_prefix("abc", 10) == "abc"
        assert line_prefix("abc", -3) == ""
        assert classify("foo:", 99, DocumentKind.FLUXON).kind == ContextKind.SINGLE_COLON

    def test_classify_is_pure(self) -> None:
        args = ("text::sp", 8, DocumentKind.FLUXON)
        assert classify(*args) == classify(*args)

    def test_identifier_classes_are_ascii(self) -> None:
        assert kind_at_end("x::é") == ContextKind.TOP_LEVEL
        assert kind_at_end("@é") == ContextKind.TOP_LEVEL
        assert kind_at_end("x::len") == ContextKind.EXTENSION_CALL


class TestEmbeddedYaml:
    def test_plain_yaml_line_ignored(self) -> None:
        assert kind_at_end("name: value", DocumentKind.YAML) == ContextKind.IGNORED

    def test_embedded_code_line(self) -> None:
        line = "script: ; print(su"
        assert kind_at_end(line, DocumentKind.YAML) == ContextKind.TOP_LEVEL

    def test_embedded_marker_may_follow_cursor(self) -> None:
        line = "run: ;"
        assert classify(line, 0, DocumentKind.YAML).kind == ContextKind.TOP_LEVEL

    def test_embedded_extension_call(self) -> None:
        line = "on-join: ; player::"
        assert kind_at_end(line, DocumentKind.YAML) == ContextKind.EXTENSION_CALL

    def test_string_kind_accepted(self) -> None:
        assert classify("key: value", 3, "yaml").kind == ContextKind.IGNORED
