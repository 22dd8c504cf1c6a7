"""Tests for footnote definition capture, call tracking and the footnote section."""

import re

from huellas import compile_html
from huellas.compiler import HtmlCompiler
from huellas.footnotes import (
    CallTracker,
    DefinitionEntry,
    DefinitionStore,
    DocumentFootnoteState,
    FootnoteHtmlExtension,
)
from huellas.footnotes.markup import back_reference, back_references, call_reference
from huellas.footnotes.section import splice_back_references
from huellas.tokens import EventStreamBuilder, TokenType

BACK_1 = (
    '<a href="#user-content-fnref-1" data-footnote-backref '
    'class="data-footnote-backref" aria-label="Back to content">↩</a>'
)
BACK_1_2 = (
    '<a href="#user-content-fnref-1-2" data-footnote-backref '
    'class="data-footnote-backref" aria-label="Back to content">↩<sup>2</sup></a>'
)


def call_html(fn_id: str, order: int, occurrence: int = 1) -> str:
    suffix = f"-{occurrence}" if occurrence > 1 else ""
    return (
        f'<sup><a href="#user-content-fn-{fn_id}" id="user-content-fnref-{fn_id}{suffix}" '
        f'data-footnote-ref aria-describedby="footnote-label">{order}</a></sup>'
    )


def list_item_ids(html: str) -> list[str]:
    return re.findall(r'<li id="user-content-fn-([^"]+)">', html)


def visible_numbers(html: str) -> list[int]:
    return [
        int(n) for n in re.findall(r'aria-describedby="footnote-label">(\d+)</a></sup>', html)
    ]


# =========================================================================
# Complete output
# =========================================================================


class TestCompleteOutput:
    """Byte-exact documents."""

    def test_single_footnote(self) -> None:
        html = compile_html("a[^1]\n\n[^1]: Hello.\n")
        assert html == (
            f"<p>a{call_html('1', 1)}</p>\n"
            '<section data-footnotes class="footnotes">'
            '<h2 id="footnote-label" class="sr-only">Footnotes</h2>\n'
            "<ol>\n"
            '<li id="user-content-fn-1">\n'
            f"<p>Hello. {BACK_1}</p>\n"
            "</li>\n"
            "</ol>\n"
            "</section>"
        )

    def test_one_definition_two_calls(self) -> None:
        html = compile_html("Hi[^1] and again[^1].\n\n[^1]: Hello.\n")
        assert html == (
            f"<p>Hi{call_html('1', 1)} and again{call_html('1', 1, 2)}.</p>\n"
            '<section data-footnotes class="footnotes">'
            '<h2 id="footnote-label" class="sr-only">Footnotes</h2>\n'
            "<ol>\n"
            '<li id="user-content-fn-1">\n'
            f"<p>Hello. {BACK_1} {BACK_1_2}</p>\n"
            "</li>\n"
            "</ol>\n"
            "</section>"
        )

    def test_definition_before_call(self) -> None:
        html = compile_html("[^1]: Hello.\n\nText[^1]\n")
        assert html.startswith(f"<p>Text{call_html('1', 1)}</p>\n<section")

    def test_crlf_document(self) -> None:
        html = compile_html("a[^1]\r\n\r\n[^1]: B.\r\n")
        assert html == (
            f"<p>a{call_html('1', 1)}</p>\r\n"
            '<section data-footnotes class="footnotes">'
            '<h2 id="footnote-label" class="sr-only">Footnotes</h2>\r\n'
            "<ol>\r\n"
            '<li id="user-content-fn-1">\r\n'
            f"<p>B. {BACK_1}</p>\r\n"
            "</li>\r\n"
            "</ol>\r\n"
            "</section>"
        )


# =========================================================================
# Numbering and counting
# =========================================================================


class TestCallOrder:
    """Footnotes are numbered and listed by first call."""

    def test_declaration_order_ignored(self) -> None:
        html = compile_html("[^b]: B.\n[^a]: A.\n\nx[^a] y[^b]\n")
        assert list_item_ids(html) == ["a", "b"]
        assert visible_numbers(html) == [1, 2]

    def test_repeated_calls_reuse_number(self) -> None:
        html = compile_html("[^a] [^b] [^a] [^b] [^a]\n\n[^a]: A\n\n[^b]: B\n")
        assert visible_numbers(html) == [1, 2, 1, 2, 1]
        assert list_item_ids(html) == ["a", "b"]

    def test_labels_normalizing_equal_are_one_footnote(self) -> None:
        html = compile_html("x[^Note] y[^NOTE]\n\n[^note]: N.\n")
        assert visible_numbers(html) == [1, 1]
        assert list_item_ids(html) == ["note"]
        assert 'id="user-content-fnref-note"' in html
        assert 'id="user-content-fnref-note-2"' in html

    def test_n_calls_give_n_back_references(self) -> None:
        html = compile_html("[^x]" * 4 + "\n\n[^x]: X.\n")
        assert html.count("data-footnote-backref class") == 4
        assert 'href="#user-content-fnref-x"' in html
        for n in (2, 3, 4):
            assert f'href="#user-content-fnref-x-{n}"' in html
            assert f"↩<sup>{n}</sup>" in html
        assert 'href="#user-content-fnref-x-1"' not in html

    def test_footnote_called_only_from_another_footnote(self) -> None:
        html = compile_html("x[^a]\n\n[^a]: see[^b]\n\n[^b]: deep\n")
        assert list_item_ids(html) == ["a", "b"]
        assert visible_numbers(html) == [1, 2]


class TestCallTracker:
    """CallTracker bookkeeping."""

    def test_first_seen_order_is_stamped(self) -> None:
        tracker = CallTracker()
        assert tracker.record("B").first_seen_order == 1
        assert tracker.record("A").first_seen_order == 2
        again = tracker.record("B")
        assert (again.first_seen_order, again.reference_count) == (1, 2)

    def test_ordered(self) -> None:
        tracker = CallTracker()
        for label in ["C", "A", "C", "B", "A"]:
            tracker.record(label)
        assert [(r.label, r.reference_count) for r in tracker.ordered()] == [
            ("C", 2),
            ("A", 2),
            ("B", 1),
        ]
        assert len(tracker) == 3
        assert "A" in tracker
        assert tracker.get("C").reference_count == 2


# =========================================================================
# Definition capture
# =========================================================================


class TestDefinitionStore:
    """First definition wins."""

    def test_first_wins(self) -> None:
        store = DefinitionStore()
        assert store.add(DefinitionEntry("1", "<p>first</p>")) is True
        assert store.add(DefinitionEntry("1", "<p>second</p>")) is False
        entry = store.get("1")
        assert entry is not None
        assert entry.body == "<p>first</p>"
        assert len(store) == 1

    def test_missing(self) -> None:
        assert DefinitionStore().get("nope") is None
        assert "nope" not in DefinitionStore()


class TestDefinitionEntry:
    """Trailing line endings are split off once, at capture."""

    def test_capture_plain(self) -> None:
        entry = DefinitionEntry.capture("1", "<p>x</p>")
        assert (entry.body, entry.line_ending) == ("<p>x</p>", "")
        assert entry.ends_with_paragraph

    def test_capture_trailing_line_ending(self) -> None:
        entry = DefinitionEntry.capture("1", "<p>x</p>\r\n")
        assert (entry.body, entry.line_ending) == ("<p>x</p>", "\r\n")
        assert entry.ends_with_paragraph

    def test_only_one_line_ending_split(self) -> None:
        entry = DefinitionEntry.capture("1", "<p>x</p>\n\n")
        assert entry.body == "<p>x</p>\n"
        assert not entry.ends_with_paragraph

    def test_non_paragraph_body(self) -> None:
        assert not DefinitionEntry.capture("1", "raw").ends_with_paragraph
        assert not DefinitionEntry.capture("1", "").ends_with_paragraph

    def test_splice(self) -> None:
        entry = DefinitionEntry.capture("1", "<p>a</p>\n<p>b</p>\n")
        assert splice_back_references(entry, "LINKS") == "<p>a</p>\n<p>b LINKS</p>\n"


class TestDefinitionCapture:
    """Capture through the compiler."""

    def test_multi_paragraph_body(self) -> None:
        html = compile_html("x[^n]\n\n[^n]: One.\n\n    Two.\n")
        assert '<li id="user-content-fn-n">\n<p>One.</p>\n<p>Two. <a ' in html

    def test_lazy_continuation_body(self) -> None:
        html = compile_html("[^1]: one\ntwo\n\nx[^1]")
        assert "<p>one\ntwo <a " in html

    def test_definition_line_ending_swallowed(self) -> None:
        assert compile_html("[^1]: Unused.\n\nText\n") == "<p>Text</p>\n"

    def test_duplicate_discarded(self) -> None:
        html = compile_html("x[^1]\n\n[^1]: First.\n\n[^1]: Second.\n")
        assert "First." in html
        assert "Second." not in html

    def test_non_paragraph_body_gets_trailing_block(self) -> None:
        source = "x[^1]\n\n[^1]: raw"
        b = EventStreamBuilder(source)
        b.enter(TokenType.PARAGRAPH, 0, 5)
        b.leaf(TokenType.DATA, 0, 1)
        b.enter(TokenType.FOOTNOTE_CALL, 1, 5)
        b.leaf(TokenType.FOOTNOTE_CALL_STRING, 3, 4)
        b.exit()
        b.exit()
        b.leaf(TokenType.LINE_ENDING, 5, 6)
        b.leaf(TokenType.LINE_ENDING_BLANK, 6, 7)
        b.enter(TokenType.FOOTNOTE_DEFINITION, 7, 16)
        b.leaf(TokenType.FOOTNOTE_DEFINITION_LABEL_STRING, 9, 10)
        b.leaf(TokenType.DATA, 13, 16)
        b.exit()

        compiler = HtmlCompiler(source, extensions=[FootnoteHtmlExtension()])
        html = compiler.compile(b.build())
        assert f'<li id="user-content-fn-1">\nraw\n{BACK_1}\n</li>' in html

    def test_nested_definitions(self) -> None:
        source = "[^a]: [^b]: inner"
        b = EventStreamBuilder(source)
        b.enter(TokenType.FOOTNOTE_DEFINITION, 0, 17)
        b.leaf(TokenType.FOOTNOTE_DEFINITION_LABEL_STRING, 2, 3)
        b.enter(TokenType.FOOTNOTE_DEFINITION, 6, 17)
        b.leaf(TokenType.FOOTNOTE_DEFINITION_LABEL_STRING, 8, 9)
        b.enter(TokenType.PARAGRAPH, 12, 17)
        b.leaf(TokenType.DATA, 12, 17)
        b.exit()
        b.exit()
        b.exit()

        compiler = HtmlCompiler(source, extensions=[FootnoteHtmlExtension()])
        assert compiler.compile(b.build()) == ""

        footnotes = compiler.state.footnotes
        assert isinstance(footnotes, DocumentFootnoteState)
        assert footnotes.label_stack == []
        assert compiler.state.tight_stack == []
        inner = footnotes.definitions.get("B")
        outer = footnotes.definitions.get("A")
        assert inner is not None and inner.body == "<p>inner</p>"
        assert outer is not None and outer.body == ""

    def test_definition_side_effects(self) -> None:
        source = "[^1]: x"
        b = EventStreamBuilder(source)
        b.enter(TokenType.FOOTNOTE_DEFINITION, 0, 7)
        b.leaf(TokenType.FOOTNOTE_DEFINITION_LABEL_STRING, 2, 3)
        b.exit()

        compiler = HtmlCompiler(source, extensions=[FootnoteHtmlExtension()])
        compiler.compile(b.build())
        assert compiler.state.slurp_one_line_ending is True
        assert compiler.state.last_was_tag is False


# =========================================================================
# Section
# =========================================================================


class TestSection:
    """Section rendering rules."""

    def test_no_calls_no_section(self) -> None:
        html = compile_html("Just text.\n\n[^1]: Unused.\n")
        assert html == "<p>Just text.</p>\n"

    def test_section_rendered_once(self) -> None:
        html = compile_html("[^a][^b][^a]\n\n[^a]: A\n\n[^b]: B\n")
        assert html.count("<section") == 1
        assert html.count("</ol>") == 1

    def test_state_discarded_after_render(self) -> None:
        source = "x[^1]\n\n[^1]: y"
        from huellas.lexer import tokenize

        compiler = HtmlCompiler(source, extensions=[FootnoteHtmlExtension()])
        compiler.compile(tokenize(source))
        assert compiler.state.footnotes is None

    def test_special_characters_in_label(self) -> None:
        html = compile_html("x[^a&b]\n\n[^a&b]: Amp.\n")
        assert '<li id="user-content-fn-a&amp;b">' in html
        assert 'href="#user-content-fn-a&amp;b"' in html

    def test_unicode_label(self) -> None:
        html = compile_html("x[^café]\n\n[^café]: C.\n")
        assert '<li id="user-content-fn-caf%C3%A9">' in html


class TestMarkup:
    """HTML fragments."""

    def test_call_reference(self) -> None:
        assert call_reference("p-", "x", order=3, occurrence=1) == (
            '<sup><a href="#p-fn-x" id="p-fnref-x" '
            'data-footnote-ref aria-describedby="footnote-label">3</a></sup>'
        )

    def test_back_reference_first(self) -> None:
        assert back_reference("user-content-", "1", 1, "Back to content") == BACK_1

    def test_back_reference_later(self) -> None:
        assert back_reference("user-content-", "1", 2, "Back to content") == BACK_1_2

    def test_back_references_joined_by_space(self) -> None:
        assert back_references("user-content-", "1", 2, "Back to content") == (
            f"{BACK_1} {BACK_1_2}"
        )
