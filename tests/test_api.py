"""Tests for the high-level Huellas API."""

import pytest


class TestCompileHtmlFunction:
    """Tests for the compile_html() function."""

    def test_plain_paragraph(self) -> None:
        from huellas import compile_html

        assert compile_html("Hello World") == "<p>Hello World</p>"

    def test_empty_source(self) -> None:
        from huellas import compile_html

        assert compile_html("") == ""

    def test_footnote_rendered(self) -> None:
        from huellas import compile_html

        html = compile_html("Text[^1]\n\n[^1]: Note")
        assert 'data-footnote-ref aria-describedby="footnote-label">1</a></sup>' in html
        assert '<section data-footnotes class="footnotes">' in html
        assert html.endswith("</section>")

    def test_undefined_call_is_text(self) -> None:
        from huellas import compile_html

        assert compile_html("Text[^missing]") == "<p>Text[^missing]</p>"

    def test_deterministic(self) -> None:
        from huellas import compile_html

        source = "b[^b] a[^a] b[^b]\n\n[^a]: A\n\n[^b]: B\n"
        assert compile_html(source) == compile_html(source)


class TestMarkdownClass:
    """Tests for the Markdown class."""

    def test_callable(self) -> None:
        from huellas import Markdown

        md = Markdown()
        assert "data-footnote-ref" in md("Text[^1]\n\n[^1]: Note")

    def test_default_plugins(self) -> None:
        from huellas import Markdown

        assert Markdown().plugins == ["footnotes"]

    def test_no_plugins(self) -> None:
        from huellas import Markdown

        md = Markdown(plugins=[])
        html = md("Text[^1]\n\n[^1]: Note")
        # Without the extension, calls vanish and definition bodies render inline
        assert html == "<p>Text</p>\n<p>Note</p>"

    def test_all_plugins(self) -> None:
        from huellas import Markdown, compile_html

        source = "Text[^1]\n\n[^1]: Note"
        assert Markdown(plugins=["all"])(source) == compile_html(source)

    def test_unknown_plugin(self) -> None:
        from huellas import Markdown
        from huellas.plugins import PluginError

        with pytest.raises(PluginError, match="Unknown plugin: 'tables'"):
            Markdown(plugins=["tables"])

    def test_unknown_plugin_is_key_error(self) -> None:
        from huellas.plugins import get_plugin

        with pytest.raises(KeyError):
            get_plugin("nope")

    def test_options(self) -> None:
        from huellas import FootnoteOptions, Markdown

        md = Markdown(options=FootnoteOptions(id_prefix="x-", back_label="Arriba"))
        html = md("Text[^1]\n\n[^1]: Note")
        assert '<li id="x-fn-1">' in html
        assert 'aria-label="Arriba"' in html

    def test_tokenize_then_compile(self) -> None:
        from huellas import Markdown, TokenType

        md = Markdown()
        source = "Text[^1]\n\n[^1]: Note"
        events = md.tokenize(source)
        assert events[0].token.type is TokenType.DOCUMENT
        assert md.compile(source, events) == md(source)

    def test_reusable(self) -> None:
        from huellas import Markdown

        md = Markdown()
        first = md("a[^1]\n\n[^1]: one")
        second = md("b[^2]\n\n[^2]: two")
        assert 'id="user-content-fn-1"' in first
        assert 'id="user-content-fn-2"' in second
        assert "fn-1" not in second


class TestPublicExports:
    """Package-level exports."""

    def test_version(self) -> None:
        import huellas

        assert huellas.__version__ == "0.1.0"

    def test_all_resolves(self) -> None:
        import huellas

        for name in huellas.__all__:
            assert hasattr(huellas, name), name
