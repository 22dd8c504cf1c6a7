"""
Huellas: GFM footnotes compiled to HTML

Turns Markdown paragraphs and GitHub-flavored footnotes into HTML: calls are
numbered in the order they first appear, every call site gets its own
back-reference, and all ids carry a clobber-safe prefix.

Quick Start:
    >>> from huellas import compile_html
    >>> html = compile_html("Hi[^1] and again[^1].\\n\\n[^1]: Hello.")
    >>> 'id="user-content-fnref-1-2"' in html
    True

    >>> # Or use the reusable Markdown class
    >>> from huellas import FootnoteOptions, Markdown
    >>> md = Markdown(options=FootnoteOptions(label="Notas"))
    >>> html = md("Texto[^a].\\n\\n[^a]: Nota.")

Installation:
    pip install huellas              # Zero runtime dependencies
    pip install huellas[test]        # + pytest and hypothesis
"""

from huellas.compiler import CompileState, HtmlCompiler
from huellas.config import (
    FootnoteOptions,
    footnote_options_context,
    get_footnote_options,
    reset_footnote_options,
    set_footnote_options,
)
from huellas.errors import BufferNestingError, CompileError, FootnoteStateError, HuellasError
from huellas.footnotes import FootnoteHtmlExtension
from huellas.identifiers import normalize_identifier, safe_id, sanitize_uri
from huellas.lexer import Lexer, tokenize
from huellas.plugins import resolve_plugins
from huellas.protocols import HtmlExtension
from huellas.tokens import Event, EventKind, EventStreamBuilder, Token, TokenType

__version__ = "0.1.0"


def compile_html(source: str, *, options: FootnoteOptions | None = None) -> str:
    """Compile Markdown source with footnotes to HTML.

    Args:
        source: Markdown source text
        options: Footnote options (uses the context options if None)

    Returns:
        HTML string

    Example:
        >>> compile_html("No footnotes here")
        '<p>No footnotes here</p>'
    """
    compiler = HtmlCompiler(source, extensions=[FootnoteHtmlExtension(options)])
    return compiler.compile(tokenize(source))


class Markdown:
    """Reusable Markdown processor with a fixed set of plugins.

    Usage:
        >>> md = Markdown()
        >>> html = md("Text[^1]\\n\\n[^1]: Note")

        >>> # Plain paragraphs only
        >>> Markdown(plugins=[])("Text[^1]")
        '<p>Text[^1]</p>'

    Thread Safety:
        Holds only immutable extensions. Each call builds its own compiler,
        so one instance can serve concurrent threads.

    """

    __slots__ = ("_extensions", "_plugins")

    def __init__(
        self,
        *,
        plugins: list[str] | None = None,
        options: FootnoteOptions | None = None,
    ) -> None:
        """Initialize Markdown processor.

        Args:
            plugins: Plugin names to enable; defaults to ``["footnotes"]``.
                Use ``["all"]`` to enable every built-in plugin.
            options: Footnote options (uses the context options if None)
        """
        self._plugins = ["footnotes"] if plugins is None else list(plugins)
        self._extensions = tuple(resolve_plugins(self._plugins, options))

    def __call__(self, source: str) -> str:
        """Tokenize and compile in one call."""
        return self.compile(source, self.tokenize(source))

    def tokenize(self, source: str) -> list[Event]:
        """Tokenize source into compiler events."""
        return tokenize(source)

    def compile(self, source: str, events: list[Event]) -> str:
        """Compile events over source to HTML.

        Args:
            source: Source text the event tokens point into
            events: Event stream, e.g. from tokenize()

        Returns:
            HTML string
        """
        return HtmlCompiler(source, extensions=self._extensions).compile(events)

    @property
    def plugins(self) -> list[str]:
        return list(self._plugins)


__all__ = [  # noqa: RUF022 - grouped by category for maintainability
    # Version
    "__version__",
    # Core API
    "compile_html",
    "Markdown",
    # Compiler
    "CompileState",
    "HtmlCompiler",
    "HtmlExtension",
    "FootnoteHtmlExtension",
    # Tokenizer and events
    "Event",
    "EventKind",
    "EventStreamBuilder",
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Identifiers
    "normalize_identifier",
    "safe_id",
    "sanitize_uri",
    # Configuration (ContextVar-based)
    "FootnoteOptions",
    "get_footnote_options",
    "set_footnote_options",
    "reset_footnote_options",
    "footnote_options_context",
    # Errors
    "HuellasError",
    "CompileError",
    "FootnoteStateError",
    "BufferNestingError",
]
