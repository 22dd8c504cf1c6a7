"""HTML compiler for event streams.

Walks a materialized event sequence once and writes HTML. The compiler knows
paragraphs, literal data and line endings; everything else comes from
extensions that register enter/exit handlers per token type.

Extensions talk to the compiler through a small set of primitives:

- ``buffer()`` / ``resume()``: redirect output into a side collector and
  take it back as a string. Must be strictly nested.
- ``tag(html)`` / ``raw(text)``: write markup or already-encoded text.
- ``line_ending_if_needed()``: write one line ending unless output is empty
  or already ends with one.
- ``slice_serialize(token)``: raw source text of a token.
- ``state``: the per-document CompileState.

Thread Safety:
Each compile() call creates a fresh CompileState and BufferStack. A compiler
instance can be reused sequentially, but concurrent documents need separate
instances.

"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from huellas.buffers import BufferStack
from huellas.errors import BufferNestingError
from huellas.tokens import Event, EventKind, Token, TokenType
from huellas.utils.logger import get_logger
from huellas.utils.text import html_escape

if TYPE_CHECKING:
    from huellas.footnotes.state import DocumentFootnoteState
    from huellas.protocols import Handler, HtmlExtension

logger = get_logger(__name__)

_LINE_ENDING = re.compile(r"\r\n|\r|\n")


def detect_line_ending(source: str) -> str:
    """Return the first line ending used in source, or ``"\\n"``."""
    match = _LINE_ENDING.search(source)
    return match.group() if match else "\n"


@dataclass(slots=True)
class CompileState:
    """Per-compile mutable state.

    Attributes:
        tight_stack: One flag per open container; ``True`` means paragraphs
            inside render without ``<p>``
        slurp_one_line_ending: Swallow the next line ending
        slurp_all_line_endings: Swallow line endings until the next paragraph
        last_was_tag: Last write was markup rather than text
        line_ending_style: Line ending written by ``line_ending()``
        footnotes: Footnote bookkeeping, created on the first footnote event
    """

    tight_stack: list[bool] = field(default_factory=list)
    slurp_one_line_ending: bool = False
    slurp_all_line_endings: bool = False
    last_was_tag: bool = False
    line_ending_style: str = "\n"
    footnotes: DocumentFootnoteState | None = None


def _enter_paragraph(compiler: HtmlCompiler, token: Token) -> None:
    state = compiler.state
    if not (state.tight_stack and state.tight_stack[-1]):
        compiler.line_ending_if_needed()
        compiler.tag("<p>")
    state.slurp_all_line_endings = False


def _exit_paragraph(compiler: HtmlCompiler, token: Token) -> None:
    state = compiler.state
    if state.tight_stack and state.tight_stack[-1]:
        state.slurp_all_line_endings = True
    else:
        compiler.tag("</p>")


def _exit_data(compiler: HtmlCompiler, token: Token) -> None:
    compiler.raw(compiler.encode(compiler.slice_serialize(token)))


def _exit_line_ending(compiler: HtmlCompiler, token: Token) -> None:
    state = compiler.state
    if state.slurp_all_line_endings:
        return
    if state.slurp_one_line_ending:
        state.slurp_one_line_ending = False
        return
    compiler.raw(compiler.encode(compiler.slice_serialize(token)))


class HtmlCompiler:
    """Compile an event stream to HTML.

    Usage:
        >>> from huellas.lexer import tokenize
        >>> source = "Hello"
        >>> HtmlCompiler(source).compile(tokenize(source))
        '<p>Hello</p>'

    """

    __slots__ = ("_source", "_enter", "_exit", "_buffers", "state")

    def __init__(
        self,
        source: str = "",
        *,
        extensions: Iterable[HtmlExtension] = (),
    ) -> None:
        """Initialize compiler.

        Args:
            source: Source text the event tokens point into
            extensions: Extensions whose handlers are layered over the
                defaults, later ones winning
        """
        self._source = source
        self._enter: dict[TokenType, Handler] = {
            TokenType.PARAGRAPH: _enter_paragraph,
        }
        self._exit: dict[TokenType, Handler] = {
            TokenType.PARAGRAPH: _exit_paragraph,
            TokenType.DATA: _exit_data,
            TokenType.LINE_ENDING: _exit_line_ending,
        }
        for extension in extensions:
            self._enter.update(extension.enter)
            self._exit.update(extension.exit)
        self._buffers = BufferStack()
        self.state = CompileState()

    def compile(self, events: Iterable[Event]) -> str:
        """Compile events to an HTML string.

        Args:
            events: Strictly nested enter/exit events over this source

        Returns:
            HTML string

        Raises:
            BufferNestingError: If side buffers are still open at the end
        """
        self._buffers = BufferStack()
        self.state = CompileState(line_ending_style=detect_line_ending(self._source))

        count = 0
        for event in events:
            handlers = self._enter if event.kind is EventKind.ENTER else self._exit
            handler = handlers.get(event.token.type)
            if handler is not None:
                handler(self, event.token)
            count += 1

        end = len(self._source)
        eof = Token(TokenType.EOF, end, end, lineno=self._source.count("\n") + 1)
        handler = self._exit.get(TokenType.EOF)
        if handler is not None:
            handler(self, eof)

        if self._buffers.depth:
            raise BufferNestingError(
                f"{self._buffers.depth} buffer(s) still open at end of document",
                lineno=eof.lineno,
            )

        logger.debug("Compiled %d events from %d source characters", count, end)
        return self._buffers.build()

    # =========================================================================
    # Output primitives
    # =========================================================================

    def buffer(self) -> None:
        """Start collecting output into a side buffer."""
        self._buffers.push()

    def resume(self) -> str:
        """Stop collecting and return what the side buffer received."""
        return self._buffers.pop_text()

    def tag(self, html: str) -> None:
        """Write markup."""
        self.state.last_was_tag = True
        self._buffers.append(html)

    def raw(self, text: str) -> None:
        """Write text that is already encoded."""
        self.state.last_was_tag = False
        self._buffers.append(text)

    def encode(self, text: str) -> str:
        """HTML-encode text for element content or attribute values."""
        return html_escape(text)

    def line_ending(self) -> None:
        """Write one line ending in the document's style."""
        self.raw(self.state.line_ending_style)

    def line_ending_if_needed(self) -> None:
        """Write a line ending unless the current buffer is empty or ends in one."""
        if self._buffers.last_char() in ("", "\n", "\r"):
            return
        self.line_ending()

    def slice_serialize(self, token: Token) -> str:
        """Return the source text a token spans."""
        return self._source[token.start : token.end]

    @property
    def source(self) -> str:
        return self._source
