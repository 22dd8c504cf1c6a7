"""Token, TokenType and Event definitions.

The tokenizer produces a flat, already-materialized sequence of Event objects.
Each event enters or exits one Token; enter/exit pairs are strictly nested.
The compiler walks the sequence once, dispatching on ``(kind, token.type)``.

Thread Safety:
Token and Event are frozen (immutable) and safe to share across threads.
TokenType and EventKind are enums (inherently immutable).

"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum, auto

_LINE_ENDING = re.compile(r"\r\n|\r|\n")


class TokenType(Enum):
    """Construct kinds that appear in an event stream.

    Organized by category:
    - Document structure (DOCUMENT, EOF)
    - Flow content (paragraphs, line endings)
    - Footnote constructs

    """

    # Document structure
    DOCUMENT = auto()
    EOF = auto()  # End-of-document sentinel, dispatched by the compiler

    # Flow content
    PARAGRAPH = auto()
    DATA = auto()  # Literal text inside a paragraph
    LINE_ENDING = auto()  # \n, \r\n or \r
    LINE_ENDING_BLANK = auto()  # Line ending of a blank line

    # Footnote definitions: [^label]: body
    FOOTNOTE_DEFINITION = auto()
    FOOTNOTE_DEFINITION_LABEL_STRING = auto()  # label between [^ and ]

    # Footnote calls: [^label]
    FOOTNOTE_CALL = auto()
    FOOTNOTE_CALL_STRING = auto()  # label between [^ and ]


class EventKind(Enum):
    """Whether an event opens or closes its token."""

    ENTER = auto()
    EXIT = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A span of source text with a construct kind.

    Attributes:
        type: The construct kind
        start: Absolute start offset in source (inclusive)
        end: Absolute end offset in source (exclusive)
        lineno: Start line number (1-indexed)
        col: Start column (1-indexed)

    """

    type: TokenType
    start: int
    end: int
    lineno: int = 1
    col: int = 1

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        return f"Token({self.type.name}, {self.start}:{self.end}, {self.lineno}:{self.col})"


@dataclass(frozen=True, slots=True)
class Event:
    """Enter or exit notification for one token."""

    kind: EventKind
    token: Token

    @property
    def entering(self) -> bool:
        return self.kind is EventKind.ENTER


class EventStreamBuilder:
    """Assemble an event stream by hand.

    Positions are taken from ``source``, so ``slice_serialize`` in the
    compiler returns the right text. Useful for hosts with their own
    tokenizer and for tests that need streams the bundled tokenizer can't
    produce (nested definitions, definitions without paragraphs).

    Usage:
        >>> source = "a[^x]"
        >>> b = EventStreamBuilder(source)
        >>> b.enter(TokenType.PARAGRAPH, 0, 5)
        >>> b.leaf(TokenType.DATA, 0, 1)
        >>> b.enter(TokenType.FOOTNOTE_CALL, 1, 5)
        >>> b.leaf(TokenType.FOOTNOTE_CALL_STRING, 3, 4)
        >>> b.exit()
        >>> b.exit()
        >>> len(b.build())
        8

    """

    __slots__ = ("_line_starts", "_events", "_open")

    def __init__(self, source: str) -> None:
        self._line_starts = [0] + [m.end() for m in _LINE_ENDING.finditer(source)]
        self._events: list[Event] = []
        self._open: list[Token] = []

    def _token(self, token_type: TokenType, start: int, end: int) -> Token:
        lineno = bisect_right(self._line_starts, start)
        col = start - self._line_starts[lineno - 1] + 1
        return Token(token_type, start, end, lineno, col)

    def enter(self, token_type: TokenType, start: int, end: int) -> None:
        """Open a token; it stays open until the matching ``exit()``."""
        token = self._token(token_type, start, end)
        self._open.append(token)
        self._events.append(Event(EventKind.ENTER, token))

    def exit(self) -> None:
        """Close the most recently opened token."""
        token = self._open.pop()
        self._events.append(Event(EventKind.EXIT, token))

    def leaf(self, token_type: TokenType, start: int, end: int) -> None:
        """Append an enter/exit pair for a token with no children."""
        self.enter(token_type, start, end)
        self.exit()

    def build(self) -> list[Event]:
        """Return the events; every opened token must have been closed."""
        if self._open:
            names = ", ".join(t.type.name for t in self._open)
            raise ValueError(f"Unclosed tokens: {names}")
        return list(self._events)
