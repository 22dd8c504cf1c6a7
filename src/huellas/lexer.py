"""Tokenizer for paragraphs and GFM footnotes.

Turns Markdown source into the event stream HtmlCompiler consumes. Only the
constructs footnote rendering depends on are recognized:

- Blank lines
- Paragraphs (consecutive non-blank lines)
- Footnote definitions: ``[^label]: body``, with lazy continuation lines and
  further paragraphs indented by four or more spaces
- Footnote calls: ``[^label]`` inside paragraph text

Everything else in a paragraph is literal text. There is no emphasis, code,
link or escape handling.

Two passes:
1. Block scan: classify lines and collect the normalized label of every
   definition in the document.
2. Emission: walk the blocks and scan paragraph text for calls. A ``[^label]``
   is a call only when its label is defined somewhere, so the compiler never
   sees a call it has no definition for.

Complexity: O(n) in source length.

"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from huellas.identifiers import normalize_identifier
from huellas.tokens import Event, EventStreamBuilder, TokenType

_LINE_ENDING = re.compile(r"\r\n|\r|\n")

# Label: no whitespace, no unescaped "]", at most 999 characters
_LABEL = r"((?:[^\]\\\s]|\\\S){1,999})"
_DEFINITION_START = re.compile(r" {0,3}\[\^" + _LABEL + r"\]:")
_CALL = re.compile(r"\[\^" + _LABEL + r"\]")

# Indentation that continues a definition after a blank line
_CONTINUATION_INDENT = 4


@dataclass(frozen=True, slots=True)
class _Line:
    """One source line.

    ``start``..``end`` is the content, ``end``..``eol_end`` the line ending.
    """

    start: int
    end: int
    eol_end: int

    @property
    def has_line_ending(self) -> bool:
        return self.eol_end > self.end


@dataclass(slots=True)
class _Paragraph:
    lines: list[_Line] = field(default_factory=list)
    spans: list[tuple[int, int]] = field(default_factory=list)

    def add(self, line: _Line, span: tuple[int, int]) -> None:
        self.lines.append(line)
        self.spans.append(span)


@dataclass(slots=True)
class _Definition:
    first: _Line
    label_start: int
    label_end: int
    label: str
    last: _Line
    children: list[_Paragraph | _Line] = field(default_factory=list)


def _split_lines(source: str) -> list[_Line]:
    lines: list[_Line] = []
    pos = 0
    for match in _LINE_ENDING.finditer(source):
        lines.append(_Line(pos, match.start(), match.end()))
        pos = match.end()
    if pos < len(source):
        lines.append(_Line(pos, len(source), len(source)))
    return lines


class Lexer:
    """Block and inline tokenizer.

    Usage:
        >>> events = Lexer("Hi[^1].\\n\\n[^1]: There.").tokenize()
        >>> [e.token.type.name for e in events][:3]
        ['DOCUMENT', 'PARAGRAPH', 'DATA']

    Thread Safety:
        Instances hold per-source state; create one per document.

    """

    __slots__ = ("_source", "_lines", "_index")

    def __init__(self, source: str) -> None:
        self._source = source
        self._lines = _split_lines(source)
        self._index = 0

    def tokenize(self) -> list[Event]:
        """Produce the complete event stream for the source.

        Returns:
            Events, wrapped in one DOCUMENT token
        """
        self._index = 0
        blocks = self._scan_blocks()
        defined = {block.label for block in blocks if isinstance(block, _Definition)}

        builder = EventStreamBuilder(self._source)
        builder.enter(TokenType.DOCUMENT, 0, len(self._source))
        for block in blocks:
            match block:
                case _Paragraph():
                    self._emit_paragraph(builder, block, defined)
                    self._emit_line_ending(builder, block.lines[-1])
                case _Definition():
                    self._emit_definition(builder, block, defined)
                case _Line():
                    self._emit_blank(builder, block)
        builder.exit()
        return builder.build()

    # =========================================================================
    # Block scan
    # =========================================================================

    def _scan_blocks(self) -> list[_Paragraph | _Definition | _Line]:
        blocks: list[_Paragraph | _Definition | _Line] = []
        while self._index < len(self._lines):
            line = self._lines[self._index]
            if self._is_blank(line):
                blocks.append(line)
                self._index += 1
                continue
            match = self._match_definition(line)
            if match is not None:
                blocks.append(self._scan_definition(line, match))
            else:
                blocks.append(self._scan_paragraph())
        return blocks

    def _scan_paragraph(self) -> _Paragraph:
        """Consume lines up to a blank line or a definition start."""
        para = _Paragraph()
        while self._index < len(self._lines):
            line = self._lines[self._index]
            if self._is_blank(line):
                break
            if para.lines and self._match_definition(line) is not None:
                break
            para.add(line, self._span(line.start, line.end))
            self._index += 1
        return para

    def _scan_definition(self, line: _Line, match: re.Match[str]) -> _Definition:
        """Consume a definition and its continuation lines.

        Blank lines only belong to the definition when indented content
        follows them; trailing blank lines are left for the document.
        """
        definition = _Definition(
            first=line,
            label_start=match.start(1),
            label_end=match.end(1),
            label=normalize_identifier(match.group(1)),
            last=line,
        )
        self._index += 1

        current: _Paragraph | None = None
        start, end = self._span(match.end(), line.end)
        if start < end:
            current = _Paragraph()
            current.add(line, (start, end))
            definition.children.append(current)

        pending: list[_Line] = []
        while self._index < len(self._lines):
            line = self._lines[self._index]
            if self._is_blank(line):
                current = None
                pending.append(line)
            elif self._indent(line) >= _CONTINUATION_INDENT:
                if current is None:
                    definition.children.extend(pending)
                    pending = []
                    current = _Paragraph()
                    definition.children.append(current)
                current.add(line, self._span(line.start, line.end))
                definition.last = line
            elif current is not None and self._match_definition(line) is None:
                # Lazy continuation of the open paragraph
                current.add(line, self._span(line.start, line.end))
                definition.last = line
            else:
                break
            self._index += 1

        self._index -= len(pending)
        return definition

    def _match_definition(self, line: _Line) -> re.Match[str] | None:
        return _DEFINITION_START.match(self._source, line.start, line.end)

    def _is_blank(self, line: _Line) -> bool:
        return not self._source[line.start : line.end].strip(" \t")

    def _indent(self, line: _Line) -> int:
        """Leading whitespace width, tabs expanding to the next multiple of 4."""
        width = 0
        for char in self._source[line.start : line.end]:
            if char == " ":
                width += 1
            elif char == "\t":
                width += 4 - width % 4
            else:
                break
        return width

    def _span(self, start: int, end: int) -> tuple[int, int]:
        """Trim spaces and tabs from both ends of a range."""
        source = self._source
        while start < end and source[start] in " \t":
            start += 1
        while end > start and source[end - 1] in " \t":
            end -= 1
        return start, end

    # =========================================================================
    # Emission
    # =========================================================================

    def _emit_definition(
        self, builder: EventStreamBuilder, definition: _Definition, defined: set[str]
    ) -> None:
        builder.enter(TokenType.FOOTNOTE_DEFINITION, definition.first.start, definition.last.end)
        builder.leaf(
            TokenType.FOOTNOTE_DEFINITION_LABEL_STRING,
            definition.label_start,
            definition.label_end,
        )
        children = definition.children
        for i, child in enumerate(children):
            if isinstance(child, _Line):
                self._emit_blank(builder, child)
                continue
            self._emit_paragraph(builder, child, defined)
            # The last line ending falls outside the definition
            if i < len(children) - 1:
                self._emit_line_ending(builder, child.lines[-1])
        builder.exit()
        self._emit_line_ending(builder, definition.last)

    def _emit_paragraph(
        self, builder: EventStreamBuilder, para: _Paragraph, defined: set[str]
    ) -> None:
        builder.enter(TokenType.PARAGRAPH, para.spans[0][0], para.spans[-1][1])
        for i, (start, end) in enumerate(para.spans):
            if i:
                self._emit_line_ending(builder, para.lines[i - 1])
            self._emit_inline(builder, start, end, defined)
        builder.exit()

    def _emit_inline(
        self, builder: EventStreamBuilder, start: int, end: int, defined: set[str]
    ) -> None:
        """Emit data and footnote calls for one line of paragraph text."""
        pos = start
        for match in _CALL.finditer(self._source, start, end):
            if normalize_identifier(match.group(1)) not in defined:
                continue
            if match.start() > pos:
                builder.leaf(TokenType.DATA, pos, match.start())
            builder.enter(TokenType.FOOTNOTE_CALL, match.start(), match.end())
            builder.leaf(TokenType.FOOTNOTE_CALL_STRING, match.start(1), match.end(1))
            builder.exit()
            pos = match.end()
        if pos < end:
            builder.leaf(TokenType.DATA, pos, end)

    def _emit_line_ending(self, builder: EventStreamBuilder, line: _Line) -> None:
        if line.has_line_ending:
            builder.leaf(TokenType.LINE_ENDING, line.end, line.eol_end)

    def _emit_blank(self, builder: EventStreamBuilder, line: _Line) -> None:
        if line.has_line_ending:
            builder.leaf(TokenType.LINE_ENDING_BLANK, line.start, line.eol_end)


def tokenize(source: str) -> list[Event]:
    """Tokenize Markdown source into compiler events.

    Args:
        source: Markdown source text

    Returns:
        Strictly nested enter/exit events

    Example:
        >>> events = tokenize("Text[^a]\\n\\n[^a]: Note")
        >>> sum(e.token.type is TokenType.FOOTNOTE_CALL for e in events)
        2
    """
    return Lexer(source).tokenize()
