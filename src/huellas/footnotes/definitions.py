"""Footnote definition capture.

A definition is compiled in place, like any other block, but into a side
buffer. The rendered body is stored under its normalized label and emitted
later by the section renderer.

Capture sequence::

    enter FOOTNOTE_DEFINITION               push "not tight"
      enter ..._LABEL_STRING                buffer()
      exit  ..._LABEL_STRING                push label, drop label text, buffer()
      ... body events write into the buffer ...
    exit  FOOTNOTE_DEFINITION               pop label, store body, pop tightness

The first definition of a label wins; later ones are compiled and dropped.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from huellas.identifiers import normalize_identifier
from huellas.utils.logger import get_logger

if TYPE_CHECKING:
    from huellas.compiler import HtmlCompiler
    from huellas.tokens import Token

logger = get_logger(__name__)

CLOSING_PARAGRAPH = "</p>"

_TRAILING_LINE_ENDING = re.compile(r"(?:\r\n|\r|\n)\Z")


@dataclass(slots=True)
class DefinitionEntry:
    """Rendered body of one footnote definition.

    Attributes:
        label: Normalized label
        body: Rendered HTML without its trailing line ending
        line_ending: The trailing line ending split off at capture, if any
    """

    label: str
    body: str
    line_ending: str = ""

    @classmethod
    def capture(cls, label: str, rendered: str) -> DefinitionEntry:
        """Build an entry from a finished body buffer."""
        match = _TRAILING_LINE_ENDING.search(rendered)
        if match is None:
            return cls(label, rendered)
        return cls(label, rendered[: match.start()], match.group())

    @property
    def ends_with_paragraph(self) -> bool:
        """True if the body's last block is a paragraph."""
        return self.body.endswith(CLOSING_PARAGRAPH)


class DefinitionStore:
    """First-wins mapping of normalized label to DefinitionEntry."""

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[str, DefinitionEntry] = {}

    def add(self, entry: DefinitionEntry) -> bool:
        """Store entry unless its label is already defined.

        Returns:
            True if stored, False if discarded as a duplicate
        """
        if entry.label in self._entries:
            logger.debug("Discarding duplicate footnote definition %r", entry.label)
            return False
        self._entries[entry.label] = entry
        return True

    def get(self, label: str) -> DefinitionEntry | None:
        return self._entries.get(label)

    def __contains__(self, label: object) -> bool:
        return label in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DefinitionEntry]:
        return iter(self._entries.values())


# =========================================================================
# Handlers
# =========================================================================


def enter_definition(compiler: HtmlCompiler, token: Token) -> None:
    """Definition bodies are never tight: paragraphs keep their ``<p>``."""
    from huellas.footnotes.state import footnote_state

    footnote_state(compiler)
    compiler.state.tight_stack.append(False)


def enter_definition_label(compiler: HtmlCompiler, token: Token) -> None:
    compiler.buffer()


def exit_definition_label(compiler: HtmlCompiler, token: Token) -> None:
    from huellas.footnotes.state import footnote_state

    footnote_state(compiler).push_label(normalize_identifier(compiler.slice_serialize(token)))
    compiler.resume()  # Drop the label text
    compiler.buffer()  # Collect the body


def exit_definition(compiler: HtmlCompiler, token: Token) -> None:
    from huellas.footnotes.state import footnote_state

    footnotes = footnote_state(compiler)
    label = footnotes.pop_label(token.lineno)
    footnotes.definitions.add(DefinitionEntry.capture(label, compiler.resume()))

    state = compiler.state
    state.tight_stack.pop()
    # Nothing reached the enclosing output; swallow the line ending after it
    state.slurp_one_line_ending = True
    state.last_was_tag = False
