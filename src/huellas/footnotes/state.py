"""Per-document footnote bookkeeping.

One DocumentFootnoteState exists per compile. It is created on the first
footnote event and dropped once the footnote section has been rendered.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from huellas.errors import FootnoteStateError
from huellas.footnotes.calls import CallTracker
from huellas.footnotes.definitions import DefinitionStore

if TYPE_CHECKING:
    from huellas.compiler import HtmlCompiler


@dataclass(slots=True)
class DocumentFootnoteState:
    """Everything footnote rendering remembers across one document.

    Attributes:
        label_stack: Labels of the definitions currently being captured,
            innermost last
        definitions: Rendered bodies by normalized label
        calls: Call records in first-seen order
    """

    label_stack: list[str] = field(default_factory=list)
    definitions: DefinitionStore = field(default_factory=DefinitionStore)
    calls: CallTracker = field(default_factory=CallTracker)

    def push_label(self, label: str) -> None:
        self.label_stack.append(label)

    def pop_label(self, lineno: int | None = None) -> str:
        """Pop the label of the definition that is closing.

        Raises:
            FootnoteStateError: If no definition label is open
        """
        if not self.label_stack:
            raise FootnoteStateError("Footnote definition closed without a label", lineno)
        return self.label_stack.pop()


def footnote_state(compiler: HtmlCompiler) -> DocumentFootnoteState:
    """Return the compile's footnote state, creating it on first use."""
    state = compiler.state.footnotes
    if state is None:
        state = compiler.state.footnotes = DocumentFootnoteState()
    return state
