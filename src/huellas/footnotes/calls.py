"""Footnote call tracking.

Each distinct normalized label gets an appearance order the first time it is
called. Later calls to the same label reuse that number and bump the
reference count, which becomes the occurrence number of the new call site.

Example:
    >>> tracker = CallTracker()
    >>> tracker.record("B").first_seen_order
    1
    >>> tracker.record("A").first_seen_order
    2
    >>> record = tracker.record("B")
    >>> record.first_seen_order, record.reference_count
    (1, 2)
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from huellas.errors import FootnoteStateError
from huellas.footnotes.markup import call_reference
from huellas.identifiers import normalize_identifier, safe_id

if TYPE_CHECKING:
    from huellas.compiler import HtmlCompiler
    from huellas.config import FootnoteOptions
    from huellas.tokens import Token


@dataclass(slots=True)
class CallRecord:
    """Calls to one footnote.

    Attributes:
        label: Normalized label
        first_seen_order: 1-based appearance order, fixed at creation
        reference_count: Number of call sites seen so far
    """

    label: str
    first_seen_order: int
    reference_count: int = 1


class CallTracker:
    """Call records by label, in first-seen order."""

    __slots__ = ("_records",)

    def __init__(self) -> None:
        self._records: dict[str, CallRecord] = {}

    def record(self, label: str) -> CallRecord:
        """Register one call site for label.

        Returns:
            The label's record, created or updated
        """
        record = self._records.get(label)
        if record is None:
            record = CallRecord(label, first_seen_order=len(self._records) + 1)
            self._records[label] = record
        else:
            record.reference_count += 1
        return record

    def get(self, label: str) -> CallRecord:
        """Look up the record of a called label.

        Raises:
            FootnoteStateError: If label was never called
        """
        try:
            return self._records[label]
        except KeyError:
            raise FootnoteStateError(f"No call record for footnote {label!r}") from None

    def ordered(self) -> list[CallRecord]:
        """Records sorted by appearance order."""
        return sorted(self._records.values(), key=lambda r: r.first_seen_order)

    def __contains__(self, label: object) -> bool:
        return label in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[CallRecord]:
        return iter(self.ordered())


# =========================================================================
# Handlers
# =========================================================================


def enter_call_string(compiler: HtmlCompiler, token: Token) -> None:
    compiler.buffer()


def exit_call_string(compiler: HtmlCompiler, token: Token, *, options: FootnoteOptions) -> None:
    """Resolve a call and write its superscript link."""
    from huellas.footnotes.state import footnote_state

    label = normalize_identifier(compiler.slice_serialize(token))
    compiler.resume()

    calls = footnote_state(compiler).calls
    calls.record(label)
    record = calls.get(label)
    compiler.tag(
        call_reference(
            options.id_prefix or "",
            safe_id(label),
            order=record.first_seen_order,
            occurrence=record.reference_count,
        )
    )
