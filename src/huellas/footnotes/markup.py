"""HTML fragments for footnote calls and back-references.

The n-th call to a footnote gets the anchor ``{prefix}fnref-{id}`` for n = 1
and ``{prefix}fnref-{id}-{n}`` after that. Back-reference n links to exactly
that anchor.

Example:
    >>> call_reference("user-content-", "1", order=1, occurrence=2)
    '<sup><a href="#user-content-fn-1" id="user-content-fnref-1-2" data-footnote-ref aria-describedby="footnote-label">1</a></sup>'
"""

from __future__ import annotations

BACK_REFERENCE_GLYPH = "↩"


def occurrence_suffix(occurrence: int) -> str:
    """Anchor suffix of the n-th call site: none for the first."""
    return f"-{occurrence}" if occurrence > 1 else ""


def call_reference(prefix: str, safe_id: str, *, order: int, occurrence: int) -> str:
    """Superscript link written at a call site.

    Args:
        prefix: Clobber prefix for ids
        safe_id: Sanitized footnote id
        order: Appearance order, the visible number
        occurrence: Which call to this footnote this is (1-based)

    Returns:
        HTML fragment
    """
    return (
        f'<sup><a href="#{prefix}fn-{safe_id}" '
        f'id="{prefix}fnref-{safe_id}{occurrence_suffix(occurrence)}" '
        f'data-footnote-ref aria-describedby="footnote-label">{order}</a></sup>'
    )


def back_reference(prefix: str, safe_id: str, occurrence: int, encoded_label: str) -> str:
    """Link from the footnote back to its n-th call site.

    Args:
        prefix: Clobber prefix for ids
        safe_id: Sanitized footnote id
        occurrence: Call site number (1-based)
        encoded_label: HTML-encoded ``aria-label``

    Returns:
        HTML fragment
    """
    number = f"<sup>{occurrence}</sup>" if occurrence > 1 else ""
    return (
        f'<a href="#{prefix}fnref-{safe_id}{occurrence_suffix(occurrence)}" '
        f'data-footnote-backref class="data-footnote-backref" '
        f'aria-label="{encoded_label}">{BACK_REFERENCE_GLYPH}{number}</a>'
    )


def back_references(prefix: str, safe_id: str, count: int, encoded_label: str) -> str:
    """All back-references of a footnote, joined by single spaces."""
    return " ".join(
        back_reference(prefix, safe_id, occurrence, encoded_label)
        for occurrence in range(1, count + 1)
    )
