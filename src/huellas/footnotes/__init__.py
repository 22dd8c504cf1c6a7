"""GFM footnotes for the HTML compiler.

Components, in the order events reach them:

- extension: routes footnote events to the handlers below
- definitions: captures each definition body, first definition wins
- calls: numbers footnotes by first call and counts call sites
- section: renders the footnote section at the end of the document

Usage:
    >>> from huellas import compile_html
    >>> html = compile_html("Text[^1].\\n\\n[^1]: Note.")
"""

from huellas.footnotes.calls import CallRecord, CallTracker
from huellas.footnotes.definitions import DefinitionEntry, DefinitionStore
from huellas.footnotes.extension import FootnoteHtmlExtension
from huellas.footnotes.state import DocumentFootnoteState, footnote_state

__all__ = [
    "CallRecord",
    "CallTracker",
    "DefinitionEntry",
    "DefinitionStore",
    "DocumentFootnoteState",
    "FootnoteHtmlExtension",
    "footnote_state",
]
