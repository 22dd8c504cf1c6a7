"""End-of-document footnote section.

Rendered once, from the EOF sentinel, and only if something was called.
Footnotes appear in call order; definitions nobody called are left out.

Output shape (line endings in the document's style)::

    <section data-footnotes class="footnotes"><h2 id="footnote-label" class="sr-only">Footnotes</h2>
    <ol>
    <li id="user-content-fn-1">
    <p>Body. <a href="#user-content-fnref-1" ...>↩</a></p>
    </li>
    </ol>
    </section>
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.errors import FootnoteStateError
from huellas.footnotes.definitions import CLOSING_PARAGRAPH, DefinitionEntry
from huellas.footnotes.markup import back_references
from huellas.identifiers import safe_id
from huellas.utils.logger import get_logger

if TYPE_CHECKING:
    from huellas.compiler import HtmlCompiler
    from huellas.config import FootnoteOptions
    from huellas.tokens import Token

logger = get_logger(__name__)


def splice_back_references(entry: DefinitionEntry, links: str) -> str:
    """Put back-references inside the closing paragraph of a body.

    Only valid when ``entry.ends_with_paragraph``.
    """
    head = entry.body[: -len(CLOSING_PARAGRAPH)]
    return f"{head} {links}{CLOSING_PARAGRAPH}{entry.line_ending}"


def render_section(compiler: HtmlCompiler, token: Token, *, options: FootnoteOptions) -> None:
    """Write the footnote section, then drop the document's footnote state.

    Raises:
        FootnoteStateError: If a called label has no stored definition
    """
    footnotes = compiler.state.footnotes
    if footnotes is None or not footnotes.calls:
        return

    prefix = options.id_prefix or ""
    tag_name = options.label_tag_name
    back_label = compiler.encode(options.back_label)

    compiler.line_ending_if_needed()
    compiler.tag(
        f'<section data-footnotes class="footnotes">'
        f'<{tag_name} id="footnote-label" class="sr-only">'
    )
    compiler.raw(compiler.encode(options.label))
    compiler.tag(f"</{tag_name}>")
    compiler.line_ending_if_needed()
    compiler.tag("<ol>")

    records = footnotes.calls.ordered()
    for record in records:
        entry = footnotes.definitions.get(record.label)
        if entry is None:
            raise FootnoteStateError(
                f"Footnote {record.label!r} is called but never defined", token.lineno
            )
        fn_id = safe_id(record.label)
        links = back_references(prefix, fn_id, record.reference_count, back_label)

        compiler.line_ending_if_needed()
        compiler.tag(f'<li id="{prefix}fn-{fn_id}">')
        compiler.line_ending_if_needed()
        if entry.ends_with_paragraph:
            compiler.tag(splice_back_references(entry, links))
        else:
            compiler.tag(entry.body + entry.line_ending)
            compiler.line_ending_if_needed()
            compiler.tag(links)
        compiler.line_ending_if_needed()
        compiler.tag("</li>")

    compiler.line_ending_if_needed()
    compiler.tag("</ol>")
    compiler.line_ending_if_needed()
    compiler.tag("</section>")

    logger.debug("Rendered footnote section with %d footnotes", len(records))
    compiler.state.footnotes = None
