"""Footnote extension for HtmlCompiler.

Routes footnote events to the definition, call and section handlers. The
extension itself holds only options; all state lives in the compile's
CompileState, so one extension can serve any number of compilers.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import partial
from types import MappingProxyType
from typing import TYPE_CHECKING

from huellas.config import FootnoteOptions, get_footnote_options
from huellas.footnotes.calls import enter_call_string, exit_call_string
from huellas.footnotes.definitions import (
    enter_definition,
    enter_definition_label,
    exit_definition,
    exit_definition_label,
)
from huellas.footnotes.section import render_section
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.protocols import Handler


class FootnoteHtmlExtension:
    """GFM footnotes: numbered calls, back-references and a footnote section.

    Usage:
        >>> from huellas.compiler import HtmlCompiler
        >>> from huellas.lexer import tokenize
        >>> source = "Hi[^1]\\n\\n[^1]: There."
        >>> html = HtmlCompiler(source, extensions=[FootnoteHtmlExtension()]).compile(
        ...     tokenize(source)
        ... )
        >>> 'id="user-content-fn-1"' in html
        True

    Thread Safety:
        Immutable after construction. Safe to share between compilers.

    """

    __slots__ = ("_options", "_enter", "_exit")

    def __init__(self, options: FootnoteOptions | None = None) -> None:
        """Initialize extension.

        Args:
            options: Rendering options; defaults to the options active in the
                current context (see huellas.config)
        """
        self._options = options if options is not None else get_footnote_options()
        self._enter: Mapping[TokenType, Handler] = MappingProxyType(
            {
                TokenType.FOOTNOTE_DEFINITION: enter_definition,
                TokenType.FOOTNOTE_DEFINITION_LABEL_STRING: enter_definition_label,
                TokenType.FOOTNOTE_CALL_STRING: enter_call_string,
            }
        )
        self._exit: Mapping[TokenType, Handler] = MappingProxyType(
            {
                TokenType.FOOTNOTE_DEFINITION: exit_definition,
                TokenType.FOOTNOTE_DEFINITION_LABEL_STRING: exit_definition_label,
                TokenType.FOOTNOTE_CALL_STRING: partial(exit_call_string, options=self._options),
                TokenType.EOF: partial(render_section, options=self._options),
            }
        )

    @property
    def options(self) -> FootnoteOptions:
        return self._options

    @property
    def enter(self) -> Mapping[TokenType, Handler]:
        return self._enter

    @property
    def exit(self) -> Mapping[TokenType, Handler]:
        return self._exit
