"""Protocols for Huellas.

Defines the contract between the HTML compiler and its extensions.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from huellas.tokens import Token, TokenType

if TYPE_CHECKING:
    from huellas.compiler import HtmlCompiler

Handler = Callable[["HtmlCompiler", Token], None]
"""Called with the compiler and the token being entered or exited."""


@runtime_checkable
class HtmlExtension(Protocol):
    """Protocol for compiler extensions.

    An extension maps token types to handlers for enter and exit events.
    Handlers for the same token type override the compiler defaults and any
    earlier extension. Exit handlers may register ``TokenType.EOF`` to run
    once after the whole stream.

    Thread Safety:
        Extensions must be stateless. Per-document state belongs in the
        compiler's CompileState.

    """

    @property
    def enter(self) -> Mapping[TokenType, Handler]:
        """Handlers for enter events."""
        ...

    @property
    def exit(self) -> Mapping[TokenType, Handler]:
        """Handlers for exit events."""
        ...
