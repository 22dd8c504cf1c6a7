"""Nested output collectors for the HTML compiler.

Compiling a construct sometimes needs its HTML as a value instead of as
output: a footnote definition body is rendered where it appears but emitted
in the footnote section. The compiler redirects output into a side collector
with ``push()`` and takes the text back with ``pop_text()``.

Each collector appends to a list and joins once at the end, so a document is
built in O(n) rather than O(n²) repeated concatenation.

Thread Safety:
BufferStack instances are local to each compile() call.

"""

from __future__ import annotations

from huellas.errors import BufferNestingError


class BufferStack:
    """Stack of string collectors.

    The bottom collector holds the document output and is never popped.

    Usage:
            >>> stack = BufferStack()
            >>> stack.append("<p>")
            >>> stack.push()
            >>> stack.append("aside")
            >>> stack.pop_text()
            'aside'
            >>> stack.append("</p>")
            >>> stack.build()
            '<p></p>'

    """

    __slots__ = ("_stack",)

    def __init__(self) -> None:
        """Initialize with the document-level collector."""
        self._stack: list[list[str]] = [[]]

    def push(self) -> None:
        """Open a side collector; output goes there until ``pop_text()``."""
        self._stack.append([])

    def pop_text(self) -> str:
        """Close the current side collector.

        Returns:
            Everything written since the matching ``push()``

        Raises:
            BufferNestingError: If only the document collector is left
        """
        if len(self._stack) == 1:
            raise BufferNestingError("resume() called without an open buffer")
        return "".join(self._stack.pop())

    def append(self, s: str) -> None:
        """Write to the current collector (empty strings are skipped)."""
        if s:
            self._stack[-1].append(s)

    def last_char(self) -> str:
        """Return the last character written to the current collector.

        Returns:
            The character, or ``""`` if the collector is empty
        """
        parts = self._stack[-1]
        return parts[-1][-1] if parts else ""

    @property
    def depth(self) -> int:
        """Number of open side collectors."""
        return len(self._stack) - 1

    def build(self) -> str:
        """Join the document collector into the final string."""
        return "".join(self._stack[0])
