"""Text encoding helpers shared by the compiler and its extensions.

Example:
    >>> from huellas.utils.text import html_escape
    >>> html_escape('a < "b" & c')
    'a &lt; &quot;b&quot; &amp; c'
"""

from __future__ import annotations

import html


def html_escape(text: str) -> str:
    """Escape HTML special characters.

    Escapes ``&``, ``<``, ``>`` and ``"`` but NOT single quotes, so the result
    is safe in element content and in double-quoted attribute values.
    Python's html.escape() escapes ' to &#x27; which markdown output doesn't use.

    Args:
        text: Text to escape

    Returns:
        Escaped text
    """
    if not text:
        return ""
    return html.escape(text, quote=False).replace('"', "&quot;")
