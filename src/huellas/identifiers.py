"""Label normalization and id sanitization.

Two different keys are derived from a footnote label:

- The *normalized label* decides identity. ``[^Note]`` and ``[^NOTE]`` call
  the same footnote because their labels normalize equal.
- The *safe id* is what ends up in ``id`` and ``href`` attributes. It is the
  lower-cased label, percent-encoded like a URI and HTML-escaped.

Example:
    >>> normalize_identifier("  Foo\\n  Bar ")
    'FOO BAR'
    >>> safe_id("FOO BAR")
    'foo%20bar'
"""

from __future__ import annotations

import re
from urllib.parse import quote as url_quote

from huellas.utils.text import html_escape

_WHITESPACE_RUN = re.compile(r"[\t\n\r ]+")

# Everything outside ASCII alphanumerics and !#$&'()*+,-./:;=?@_~ is encoded.
# A % that already starts a two-character escape is left alone.
_UNSAFE_URI_CHAR = re.compile(r"%(?![A-Za-z0-9]{2})|[^!#$%&-;=?-Z_a-z~]")


def normalize_identifier(value: str) -> str:
    """Fold a raw label into its comparison key.

    Collapses runs of tabs, line endings and spaces to one space, trims the
    ends, then case-folds with ``lower().upper()`` so characters such as
    ``ẞ`` and ``ß`` compare equal.

    Args:
        value: Raw label text from the source

    Returns:
        Normalized label
    """
    return _WHITESPACE_RUN.sub(" ", value).strip(" ").lower().upper()


def _percent_encode(match: re.Match[str]) -> str:
    char = match.group()
    if "\ud800" <= char <= "\udfff":
        # Lone surrogates can't be encoded as UTF-8
        char = "\ufffd"
    return url_quote(char, safe="")


def normalize_uri(value: str) -> str:
    """Percent-encode characters that are unsafe in a URI.

    Args:
        value: URI or id fragment

    Returns:
        Encoded value; existing ``%XX`` escapes are preserved
    """
    return _UNSAFE_URI_CHAR.sub(_percent_encode, value)


def sanitize_uri(value: str | None) -> str:
    """Make a value safe to embed in a double-quoted ``href`` or ``id``."""
    return html_escape(normalize_uri(value or ""))


def safe_id(label: str) -> str:
    """Derive the attribute-safe id for a normalized label.

    Args:
        label: Normalized label (see normalize_identifier)

    Returns:
        Lower-cased, sanitized id fragment
    """
    return sanitize_uri(label.lower())
