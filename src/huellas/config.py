"""ContextVar-based footnote options for Huellas.

Options are immutable and may be shared by any number of compilers. An
application can either pass FootnoteOptions explicitly or set ambient options
for the current context, which extensions pick up when they are constructed.

Usage:
    # Explicit
    ext = FootnoteHtmlExtension(FootnoteOptions(label="Notas"))

    # Ambient, e.g. per request in a web app
    from huellas.config import footnote_options_context, FootnoteOptions

    with footnote_options_context(FootnoteOptions(id_prefix="doc-")):
        html = compile_html(source)

Thread Safety:
    Each thread sees its own ContextVar value, so no locks are needed.

"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

DEFAULT_ID_PREFIX = "user-content-"
DEFAULT_LABEL = "Footnotes"
DEFAULT_LABEL_TAG_NAME = "h2"
DEFAULT_BACK_LABEL = "Back to content"

# Option names used by JavaScript markdown tooling, mapped to field names
_ALIASES = {
    "clobberPrefix": "id_prefix",
    "idPrefix": "id_prefix",
    "sectionLabelText": "label",
    "labelTagName": "label_tag_name",
    "sectionLabelTag": "label_tag_name",
    "backLabel": "back_label",
    "backReferenceAriaLabel": "back_label",
}


@dataclass(frozen=True, slots=True)
class FootnoteOptions:
    """Immutable footnote rendering options.

    Strings are never validated. Text options are HTML-encoded where they are
    embedded; ``label_tag_name`` and ``id_prefix`` are written verbatim.

    Attributes:
        id_prefix: Prefix for every footnote ``id`` so user content can't
            clobber page globals. ``""`` disables it; ``None`` means default.
        label: Text of the screen-reader heading of the footnote section
        label_tag_name: Tag name of that heading
        back_label: ``aria-label`` of each back-reference link

    Empty ``label``, ``label_tag_name`` and ``back_label`` fall back to the
    defaults, since an empty heading or aria-label is never useful.

    """

    id_prefix: str | None = DEFAULT_ID_PREFIX
    label: str = DEFAULT_LABEL
    label_tag_name: str = DEFAULT_LABEL_TAG_NAME
    back_label: str = DEFAULT_BACK_LABEL

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__
        if self.id_prefix is None:
            object.__setattr__(self, "id_prefix", DEFAULT_ID_PREFIX)
        if not self.label:
            object.__setattr__(self, "label", DEFAULT_LABEL)
        if not self.label_tag_name:
            object.__setattr__(self, "label_tag_name", DEFAULT_LABEL_TAG_NAME)
        if not self.back_label:
            object.__setattr__(self, "back_label", DEFAULT_BACK_LABEL)

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> "FootnoteOptions":
        """Create FootnoteOptions from a dictionary.

        Accepts field names as well as the camelCase names JavaScript
        tooling uses (``clobberPrefix``, ``labelTagName``, ``backLabel``...).
        Unknown keys are silently ignored.

        Args:
            config_dict: Dictionary with option values

        Returns:
            New FootnoteOptions instance

        Example:
            >>> opts = FootnoteOptions.from_dict({
            ...     "clobberPrefix": "",
            ...     "label": "Notas",
            ...     "unknown_key": "ignored",
            ... })
            >>> opts.id_prefix, opts.label
            ('', 'Notas')

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered: dict[str, Any] = {}
        for key, value in config_dict.items():
            name = _ALIASES.get(key, key)
            if name in valid_fields:
                filtered[name] = value
        return cls(**filtered)


# Module-level default options (reused, never recreated)
_DEFAULT_OPTIONS: FootnoteOptions = FootnoteOptions()

_footnote_options: ContextVar[FootnoteOptions] = ContextVar(
    "footnote_options",
    default=_DEFAULT_OPTIONS,
)


def get_footnote_options() -> FootnoteOptions:
    """Get the footnote options active in the current context."""
    return _footnote_options.get()


def set_footnote_options(options: FootnoteOptions) -> None:
    """Set footnote options for the current context.

    Args:
        options: FootnoteOptions to use for this context.

    Thread Safety:
        Only affects the current thread's context. Other threads are unaffected.

    """
    _footnote_options.set(options)


def reset_footnote_options() -> None:
    """Reset the current context to the default options."""
    _footnote_options.set(_DEFAULT_OPTIONS)


@contextmanager
def footnote_options_context(options: FootnoteOptions) -> Iterator[None]:
    """Context manager for temporary option changes.

    Args:
        options: FootnoteOptions to use within the context.

    Yields:
        None

    Example:
        >>> with footnote_options_context(FootnoteOptions(label="Notas")):
        ...     get_footnote_options().label
        'Notas'
        >>> get_footnote_options().label
        'Footnotes'

    """
    previous = _footnote_options.get()
    _footnote_options.set(options)
    try:
        yield
    finally:
        _footnote_options.set(previous)


__all__ = [
    "DEFAULT_BACK_LABEL",
    "DEFAULT_ID_PREFIX",
    "DEFAULT_LABEL",
    "DEFAULT_LABEL_TAG_NAME",
    "FootnoteOptions",
    "footnote_options_context",
    "get_footnote_options",
    "reset_footnote_options",
    "set_footnote_options",
]
