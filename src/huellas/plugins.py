"""Plugin registry for Huellas.

Maps plugin names to compiler extensions so callers can enable them by name:

    >>> from huellas import Markdown
    >>> md = Markdown(plugins=["footnotes"])

Thread Safety:
Plugins are immutable extensions. A fresh instance is built per lookup.

"""

from __future__ import annotations

from collections.abc import Callable

from huellas.config import FootnoteOptions
from huellas.errors import HuellasError
from huellas.footnotes.extension import FootnoteHtmlExtension
from huellas.protocols import HtmlExtension

__all__ = [
    "BUILTIN_PLUGINS",
    "PluginError",
    "get_plugin",
    "resolve_plugins",
]


class PluginError(HuellasError, KeyError):
    """Unknown plugin name."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


BUILTIN_PLUGINS: dict[str, Callable[[FootnoteOptions | None], HtmlExtension]] = {
    "footnotes": FootnoteHtmlExtension,
}


def get_plugin(name: str, options: FootnoteOptions | None = None) -> HtmlExtension:
    """Get a plugin instance by name.

    Args:
        name: Plugin name (e.g., "footnotes")
        options: Options passed to the plugin

    Returns:
        Extension instance

    Raises:
        PluginError: If plugin name is not recognized

    """
    if name not in BUILTIN_PLUGINS:
        available = ", ".join(sorted(BUILTIN_PLUGINS.keys()))
        raise PluginError(f"Unknown plugin: {name!r}. Available: {available}")
    return BUILTIN_PLUGINS[name](options)


def resolve_plugins(
    plugins: list[str], options: FootnoteOptions | None = None
) -> list[HtmlExtension]:
    """Build extensions for a list of plugin names; ``"all"`` means every plugin."""
    names = list(BUILTIN_PLUGINS) if "all" in plugins else plugins
    return [get_plugin(name, options) for name in names]
