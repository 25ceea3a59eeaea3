"""Media types and highlight.js language names for template files.

Both tables are deliberately small: they cover what people actually keep
in a static-views folder. Anything else falls back to a safe default.
"""

import re
from types import MappingProxyType

from perch.paths import extension_of

DEFAULT_MEDIA_TYPE = "text/plain"
DEFAULT_HIGHLIGHT_LANGUAGE = "xml"

MEDIA_TYPES = MappingProxyType({
    "htm": "text/html",
    "html": "text/html",
    "css": "text/css",
    "js": "text/javascript",
    "json": "application/json",
    "svg": "image/svg+xml",
    "xml": "application/xml",
})

HIGHLIGHT_LANGUAGES = MappingProxyType({
    "xml": "xml",
    "html": "xml",
    "htm": "xml",
    "json": "json",
    "js": "javascript",
    "css": "css",
    "md": "markdown",
    "mdown": "markdown",
    "markdown": "markdown",
})

_TEMPLATE_SUFFIX = re.compile(r"\.twig$")


def media_type_for(extension: str | None) -> str:
    """Media type for a lowercase file extension, ``text/plain`` if unknown."""
    if not extension:
        return DEFAULT_MEDIA_TYPE
    return MEDIA_TYPES.get(extension, DEFAULT_MEDIA_TYPE)


def highlight_language_for(filename: str) -> str:
    """Highlight.js language for a template file name.

    The template extension is ignored, so ``page.json.twig`` maps to
    ``json`` and a bare ``page.twig`` falls back to ``xml``.
    """
    ext = extension_of(_TEMPLATE_SUFFIX.sub("", filename.lower()))
    if ext is None:
        return DEFAULT_HIGHLIGHT_LANGUAGE
    return HIGHLIGHT_LANGUAGES.get(ext, DEFAULT_HIGHLIGHT_LANGUAGE)
