"""URL fragment normalization.

Every path is cleaned before it touches the filesystem or gets compared
with another path: only single ``/`` separators, no ``..`` runs, and no
leading slash.
"""

import posixpath
import re

_SLASH_RUN = re.compile(r"/{2,}")
_DOT_RUN = re.compile(r"\.{2,}")


def normalize(path: str) -> str:
    """Collapse ``//`` and ``..`` runs and strip leading/trailing slashes.

    Idempotent::

        >>> normalize("//a//b/../c/")
        'a/b/./c'
    """
    path = _SLASH_RUN.sub("/", path)
    path = _DOT_RUN.sub(".", path)
    return path.strip("/")


def clean_url_path(path: str) -> str:
    """Normalize a requested URL fragment, keeping one trailing slash.

    Directory URLs are slash-terminated, so the trailing slash is part of
    the canonical form. A bare ``/`` collapses to the empty string.
    """
    cleaned = normalize(path)
    if cleaned and path.endswith("/"):
        return cleaned + "/"
    return cleaned


def extension_of(path: str) -> str | None:
    """Extension of the last path segment, without the dot.

    Returns ``None`` when the segment has no extension, so "no extension"
    never compares equal to an empty string.
    """
    name = posixpath.basename(path.rstrip("/"))
    ext = posixpath.splitext(name)[1]
    return ext[1:] if ext else None
