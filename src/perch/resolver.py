"""Map a requested URL fragment to what the browser should show.

``resolve()`` never renders anything. It inspects the document root and
returns one of five outcomes; the views act on the outcome's type::

    match resolve(path, root, base_url=base, debug=True):
        case RedirectTo(url):
            ...
        case RenderTemplate(template):
            ...

Resolution rules, first match wins:

1. Unclean URLs (``//``, ``..``, leading slash) redirect to their clean form.
2. Outside debug mode, ``page.html.twig`` redirects to ``page.html``:
   template sources are never shown in production.
3. A directory URL without trailing slash redirects to the slash form; with
   the slash it renders ``index.html.twig`` / ``index.twig`` or lists the
   directory.
4. A file URL maps to ``<path>.twig`` and renders it, or, when the URL
   itself ends with ``.twig``, shows its source.
5. Anything else is not found.
"""

from dataclasses import dataclass
from pathlib import Path

from perch.paths import clean_url_path, extension_of

DEFAULT_INDEX_NAMES = ("index.html.twig", "index.twig")


@dataclass(frozen=True, slots=True)
class RedirectTo:
    """Send the client to a canonical URL."""

    url: str


@dataclass(frozen=True, slots=True)
class RenderTemplate:
    """Render *template*, a path relative to the document root."""

    template: str
    path: str


@dataclass(frozen=True, slots=True)
class ShowDirectory:
    """List the contents of *directory*."""

    directory: Path
    path: str


@dataclass(frozen=True, slots=True)
class ShowSource:
    """Show the raw source of the template *file*."""

    file: Path
    path: str


@dataclass(frozen=True, slots=True)
class NotFound:
    """Nothing in the document root matches *path*."""

    path: str


type ResolutionOutcome = RedirectTo | RenderTemplate | ShowDirectory | ShowSource | NotFound


def resolve(
    request_path: str,
    document_root: str | Path,
    *,
    base_url: str,
    debug: bool = False,
    source_extension: str = ".twig",
    index_names: tuple[str, ...] = DEFAULT_INDEX_NAMES,
) -> ResolutionOutcome:
    """Decide how to answer a request for *request_path*.

    Args:
        request_path: The raw URL fragment below the bundle's base URL.
        document_root: Filesystem directory holding the browsable templates.
        base_url: URL of the bundle root, without trailing slash. Redirect
            targets are built from it.
        debug: Whether template sources may be shown.
        source_extension: The template extension, with its dot.
        index_names: Default documents for a directory, in priority order.

    Returns:
        The outcome for the views to act on.
    """
    clean = clean_url_path(request_path)
    if clean != request_path:
        return RedirectTo(f"{base_url}/{clean}")

    if not debug and clean.endswith(source_extension):
        return RedirectTo(f"{base_url}/{clean.removesuffix(source_extension)}")

    path_ext = extension_of(clean)
    show_source = path_ext is not None and path_ext == source_extension.lstrip(".")

    root = Path(document_root)
    bare = clean.rstrip("/")
    target = root / bare if bare else root

    if path_ext is None and target.is_dir():
        if clean and not clean.endswith("/"):
            return RedirectTo(f"{base_url}/{clean}/")
        for index_name in index_names:
            if (target / index_name).is_file():
                return RenderTemplate(template=clean + index_name, path=clean)
        return ShowDirectory(directory=target, path=clean)

    if not bare:
        return NotFound(path=clean)

    candidate = target if show_source else target.with_name(target.name + source_extension)
    if candidate.is_file():
        if request_path.endswith("/"):
            return RedirectTo(f"{base_url}/{bare}")
        if show_source:
            return ShowSource(file=candidate, path=clean)
        return RenderTemplate(template=bare + source_extension, path=clean)

    return NotFound(path=clean)
