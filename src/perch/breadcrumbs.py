"""Breadcrumb navigation for browsed paths.

A path such as ``forms/login.html.twig`` becomes::

    Demo  >  forms  >  login.html  >  .twig

The last fragment is split in two when it carries the template
extension, so both the rendered page and its source view are one click
away. Which of the two is active depends on what was requested.
"""

from dataclasses import dataclass, replace

from perch.paths import extension_of


@dataclass(frozen=True, slots=True)
class Breadcrumb:
    """One navigable segment of the trail."""

    url: str
    label: str
    is_extension_segment: bool = False
    is_active: bool = False


def build_breadcrumbs(
    base_url: str,
    root_label: str,
    path: str,
    *,
    requested_path: str | None = None,
    source_extension: str = ".twig",
) -> list[Breadcrumb]:
    """Build the breadcrumb trail for *path* below *base_url*.

    Args:
        base_url: URL of the bundle root, without trailing slash.
        root_label: Label of the first crumb (usually the bundle name).
        path: Slash-separated path relative to the document root.
        requested_path: The clean path that was actually requested. Its
            extension decides whether the rendered or the source crumb
            is active. Defaults to *path*.
        source_extension: The template extension, with its dot.

    Returns:
        Crumbs in order; exactly one of them is active.
    """
    if requested_path is None:
        requested_path = path
    source_ext = source_extension.lstrip(".")

    url = base_url + "/"
    crumbs = [Breadcrumb(url=url, label=root_label)]

    fragments = [fragment for fragment in path.split("/") if fragment]
    last = fragments.pop() if fragments else None
    for fragment in fragments:
        url += fragment + "/"
        crumbs.append(Breadcrumb(url=url, label=fragment))

    if last is None:
        return _activate_last(crumbs)

    # A bare ".twig" fragment is a dotfile name without extension, not a split crumb
    ext = extension_of(last)
    if ext == source_ext:
        requested_ext = extension_of(requested_path) if requested_path else None
        showing_source = ext == requested_ext
        name = last.removesuffix(source_extension)
        crumbs.append(Breadcrumb(url=url + name, label=name, is_active=not showing_source))
        crumbs.append(
            Breadcrumb(
                url=url + last,
                label=source_extension,
                is_extension_segment=True,
                is_active=showing_source,
            )
        )
        return crumbs

    url += last + ("/" if ext is None else "")
    crumbs.append(Breadcrumb(url=url, label=last))
    return _activate_last(crumbs)


def _activate_last(crumbs: list[Breadcrumb]) -> list[Breadcrumb]:
    """Mark the final crumb as the current page."""
    crumbs[-1] = replace(crumbs[-1], is_active=True)
    return crumbs
