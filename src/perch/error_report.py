"""Readable reports for template errors raised while rendering a page.

The error may come from an included template rather than the page that
was requested, and kida can name that template in several ways:

- ``@DemoBundle/some/path.twig`` (relative to the bundle root)
- ``@Demo/path.twig`` (relative to the bundle's views folder)
- ``/srv/app/DemoBundle/some/path.twig`` (full system path)
- ``Resources/views/static/path.twig`` (name as seen by perch's loader)

Each form is tried in that order until one matches. The result is a
filesystem path to read the faulty source from, plus a bundle-relative
label for display.
"""

import html
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from perch.excerpt import format_code_block
from perch.media import highlight_language_for

logger = logging.getLogger("perch.views")

DEFAULT_VIEWS_DIR = "Resources/views"
ERROR_CONTEXT_LINES = 5


@dataclass(frozen=True, slots=True)
class TemplateRef:
    """Where a template lives (``path``) and how to call it (``label``)."""

    path: str
    label: str


@dataclass(frozen=True, slots=True)
class ErrorReport:
    """Everything the error page shows about a failed render."""

    title: str
    message: str
    line: int
    source_file_path: str | None
    source_file_label: str
    highlight_language: str
    code: tuple[str, ...] = field(default=())


@dataclass(frozen=True, slots=True)
class _Bundle:
    name: str
    path: str
    views_dir: str

    @property
    def prefix(self) -> str:
        return f"@{self.name}"

    @property
    def views_prefix(self) -> str:
        return f"@{self.name.removesuffix('Bundle')}"


def _bundle_alias(ref: str, bundle: _Bundle) -> TemplateRef | None:
    if not ref.startswith(bundle.prefix + "/"):
        return None
    return TemplateRef(path=bundle.path + ref.removeprefix(bundle.prefix), label=ref)


def _views_alias(ref: str, bundle: _Bundle) -> TemplateRef | None:
    if not ref.startswith(bundle.views_prefix + "/"):
        return None
    rest = ref.removeprefix(bundle.views_prefix)
    return TemplateRef(
        path=f"{bundle.path}/{bundle.views_dir}{rest}",
        label=f"{bundle.prefix}/{bundle.views_dir}{rest}",
    )


def _system_path(ref: str, bundle: _Bundle) -> TemplateRef | None:
    if not ref.startswith(bundle.path + "/"):
        return None
    return TemplateRef(path=ref, label=bundle.prefix + ref.removeprefix(bundle.path))


def _loader_name(ref: str, bundle: _Bundle) -> TemplateRef | None:
    if not ref or ref.startswith(("@", "/", "<")) or os.path.isabs(ref):
        return None
    return TemplateRef(path=f"{bundle.path}/{ref}", label=f"{bundle.prefix}/{ref}")


# Order matters: for a bundle named without the "Bundle" suffix both
# aliases are the same string, and it must mean the bundle root.
_RULES: tuple[Callable[[str, _Bundle], TemplateRef | None], ...] = (
    _bundle_alias,
    _views_alias,
    _system_path,
    _loader_name,
)


def resolve_template_ref(
    ref: str,
    bundle_name: str,
    bundle_path: str | Path,
    *,
    views_dir: str = DEFAULT_VIEWS_DIR,
) -> TemplateRef:
    """Turn a template reference into a system path and a display label.

    References that match no rule are returned unchanged for both.
    """
    bundle = _Bundle(
        name=bundle_name,
        path=str(bundle_path).rstrip("/"),
        views_dir=views_dir.strip("/"),
    )
    for rule in _RULES:
        found = rule(ref, bundle)
        if found is not None:
            return found
    return TemplateRef(path=ref, label=ref)


def _template_ref_of(error: BaseException) -> str:
    """Best-effort template reference from a kida exception."""
    # UndefinedError keeps the variable, not the template, in .name
    attrs = ("template", "template_name", "filename")
    if type(error).__name__ != "UndefinedError":
        attrs = ("filename", "name", "template_name", "template")
    for attr in attrs:
        value = getattr(error, attr, None)
        if isinstance(value, str) and value:
            return value
    return ""


def _line_of(error: BaseException) -> int:
    lineno = getattr(error, "lineno", None)
    return lineno if isinstance(lineno, int) and lineno > 0 else 0


def _raw_message_of(error: BaseException) -> str:
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error)


def _read_source(path: str) -> str | None:
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        logger.debug("Could not read template source %s", path)
        return None


def describe_error(
    error: BaseException,
    bundle_name: str,
    bundle_path: str | Path,
    *,
    views_dir: str = DEFAULT_VIEWS_DIR,
) -> ErrorReport:
    """Build an error report for a template *error*.

    The faulty template is located through :func:`resolve_template_ref`.
    When its source can be read, a few lines around the failing line are
    included as a highlighted excerpt; otherwise the report carries only
    the message and line number.

    Args:
        error: The exception raised by the template engine.
        bundle_name: Name of the bundle the page belongs to.
        bundle_path: Filesystem root of that bundle.
        views_dir: The bundle's views folder, relative to its root.
    """
    ref = _template_ref_of(error)
    line = _line_of(error)
    found = resolve_template_ref(ref, bundle_name, bundle_path, views_dir=views_dir)

    label = found.label or "<template>"
    message = (
        f"{html.escape(_raw_message_of(error))}<br>\n"
        f"Line {line} of <code>{html.escape(label)}</code>"
    )

    code: tuple[str, ...] = ()
    source_path: str | None = None
    if found.path and Path(found.path).is_file():
        source_path = found.path
        source = _read_source(found.path)
        if source is not None:
            code = tuple(format_code_block(source, True, line, ERROR_CONTEXT_LINES))

    return ErrorReport(
        title=type(error).__name__,
        message=message,
        line=line,
        source_file_path=source_path,
        source_file_label=label,
        highlight_language=highlight_language_for(ref or label),
        code=code,
    )
