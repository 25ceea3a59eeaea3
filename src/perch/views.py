"""Request handlers of the template browser.

``find()`` is the heart of it: look up the bundle behind a slug, let
:func:`perch.resolver.resolve` decide what the path means, then render
that outcome. Everything a handler needs to know about the request is
gathered once in a :class:`ResolvedRequest` and passed along.
"""

import html
import logging
import posixpath
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import quote

from kida import Environment
from kida.template import Markup

from perch.breadcrumbs import Breadcrumb, build_breadcrumbs
from perch.bundles import BundleRegistry
from perch.config import AppConfig, BundleConfig
from perch.error_report import describe_error
from perch.excerpt import format_code_block
from perch.http.request import Request
from perch.http.response import AnyResponse, Redirect, Response
from perch.listing import list_directory
from perch.media import highlight_language_for, media_type_for
from perch.paths import extension_of, normalize
from perch.resolver import (
    NotFound,
    RedirectTo,
    RenderTemplate,
    ShowDirectory,
    ShowSource,
    resolve,
)
from perch.server.terminal_errors import is_template_error
from perch.templating.integration import render_template

logger = logging.getLogger("perch.views")

LAYOUT = "perch/layout.html"
DIR_INDEX = "perch/dirindex.html"
ROOT_INDEX = "perch/rootindex.html"


@dataclass(frozen=True, slots=True)
class ResolvedRequest:
    """What a find request is about, once its bundle is known."""

    clean_path: str
    extension: str | None
    is_source_view: bool
    bundle_name: str
    bundle_path: Path
    document_root_alias: str
    document_root_path: Path
    document_root: str
    base_url: str


class BrowserViews:
    """Handlers for the browser's routes.

    Holds no per-request state: every handler derives what it needs from
    its arguments and the frozen configuration.
    """

    __slots__ = ("_config", "_environments", "_registry", "_root_env")

    def __init__(
        self,
        config: AppConfig,
        registry: BundleRegistry,
        environments: Mapping[str, Environment],
        root_env: Environment,
    ) -> None:
        self._config = config
        self._registry = registry
        self._environments = environments
        self._root_env = root_env

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    def root(self, request: Request) -> Response:
        """List the configured bundles."""
        prefix = self._config.url_prefix
        bundles = [
            {"slug": slug, "name": cfg.name, "url": f"{prefix}/{slug}/"}
            for slug, cfg in sorted(self._config.bundles.items())
        ]
        body = render_template(
            self._root_env,
            ROOT_INDEX,
            {
                "breadcrumbs": build_breadcrumbs(prefix, "Bundles", ""),
                "meta_title": "Perch",
                "bundles": bundles,
                "was": request.query.get("was", ""),
            },
        )
        return Response(body=body)

    def bundle_root(self, slug: str) -> Redirect:
        """``/static/demo`` is always browsed as ``/static/demo/``."""
        return Redirect(quote(f"{self._config.url_prefix}/{slug}/"))

    def find(self, slug: str, path: str) -> AnyResponse:
        """Find a template to render or a folder to list."""
        prefix = self._config.url_prefix
        bundle_config = self._bundle_config(slug)
        if bundle_config is None:
            logger.debug("No bundle configured for slug %r", slug)
            return Redirect(f"{quote(prefix)}/?was={quote(slug, safe='')}")

        # Raises UnknownBundleError for a configured but missing bundle
        bundle = self._registry.get(bundle_config.name)

        base_url = f"{prefix}/{slug}"
        doc_root = normalize(bundle_config.root)
        outcome = resolve(
            path,
            bundle.path / doc_root,
            base_url=base_url,
            debug=self._config.debug,
            source_extension=self._config.source_extension,
            index_names=self._config.index_names,
        )
        logger.debug("%s %r -> %s", slug, path, type(outcome).__name__)

        if isinstance(outcome, RedirectTo):
            # Location must be ASCII; paths arrive percent-decoded
            return Redirect(quote(outcome.url))

        ext = extension_of(outcome.path)
        resolved = ResolvedRequest(
            clean_path=outcome.path,
            extension=ext,
            is_source_view=ext == self._config.source_extension.lstrip("."),
            bundle_name=bundle.name,
            bundle_path=bundle.path,
            document_root_alias=f"@{bundle.name}/{doc_root}",
            document_root_path=bundle.path / doc_root,
            document_root=doc_root,
            base_url=base_url,
        )

        match outcome:
            case RenderTemplate(template=template):
                return self._render_page(resolved, template)
            case ShowDirectory(directory=directory):
                return self._render_directory(resolved, directory)
            case ShowSource(file=file):
                return self._show_source(resolved, file)
            case NotFound():
                return self._render_not_found(resolved)
        raise AssertionError(f"Unhandled resolution outcome: {outcome!r}")

    # ------------------------------------------------------------------
    # Outcome rendering
    # ------------------------------------------------------------------

    def _bundle_config(self, slug: str) -> BundleConfig | None:
        bundle_config = self._config.bundles.get(slug)
        if bundle_config is not None or not self._config.auto_discover:
            return bundle_config
        found = self._registry.find_static_bundle(slug, self._config.default_root)
        if found is None:
            return None
        return BundleConfig(name=found.name, root=self._config.default_root)

    def _breadcrumbs(self, resolved: ResolvedRequest, path: str) -> list[Breadcrumb]:
        return build_breadcrumbs(
            resolved.base_url,
            resolved.bundle_name,
            path,
            requested_path=resolved.clean_path,
            source_extension=self._config.source_extension,
        )

    def _layout(self, resolved: ResolvedRequest, context: dict[str, Any], status: int = 200) -> Response:
        page = {
            "meta_title": "Perch",
            "title": "",
            "message": "",
            "code": "",
            "highlight_language": "xml",
            "nav_border": True,
            **context,
        }
        body = render_template(self._environments[resolved.bundle_name], LAYOUT, page)
        return Response(body=body, status=status)

    def _render_page(self, resolved: ResolvedRequest, template: str) -> Response:
        """Render a bundle template; in debug mode, report template errors in-page."""
        # Breadcrumbs are always passed, for pages extending perch/layout.html
        breadcrumbs = self._breadcrumbs(resolved, template)
        name = posixpath.join(resolved.document_root, template)

        # page.json.twig is served as JSON; index templates carry their own type
        inner_ext = resolved.extension or extension_of(
            template.removesuffix(self._config.source_extension)
        )
        env = self._environments[resolved.bundle_name]
        try:
            body = render_template(env, name, {"breadcrumbs": breadcrumbs})
        except Exception as exc:
            if not (self._config.debug and is_template_error(exc)):
                raise
            logger.warning("Template error in %s: %s", name, exc)
            return self._render_template_error(resolved, exc, breadcrumbs)

        response = Response(body=body)
        if inner_ext is not None:
            response = response.with_content_type(f"{media_type_for(inner_ext)};charset=utf-8")
        return response

    def _render_template_error(
        self,
        resolved: ResolvedRequest,
        exc: Exception,
        breadcrumbs: list[Breadcrumb],
    ) -> Response:
        report = describe_error(
            exc,
            resolved.bundle_name,
            resolved.bundle_path,
            views_dir=self._config.views_dir,
        )
        return self._layout(
            resolved,
            {
                "breadcrumbs": breadcrumbs,
                "meta_title": f"Error: {posixpath.basename(report.source_file_label)}",
                "title": report.title,
                "message": Markup(report.message),
                "code": Markup("\n".join(report.code)),
                "highlight_language": report.highlight_language,
            },
            status=500,
        )

    def _render_directory(self, resolved: ResolvedRequest, directory: Path) -> Response:
        listing = list_directory(directory, source_extension=self._config.source_extension)
        body = render_template(
            self._environments[resolved.bundle_name],
            DIR_INDEX,
            {
                "breadcrumbs": self._breadcrumbs(resolved, resolved.clean_path),
                "meta_title": f"Index of {resolved.clean_path or '/'}",
                "directories": listing.directories,
                "files": listing.files,
                "nav_border": False,
            },
        )
        return Response(body=body)

    def _show_source(self, resolved: ResolvedRequest, file: Path) -> Response:
        try:
            code = "\n".join(format_code_block(file.read_text(encoding="utf-8", errors="replace")))
        except OSError:
            logger.debug("Could not read %s", file)
            code = ""
        return self._layout(
            resolved,
            {
                "breadcrumbs": self._breadcrumbs(resolved, resolved.clean_path),
                "meta_title": f"Source: {file.name}",
                "code": Markup(code),
                "highlight_language": highlight_language_for(file.name),
                "nav_border": False,
            },
        )

    def _render_not_found(self, resolved: ResolvedRequest) -> Response:
        path = resolved.clean_path
        logger.debug("Nothing matches %r in %s", path, resolved.document_root_path)
        if resolved.is_source_view or not path or path.endswith("/"):
            miss = path
        else:
            miss = path + self._config.source_extension
        message = (
            f'<p>Could not find: <code class="error">{html.escape(miss)}</code><br>\n'
            f"In: <code>{html.escape(resolved.document_root_alias)}</code></p>"
        )
        return self._layout(
            resolved,
            {
                "breadcrumbs": self._breadcrumbs(resolved, path),
                "meta_title": f"Not found: {path}",
                "title": "File does not exist",
                "message": Markup(message),
            },
            status=404,
        )
