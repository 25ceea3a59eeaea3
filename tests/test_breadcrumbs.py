"""Tests for perch.breadcrumbs — navigation trail construction."""

from perch.breadcrumbs import Breadcrumb, build_breadcrumbs

BASE = "/static/demo"


def _active(crumbs: list[Breadcrumb]) -> list[Breadcrumb]:
    return [c for c in crumbs if c.is_active]


class TestBuildBreadcrumbs:
    def test_root_only(self) -> None:
        crumbs = build_breadcrumbs(BASE, "DemoBundle", "")
        assert crumbs == [Breadcrumb(url="/static/demo/", label="DemoBundle", is_active=True)]

    def test_directory_path(self) -> None:
        crumbs = build_breadcrumbs(BASE, "DemoBundle", "a/b/")
        assert [c.url for c in crumbs] == ["/static/demo/", "/static/demo/a/", "/static/demo/a/b/"]
        assert [c.label for c in crumbs] == ["DemoBundle", "a", "b"]
        assert _active(crumbs) == [crumbs[-1]]

    def test_directory_without_slash_gets_one(self) -> None:
        crumbs = build_breadcrumbs(BASE, "DemoBundle", "a/b")
        assert crumbs[-1].url == "/static/demo/a/b/"

    def test_rendered_file_keeps_extension_in_url(self) -> None:
        crumbs = build_breadcrumbs(BASE, "DemoBundle", "a/page.html")
        assert crumbs[-1].url == "/static/demo/a/page.html"
        assert crumbs[-1].label == "page.html"
        assert crumbs[-1].is_active

    def test_template_splits_into_two_crumbs(self) -> None:
        crumbs = build_breadcrumbs(BASE, "DemoBundle", "a/b/page.twig")
        assert [c.label for c in crumbs] == ["DemoBundle", "a", "b", "page", ".twig"]
        name, ext = crumbs[-2], crumbs[-1]
        assert name.url == "/static/demo/a/b/page"
        assert ext.url == "/static/demo/a/b/page.twig"
        assert ext.is_extension_segment
        assert not name.is_extension_segment

    def test_rendered_page_activates_name_crumb(self) -> None:
        crumbs = build_breadcrumbs(
            BASE, "DemoBundle", "page.html.twig", requested_path="page.html"
        )
        assert _active(crumbs) == [crumbs[-2]]
        assert crumbs[-2].label == "page.html"

    def test_source_view_activates_extension_crumb(self) -> None:
        crumbs = build_breadcrumbs(
            BASE, "DemoBundle", "page.html.twig", requested_path="page.html.twig"
        )
        assert _active(crumbs) == [crumbs[-1]]

    def test_requested_path_defaults_to_path(self) -> None:
        crumbs = build_breadcrumbs(BASE, "DemoBundle", "page.html.twig")
        assert _active(crumbs) == [crumbs[-1]]

    def test_index_template_under_directory(self) -> None:
        crumbs = build_breadcrumbs(
            BASE, "DemoBundle", "forms/index.html.twig", requested_path="forms/"
        )
        assert [c.label for c in crumbs] == ["DemoBundle", "forms", "index.html", ".twig"]
        assert _active(crumbs) == [crumbs[-2]]

    def test_custom_source_extension(self) -> None:
        crumbs = build_breadcrumbs(
            BASE, "DemoBundle", "page.html.j2", requested_path="page.html", source_extension=".j2"
        )
        assert crumbs[-1].label == ".j2"
        assert crumbs[-2].is_active

    def test_exactly_one_active(self) -> None:
        for path in ("", "a/", "a/b.html", "a/b.html.twig"):
            assert len(_active(build_breadcrumbs(BASE, "DemoBundle", path))) == 1

    def test_urls_are_cumulative(self) -> None:
        crumbs = build_breadcrumbs(BASE, "DemoBundle", "x/y/z/")
        for previous, current in zip(crumbs, crumbs[1:], strict=False):
            assert current.url.startswith(previous.url)

    def test_labels_rebuild_the_path(self) -> None:
        crumbs = build_breadcrumbs("/x", "Root", "a/b/page.twig")
        names = [c.label for c in crumbs[1:] if not c.is_extension_segment]
        ext = "".join(c.label for c in crumbs if c.is_extension_segment)
        assert "/".join(names) + ext == "a/b/page.twig"

    def test_bare_extension_fragment_is_a_directory_crumb(self) -> None:
        crumbs = build_breadcrumbs(BASE, "DemoBundle", "a/.twig")
        assert [c.label for c in crumbs] == ["DemoBundle", "a", ".twig"]
        assert crumbs[-1].url == "/static/demo/a/.twig/"
        assert not crumbs[-1].is_extension_segment
