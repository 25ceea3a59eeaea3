"""Shared fixtures: a bundles directory with one browsable bundle."""

from pathlib import Path

import pytest

from perch.app import App
from perch.bundles import BundleRegistry
from perch.config import AppConfig, BundleConfig

STATIC = "Resources/views/static"

FILES = {
    f"{STATIC}/index.html.twig": "<h1>Home</h1>\n",
    f"{STATIC}/about.html.twig": "<p>About us</p>\n",
    f"{STATIC}/data.json.twig": '{"ok": true}\n',
    f"{STATIC}/plain.twig": "plain text\n",
    f"{STATIC}/crumbs.html.twig": (
        '{% extends "perch/layout.html" %}\n'
        "{% block content %}<p>Crumbs page</p>{% endblock %}\n"
    ),
    f"{STATIC}/broken.html.twig": "<p>one</p>\n<p>two</p>\n{{ missing_variable }}\n<p>four</p>\n",
    f"{STATIC}/forms/login.html.twig": "<form>login</form>\n",
    f"{STATIC}/forms/signup.html.twig": "<form>signup</form>\n",
    f"{STATIC}/forms/notes.txt": "not a template\n",
    f"{STATIC}/forms/.hidden.html.twig": "hidden\n",
    f"{STATIC}/forms/nested/index.twig": "nested index\n",
    f"{STATIC}/empty/.gitkeep": "",
    "Resources/views/partials/box.html.twig": "<div class=box>box</div>\n",
}


def write_tree(root: Path, files: dict[str, str]) -> None:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def bundles_dir(tmp_path: Path) -> Path:
    """``bundles/DemoBundle`` with static templates, plus a bundle without any."""
    root = tmp_path / "bundles"
    write_tree(root / "DemoBundle", FILES)
    (root / "PlainBundle" / "src").mkdir(parents=True)
    return root


@pytest.fixture
def document_root(bundles_dir: Path) -> Path:
    return bundles_dir / "DemoBundle" / STATIC


@pytest.fixture
def config(bundles_dir: Path) -> AppConfig:
    return AppConfig(
        debug=True,
        bundles_dir=bundles_dir,
        bundles={
            "demo": BundleConfig("DemoBundle"),
            "ghost": BundleConfig("GhostBundle"),
        },
    )


@pytest.fixture
def app(config: AppConfig) -> App:
    return App(config)


@pytest.fixture
def registry(bundles_dir: Path) -> BundleRegistry:
    return BundleRegistry.from_directory(bundles_dir)
