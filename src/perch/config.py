"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, no string-key
dict lookups. It can be built in code or loaded from ``perch.toml``::

    [server]
    port = 8000
    debug = true

    [browser]
    prefix = "/static"
    bundles_dir = "bundles"

    [bundles.demo]
    name = "DemoBundle"
    root = "Resources/views/static"
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from perch.errors import ConfigurationError
from perch.paths import normalize

CONFIG_FILENAME = "perch.toml"
DEFAULT_VIEWS_DIR = "Resources/views"
DEFAULT_ROOT = "Resources/views/static"


@dataclass(frozen=True, slots=True)
class BundleConfig:
    """Which bundle a slug serves, and where its document root is."""

    name: str
    root: str = DEFAULT_ROOT


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Perch configuration. Immutable after creation.

    All fields have defaults. Override what you need::

        config = AppConfig(
            debug=True,
            bundles_dir="bundles",
            bundles={"demo": BundleConfig("DemoBundle")},
        )
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Browser
    prefix: str = "/static"
    bundles: Mapping[str, BundleConfig] = field(default_factory=dict)
    bundles_dir: str | Path | None = None
    views_dir: str = DEFAULT_VIEWS_DIR
    default_root: str = DEFAULT_ROOT
    source_extension: str = ".twig"
    index_names: tuple[str, ...] = ("index.html.twig", "index.twig")
    auto_discover: bool = False  # Unknown slugs may match "<slug>Bundle"

    # Templates
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Logging
    log_level: str = "info"

    # Where this config was loaded from, if anywhere
    config_path: Path | None = None

    @property
    def url_prefix(self) -> str:
        """The mount prefix with a leading slash and no trailing slash."""
        cleaned = normalize(self.prefix)
        return f"/{cleaned}" if cleaned else ""

    def with_overrides(self, **overrides: Any) -> AppConfig:
        """Return a copy with every non-``None`` override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from ``perch.toml``.

    If *config_path* is given it must exist. Otherwise the current
    directory and its parents are searched; with no file found the
    defaults are returned.

    Raises:
        FileNotFoundError: If an explicit *config_path* doesn't exist.
        ConfigurationError: If the file content is invalid.
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        return _load_from_file(config_path)

    discovered = _discover_config()
    if discovered is None:
        return AppConfig()
    return _load_from_file(discovered)


def _discover_config() -> Path | None:
    current = Path.cwd()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _load_from_file(path: Path) -> AppConfig:
    with path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"{path}: {exc}") from exc

    config_dir = path.parent
    options: dict[str, Any] = {"config_path": path}
    options.update(_parse_server(data.get("server")))
    options.update(_parse_browser(data.get("browser"), config_dir))
    options["bundles"] = _parse_bundles(
        data.get("bundles"),
        options.get("default_root", DEFAULT_ROOT),
    )
    return AppConfig(**options)


def _section(data: object, name: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{name} section must be a table")
    return data


def _typed(section: dict[str, Any], name: str, key: str, kind: type) -> Any:
    value = section[key]
    # bool is an int subclass; keep "port = true" out
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ConfigurationError(f"{name}.{key} must be of type {kind.__name__}")
    return value


def _parse_server(data: object) -> dict[str, Any]:
    section = _section(data, "server")
    options: dict[str, Any] = {}
    for key, kind in (("host", str), ("port", int), ("debug", bool), ("log_level", str)):
        if key in section:
            options[key] = _typed(section, "server", key, kind)
    return options


def _parse_browser(data: object, config_dir: Path) -> dict[str, Any]:
    section = _section(data, "browser")
    options: dict[str, Any] = {}
    for key, kind in (
        ("prefix", str),
        ("views_dir", str),
        ("default_root", str),
        ("source_extension", str),
        ("auto_discover", bool),
        ("autoescape", bool),
    ):
        if key in section:
            options[key] = _typed(section, "browser", key, kind)

    if "bundles_dir" in section:
        options["bundles_dir"] = config_dir / _typed(section, "browser", "bundles_dir", str)

    if "index_names" in section:
        names = _typed(section, "browser", "index_names", list)
        if not all(isinstance(n, str) for n in names):
            raise ConfigurationError("browser.index_names must be a list of strings")
        options["index_names"] = tuple(names)

    ext = options.get("source_extension")
    if ext is not None and not ext.startswith("."):
        options["source_extension"] = "." + ext
    return options


def _parse_bundles(data: object, default_root: str) -> dict[str, BundleConfig]:
    section = _section(data, "bundles")
    bundles: dict[str, BundleConfig] = {}
    for slug, entry in section.items():
        name = f"bundles.{slug}"
        if isinstance(entry, str):
            bundles[slug] = BundleConfig(name=entry, root=default_root)
            continue
        table = _section(entry, name)
        if "name" not in table:
            raise ConfigurationError(f"{name}.name is required")
        bundles[slug] = BundleConfig(
            name=_typed(table, name, "name", str),
            root=_typed(table, name, "root", str) if "root" in table else default_root,
        )
    return bundles
