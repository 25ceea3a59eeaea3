"""Tests for perch.config — AppConfig and perch.toml loading."""

from pathlib import Path

import pytest

from perch.config import DEFAULT_ROOT, AppConfig, BundleConfig, load_config
from perch.errors import ConfigurationError


class TestAppConfig:
    def test_defaults(self) -> None:
        cfg = AppConfig()

        assert cfg.host == "127.0.0.1"
        assert cfg.port == 8000
        assert cfg.debug is False
        assert cfg.prefix == "/static"
        assert cfg.bundles == {}
        assert cfg.source_extension == ".twig"
        assert cfg.index_names == ("index.html.twig", "index.twig")
        assert cfg.default_root == DEFAULT_ROOT
        assert cfg.auto_discover is False

    def test_frozen(self) -> None:
        cfg = AppConfig()

        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]

    @pytest.mark.parametrize(
        ("prefix", "expected"),
        [("/static", "/static"), ("static/", "/static"), ("//dev//static/", "/dev/static"), ("", ""), ("/", "")],
    )
    def test_url_prefix(self, prefix: str, expected: str) -> None:
        assert AppConfig(prefix=prefix).url_prefix == expected

    def test_with_overrides_skips_none(self) -> None:
        cfg = AppConfig(port=9000)
        updated = cfg.with_overrides(port=None, debug=True)
        assert updated.port == 9000
        assert updated.debug is True

    def test_with_overrides_no_changes_returns_self(self) -> None:
        cfg = AppConfig()
        assert cfg.with_overrides(host=None) is cfg

    def test_bundle_config_default_root(self) -> None:
        assert BundleConfig("DemoBundle").root == DEFAULT_ROOT


def _write(directory: Path, content: str) -> Path:
    path = directory / "perch.toml"
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_full_file(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            """
[server]
host = "0.0.0.0"
port = 9000
debug = true
log_level = "debug"

[browser]
prefix = "/dev"
bundles_dir = "bundles"
source_extension = "j2"
index_names = ["home.html.j2"]
auto_discover = true

[bundles]
demo = "DemoBundle"

[bundles.blog]
name = "BlogBundle"
root = "Resources/views/mockups"
""",
        )
        cfg = load_config(path)

        assert cfg.host == "0.0.0.0"
        assert cfg.port == 9000
        assert cfg.debug is True
        assert cfg.log_level == "debug"
        assert cfg.prefix == "/dev"
        assert cfg.bundles_dir == tmp_path / "bundles"
        assert cfg.source_extension == ".j2"
        assert cfg.index_names == ("home.html.j2",)
        assert cfg.auto_discover is True
        assert cfg.bundles == {
            "demo": BundleConfig("DemoBundle", DEFAULT_ROOT),
            "blog": BundleConfig("BlogBundle", "Resources/views/mockups"),
        }
        assert cfg.config_path == path

    def test_default_root_applies_to_bundles(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            '[browser]\ndefault_root = "views/static"\n\n[bundles]\ndemo = "DemoBundle"\n',
        )
        assert load_config(path).bundles["demo"].root == "views/static"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        cfg = load_config(_write(tmp_path, ""))
        assert cfg.port == 8000
        assert cfg.bundles == {}

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            load_config(_write(tmp_path, "[server\nport = 1"))

    def test_wrong_type(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="server.port"):
            load_config(_write(tmp_path, '[server]\nport = "80"\n'))

    def test_bool_is_not_an_int(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            load_config(_write(tmp_path, "[server]\nport = true\n"))

    def test_bundle_table_requires_name(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="bundles.demo.name"):
            load_config(_write(tmp_path, '[bundles.demo]\nroot = "x"\n'))

    def test_index_names_must_be_strings(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            load_config(_write(tmp_path, "[browser]\nindex_names = [1, 2]\n"))

    def test_discovers_file_in_parent(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write(tmp_path, "[server]\nport = 7000\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert load_config().port == 7000

    def test_no_file_found_gives_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("perch.config._discover_config", lambda: None)
        monkeypatch.chdir(tmp_path)
        assert load_config() == AppConfig()
