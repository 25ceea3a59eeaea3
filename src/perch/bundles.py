"""Installed bundles and where they live.

A bundle is a directory of application resources, named like
``DemoBundle``. Perch browses the bundle's static-views folder
(``Resources/views/static`` by default).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from perch.errors import UnknownBundleError


@dataclass(frozen=True, slots=True)
class Bundle:
    """An installed bundle."""

    name: str
    path: Path


class BundleRegistry:
    """Lookup of installed bundles by name.

    Usage::

        registry = BundleRegistry.from_directory("bundles")
        registry.locate("DemoBundle")  # Path(".../bundles/DemoBundle")
    """

    __slots__ = ("_bundles",)

    def __init__(self, bundles: Iterable[Bundle] = ()) -> None:
        self._bundles: dict[str, Bundle] = {b.name: b for b in bundles}

    @classmethod
    def from_directory(cls, directory: str | Path) -> BundleRegistry:
        """Treat every visible sub-directory of *directory* as a bundle."""
        root = Path(directory).resolve()
        return cls(
            Bundle(name=child.name, path=child)
            for child in sorted(root.iterdir(), key=lambda p: p.name)
            if child.is_dir() and not child.name.startswith(".")
        )

    def __contains__(self, name: object) -> bool:
        return name in self._bundles

    def __iter__(self) -> Iterator[Bundle]:
        return iter(self._bundles.values())

    def __len__(self) -> int:
        return len(self._bundles)

    def names(self) -> list[str]:
        return sorted(self._bundles)

    def get(self, name: str) -> Bundle:
        """Return the bundle called *name*.

        Raises:
            UnknownBundleError: If no such bundle is installed.
        """
        try:
            return self._bundles[name]
        except KeyError:
            raise UnknownBundleError(name) from None

    def locate(self, name: str) -> Path:
        """Filesystem root of the bundle called *name*."""
        return self.get(name).path

    def static_bundles(self, views_root: str) -> list[Bundle]:
        """Bundles that actually have a *views_root* folder."""
        return [b for b in self._bundles.values() if (b.path / views_root).is_dir()]

    def find_static_bundle(self, short_name: str, views_root: str) -> Bundle | None:
        """Find a static bundle from a case-insensitive short name.

        ``"demo"`` matches ``DemoBundle``.
        """
        wanted = short_name.lower() + "bundle"
        for bundle in self.static_bundles(views_root):
            if bundle.name.lower() == wanted:
                return bundle
        return None
