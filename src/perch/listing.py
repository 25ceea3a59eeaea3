"""Directory listings for folders without an index template."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ListingEntry:
    """A listed item. ``url`` is relative to the listed directory."""

    name: str
    url: str


@dataclass(frozen=True, slots=True)
class DirectoryListing:
    """Sub-directories and template files of a directory, sorted by name."""

    directories: tuple[ListingEntry, ...]
    files: tuple[ListingEntry, ...]


def list_directory(directory: Path, *, source_extension: str = ".twig") -> DirectoryListing:
    """List the direct children of *directory* worth browsing.

    Only template files are listed, and their URL drops the template
    extension so the link renders the page. Hidden entries are skipped.
    """
    directories: list[ListingEntry] = []
    files: list[ListingEntry] = []
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        name = entry.name
        if name.startswith("."):
            continue
        if entry.is_dir():
            directories.append(ListingEntry(name=name, url=name + "/"))
        elif entry.is_file() and name.endswith(source_extension):
            files.append(ListingEntry(name=name, url=name.removesuffix(source_extension)))
    return DirectoryListing(directories=tuple(directories), files=tuple(files))
