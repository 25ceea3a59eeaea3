"""``perch bundles``: list installed bundles that have static templates.

Prints one row per bundle with its name, the slug it is configured under
(``-`` if none), and its document root.
"""

import argparse
import sys

from perch.bundles import BundleRegistry
from perch.cli._config import config_from_args


def list_bundles(args: argparse.Namespace) -> None:
    """Print the browsable bundles as a table."""
    config = config_from_args(args)
    if config.bundles_dir is None:
        print("Error: no bundles directory configured (use --bundles-dir)", file=sys.stderr)
        raise SystemExit(1)

    try:
        registry = BundleRegistry.from_directory(config.bundles_dir)
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    slugs = {cfg.name: slug for slug, cfg in config.bundles.items()}
    rows: list[tuple[str, str, str]] = [
        (bundle.name, slugs.get(bundle.name, "-"), config.default_root)
        for bundle in registry.static_bundles(config.default_root)
    ]
    if not rows:
        print("No bundles with static templates found.")
        return

    max_name = max(4, *(len(r[0]) for r in rows))
    max_slug = max(4, *(len(r[1]) for r in rows))
    fmt = f"{{:<{max_name}}}  {{:<{max_slug}}}  {{}}"
    print(fmt.format("NAME", "SLUG", "ROOT"))
    print("-" * min(max_name + max_slug + 4 + len(config.default_root), 80))
    for name, slug, root in rows:
        print(fmt.format(name, slug, root))
