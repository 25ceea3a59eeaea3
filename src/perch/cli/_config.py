"""Shared option handling: ``perch.toml`` plus command-line overrides."""

import argparse
import logging
import sys
from pathlib import Path

from perch.config import AppConfig, load_config
from perch.errors import ConfigurationError


def config_from_args(args: argparse.Namespace) -> AppConfig:
    """Load the configuration, apply CLI overrides, and set up logging.

    Exits with status 1 when the configuration cannot be loaded.
    """
    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    config = config.with_overrides(
        bundles_dir=args.bundles_dir,
        host=getattr(args, "host", None),
        port=getattr(args, "port", None),
        debug=getattr(args, "debug", None),
    )
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return config
