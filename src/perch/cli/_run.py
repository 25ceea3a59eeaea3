"""``perch run``: build the app and serve it with pounce."""

import argparse
import sys

from perch.cli._config import config_from_args
from perch.errors import ConfigurationError


def run_server(args: argparse.Namespace) -> None:
    """Start the perch server.

    CLI flags override values from ``perch.toml``.
    """
    from perch.app import App

    config = config_from_args(args)
    try:
        app = App(config)
    except (OSError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(f"Perch serving on http://{config.host}:{config.port}{config.url_prefix}/")
    app.run()
