"""Perch CLI: serve the template browser, list browsable bundles.

Entry point registered as ``perch`` in ``pyproject.toml``::

    [project.scripts]
    perch = "perch.cli:main"
"""

import argparse
import sys


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to perch.toml (default: search the current directory and its parents)",
    )
    parser.add_argument(
        "--bundles-dir",
        default=None,
        help="Directory holding one sub-directory per installed bundle",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``perch`` command."""
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Perch: browse and render a bundle's static templates.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- perch run --------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the browser server")
    _add_config_arguments(run_parser)
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Report template errors in-page and reload on file changes",
    )

    # -- perch bundles ----------------------------------------------------
    bundles_parser = subparsers.add_parser(
        "bundles", help="List installed bundles with static templates"
    )
    _add_config_arguments(bundles_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from perch.cli._run import run_server

        run_server(args)
    elif args.command == "bundles":
        from perch.cli._bundles import list_bundles

        list_bundles(args)
