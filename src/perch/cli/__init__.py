"""Perch CLI — element contract validation and route listing.

Entry point registered as ``perch`` in ``pyproject.toml``::

    [project.scripts]
    perch = "perch.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``perch`` command."""
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Perch: server-rendered UI elements driven by controller events.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- perch check ------------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate element templates and routes")
    check_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )

    # -- perch routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List controllers, actions and events")
    routes_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "check":
        from perch.cli._check import run_check

        run_check(args)
    elif args.command == "routes":
        from perch.cli._routes import run_routes

        run_routes(args)
