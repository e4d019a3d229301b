from __future__ import annotations

import argparse

from projectforge import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="projectforge",
        description="Scaffold a new npm package or, for domain names, a full application.",
    )

    parser.add_argument(
        "name",
        nargs="?",
        help="Package name, or a domain name to create an application",
    )
    parser.add_argument(
        "--react",
        action="store_true",
        help="Include React and its test dependencies",
    )
    parser.add_argument(
        "--app",
        action="store_true",
        help="Create a deployable application (implied when name contains a dot)",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--task",
        metavar="TITLE",
        help="Run only the task with this exact title",
    )
    mode.add_argument(
        "--through",
        metavar="TITLE",
        help="Run the task with this title after the tasks it depends on",
    )
    mode.add_argument(
        "--list",
        action="store_true",
        help="List task titles in execution order",
    )
    mode.add_argument(
        "--graph",
        action="store_true",
        help="Show task dependencies",
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings file (default: projectforge.yml in the current directory)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser
