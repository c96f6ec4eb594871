"""Command-line interface for generating a pre-signed release URL.

Uses cookies saved by the login step and prints the release URL to standard
out. Exit status is 0 on success, 1 when the URL could not be resolved and 2
on usage errors.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from foundry_release_url import __version__
from foundry_release_url.config import get_settings
from foundry_release_url.errors import ReleaseURLError
from foundry_release_url.logging_config import configure_logging, parse_level
from foundry_release_url.resolver import resolve

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def _version_arg(value: str) -> str:
    value = value.strip()
    if not value:
        raise argparse.ArgumentTypeError("version must not be empty")
    return value


def _level_arg(value: str) -> int:
    try:
        return parse_level(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for the CLI."""
    p = argparse.ArgumentParser(
        prog="foundry-release-url",
        description=(
            "Generate a Foundry Virtual Tabletop pre-signed release URL using "
            "cookies from the login step. The URL is printed to standard out."
        ),
    )
    p.add_argument("cookiejar", help="cookie store written by the login step")
    p.add_argument("version", type=_version_arg, help="Foundry version, e.g. 11.305")
    p.add_argument(
        "--log-level",
        type=_level_arg,
        default="info",
        metavar="LEVEL",
        help='one of "debug", "info", "warn" and "error" (default: info)',
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point: parse args, configure logging, resolve and print."""
    args = build_parser().parse_args(argv)

    try:
        s = get_settings()
    except RuntimeError as e:
        configure_logging(level=args.log_level)
        log.error("%s", e)
        return EXIT_FAILURE

    configure_logging(s.log_file, level=args.log_level)

    try:
        url = resolve(
            args.cookiejar,
            args.version,
            timeout=s.http_timeout,
            save_cookies=s.save_cookies,
        )
    except ReleaseURLError as e:
        log.error("%s", e)
        return EXIT_FAILURE

    sys.stdout.write(url)
    sys.stdout.flush()
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
