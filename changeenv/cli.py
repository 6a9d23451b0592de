"""Command line entry point for changeenv."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from changeenv import __version__
from changeenv.config import load_env_file, load_known_envs
from changeenv.configure import run_configure
from changeenv.envpath import switch
from changeenv.exceptions import ChangeEnvError, ConfigureError
from changeenv.logging import log_switch

_LOGGER = logging.getLogger("changeenv.cli")

_PROG = "changeenv"
_DESCRIPTION = "Switch to the same relative directory in another environment tree."
_EPILOG = """\
examples:
  changeenv prod
  changeenv configure --create

To change shell directories directly, wrap with a shell function:
  cenv() { cd "$(changeenv "$1")"; }
"""

_EXIT_OK = 0
_EXIT_FAILURE = 1
_EXIT_USAGE = 2


def _configure_logging() -> None:
    log_level = os.getenv("CHANGEENV_LOG_LEVEL", "WARNING")
    level = getattr(logging, log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=_PROG,
        description=_DESCRIPTION,
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "target",
        nargs="*",
        help="Name of the environment to switch to; further arguments are ignored",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _build_configure_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=f"{_PROG} configure",
        description=(
            "Print the helper shell function and PATH export snippet, or append them "
            "directly to your shell configuration file."
        ),
    )
    parser.add_argument(
        "--create",
        action="store_true",
        help="append the shell helper to the detected configuration file",
    )
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    return parser


def _usage_error(parser: argparse.ArgumentParser, message: str) -> int:
    sys.stderr.write(f"{message}\n")
    parser.print_usage(sys.stderr)
    return _EXIT_USAGE


def _report_failure(exc: Exception) -> int:
    sys.stderr.write(f"{_PROG}: {exc}\n")
    return _EXIT_FAILURE


def _working_directory() -> str:
    """Return the working directory, keeping the shell's logical ``$PWD`` spelling."""

    cwd = os.getcwd()
    pwd = os.environ.get("PWD", "")
    if pwd and os.path.isabs(pwd):
        try:
            if os.path.samefile(pwd, cwd):
                return pwd
        except OSError:
            pass
    return cwd


def _run_switch(argv: List[str]) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.target:
        return _usage_error(parser, "target environment argument is required")
    target_env = args.target[0].strip()
    if not target_env:
        return _usage_error(parser, "target environment must not be empty")

    try:
        cwd = _working_directory()
    except OSError as exc:
        return _report_failure(ChangeEnvError(f"determine current directory: {exc}"))

    known_envs = load_known_envs()
    _LOGGER.debug("Known environments: %s", ", ".join(sorted(known_envs)))

    try:
        target_path = switch(cwd, target_env, known_envs)
    except ChangeEnvError as exc:
        _LOGGER.info("Switch from %s to %s failed: %s", cwd, target_env, exc)
        return _report_failure(exc)

    try:
        log_switch({"from": cwd, "to": target_path, "target_env": target_env})
    except OSError as exc:
        _LOGGER.warning("Could not record switch history: %s", exc)

    sys.stdout.write(f"{target_path}\n")
    return _EXIT_OK


def _run_configure(argv: List[str]) -> int:
    parser = _build_configure_parser()
    args = parser.parse_args(argv)
    if args.extra:
        return _usage_error(parser, "configure does not accept positional arguments")

    try:
        run_configure(args.create)
    except ConfigureError as exc:
        return _report_failure(exc)
    return _EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the changeenv CLI."""

    load_env_file()
    _configure_logging()

    arguments = list(sys.argv[1:] if argv is None else argv)
    if arguments and arguments[0] == "configure":
        return _run_configure(arguments[1:])
    return _run_switch(arguments)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
