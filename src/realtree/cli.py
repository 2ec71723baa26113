"""Line-oriented REPL for the RealTree calculator."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Iterable
from typing import Final, TextIO

from .parser import parse_line
from .session import CommandResult, Session

logger = logging.getLogger(__name__)

BANNER: Final[str] = "RealCalc expression evaluator, type ^C to exit, help for help"
_DEFAULT_LOG_LEVEL: Final[str] = os.environ.get("REALTREE_LOG_LEVEL", "WARNING").upper()


def _report_result(result: CommandResult, *, out: TextIO, err: TextIO) -> None:
    if result.help_text is not None:
        print(result.help_text, file=out)

    if result.outcome is not None:
        if result.outcome.ok:
            print(f"result: {result.outcome.display()}", file=out)
        else:
            print(result.outcome.display(), file=err)

    for listing in result.listings:
        print(
            f"regs[{listing.slot.index}] = '{listing.slot.name}' = {listing.text} = {listing.outcome.display()}",
            file=out,
        )


def execute_line(session: Session, line: str, *, out: TextIO, err: TextIO) -> bool:
    """Run every command on ``line``; return False once ``exit`` was seen."""
    messages: list[str] = []
    try:
        commands = parse_line(line, skipped=messages)
    except SyntaxError as exc:
        commands = ()
        messages.append(str(exc))
    for message in messages:
        print(message, file=err)

    for command in commands:
        result = session.execute(command)
        _report_result(result, out=out, err=err)
        if result.exit_requested:
            print("RealTree will exit", file=err)
            return False
    return True


def run_repl(lines: Iterable[str], session: Session | None = None, *, out: TextIO, err: TextIO) -> int:
    if session is None:
        session = Session()
    for line in lines:
        if not execute_line(session, line, out=out, err=err):
            logger.debug("exit requested")
            break
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="realtree", description=__doc__)
    parser.add_argument(
        "file",
        nargs="?",
        help="read commands from this file instead of stdin",
    )
    parser.add_argument(
        "--log-level",
        default=_DEFAULT_LOG_LEVEL,
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="diagnostic logging level (default: $REALTREE_LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="do not print the banner",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")

    if not args.quiet:
        print(BANNER)

    if args.file is None:
        try:
            return run_repl(sys.stdin, out=sys.stdout, err=sys.stderr)
        except KeyboardInterrupt:
            return 0

    try:
        handle = open(args.file, encoding="utf-8")
    except OSError as exc:
        print(f"Cannot read {args.file}: {exc.strerror}", file=sys.stderr)
        return 2
    with handle:
        return run_repl(handle, out=sys.stdout, err=sys.stderr)
