"""Main entry point."""
from __future__ import annotations

import imaplib
import sys
from typing import List, Optional

from .cli import build_parser, make_target, validate_args
from .config import EXIT_CONNECT, EXIT_OK, EXIT_USAGE
from .errors import (
    AuthError, ConnectError, EmptyMailboxError, RoadrunnerError, SearchError,
)
from .report import Reporter
from .utils import setup_logger, start_timer, stop_timer
from .workflow import run_benchmark


def report_fatal(err: RoadrunnerError, folder: str, log) -> int:
    """Log a fatal error with a message specific to its kind."""
    if isinstance(err, AuthError):
        log.error("Authentication failed: %s", err)
    elif isinstance(err, ConnectError):
        log.error("Could not connect to IMAP: %s", err)
    elif isinstance(err, EmptyMailboxError):
        log.error(
            "Folder %s is not usable (%s). Please check the mailbox exists",
            folder, err,
        )
    elif isinstance(err, SearchError):
        log.error("Search failed: %s", err)
    else:
        log.error("%s", err)
    return err.exit_code


def run(argv: Optional[List[str]] = None) -> int:
    """Main execution flow."""
    parser = build_parser()
    args = parser.parse_args(argv)
    log = setup_logger(args.verbose)

    problem = validate_args(args)
    if problem:
        print(problem, file=sys.stderr)
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    target = make_target(args)
    reporter = Reporter(args.csv)
    start = start_timer()
    reporter.start()
    try:
        run_benchmark(
            target, args.cycle, reporter, log,
            args.subject_term, args.body_term,
        )
    except RoadrunnerError as err:
        return report_fatal(err, target.mailbox, log)
    except (imaplib.IMAP4.abort, OSError) as err:
        log.error("Connection to %s lost: %s", target.host, err)
        return EXIT_CONNECT
    reporter.finish(stop_timer(start))
    return EXIT_OK


def main() -> None:
    """Entry point."""
    raise SystemExit(run())


if __name__ == "__main__":
    main()
