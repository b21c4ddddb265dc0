"""Command-line argument parsing.

Options use the single dash spelling (``-user``); every option also
accepts a double dash alias (``--user``).
"""
from __future__ import annotations

import argparse
from typing import Optional

from .config import (
    DEFAULT_BODY_TERM, DEFAULT_CYCLES, DEFAULT_FOLDER, DEFAULT_SUBJECT_TERM,
)
from .models import Target

REQUIRED = (("user", "User"), ("password", "Password"), ("server", "Server"))


def add_auth_args(parser: argparse.ArgumentParser) -> None:
    """Add authentication arguments."""
    parser.add_argument(
        "-user", "--user", default="",
        help="Username to authenticate (required)",
    )
    parser.add_argument(
        "-pass", "--pass", dest="password", default="",
        help="Password to authenticate (required)",
    )


def add_server_args(parser: argparse.ArgumentParser) -> None:
    """Add server connection arguments."""
    parser.add_argument(
        "-server", "--server", default="",
        help="Remote IMAP server (required)",
    )
    parser.add_argument(
        "-port", "--port", type=int, default=None,
        help="Server port (default: 143, or 993 with -tls)",
    )
    parser.add_argument(
        "-tls", "--tls", action="store_true",
        help="Connect via TLS/SSL",
    )
    parser.add_argument(
        "-verify-tls", "--verify-tls", action="store_true",
        help="Verify the server certificate (off by default)",
    )
    parser.add_argument(
        "-timeout", "--timeout", type=float, default=None,
        help="Socket timeout in seconds (default: none)",
    )


def add_benchmark_args(parser: argparse.ArgumentParser) -> None:
    """Add mailbox and benchmark arguments."""
    parser.add_argument(
        "-folder", "--folder", default=DEFAULT_FOLDER,
        help="Folder to select",
    )
    parser.add_argument(
        "-readwrite", "--readwrite", action="store_true",
        help="Select the folder read-write instead of read-only",
    )
    parser.add_argument(
        "-cycle", "--cycle", type=int, default=DEFAULT_CYCLES,
        help="Number of times to cycle",
    )
    parser.add_argument(
        "-subject-term", "--subject-term", default=DEFAULT_SUBJECT_TERM,
        help="Term for the SUBJECT search",
    )
    parser.add_argument(
        "-body-term", "--body-term", default=DEFAULT_BODY_TERM,
        help="Term for the BODY search",
    )


def add_output_args(parser: argparse.ArgumentParser) -> None:
    """Add output and logging arguments."""
    parser.add_argument(
        "-csv", "--csv", action="store_true", help="CSV output",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose logs"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build argument parser."""
    parser = argparse.ArgumentParser(
        prog="imap-roadrunner",
        description="Benchmark IMAP fetch and search latency.",
    )
    add_auth_args(parser)
    add_server_args(parser)
    add_benchmark_args(parser)
    add_output_args(parser)
    return parser


def validate_args(args: argparse.Namespace) -> Optional[str]:
    """Return a problem description, or None when args are usable."""
    for attr, name in REQUIRED:
        if not getattr(args, attr):
            return f"{name} missing from arguments"
        if attr != "server" and not getattr(args, attr).isascii():
            return f"{name} must be ASCII for IMAP LOGIN"
    if args.cycle < 1:
        return f"Cycle count must be at least 1, got {args.cycle}"
    return None


def make_target(args: argparse.Namespace) -> Target:
    return Target(
        host=args.server,
        user=args.user,
        password=args.password,
        mailbox=args.folder,
        tls=args.tls,
        port=args.port,
        readonly=not args.readwrite,
        verify_tls=args.verify_tls,
        timeout=args.timeout,
    )
