"""Exceptions raised while benchmarking."""
from .config import EXIT_AUTH, EXIT_CONNECT, EXIT_MAILBOX, EXIT_SEARCH


class RoadrunnerError(Exception):
    """Base class for fatal benchmark errors."""

    exit_code = 1


class ConnectError(RoadrunnerError):
    """The transport to the IMAP server could not be established."""

    exit_code = EXIT_CONNECT


class AuthError(RoadrunnerError):
    """The server did not reach the authenticated state after login."""

    exit_code = EXIT_AUTH


class EmptyMailboxError(RoadrunnerError):
    """The mailbox could not be selected or reported no message count."""

    exit_code = EXIT_MAILBOX


class SearchError(RoadrunnerError):
    """A SEARCH command could not be dispatched."""

    exit_code = EXIT_SEARCH


class OperationError(Exception):
    """A single FETCH or SEARCH was refused by the server.

    Never fatal: the runner logs it and emits a zero-size record.
    """
