"""Authenticated IMAP session handle and its lifecycle."""
from __future__ import annotations

import imaplib
import logging

from .errors import AuthError
from .imap_ops import imap_dial, imap_login, imap_select, logout_imap
from .models import Target

UNAUTHENTICATED = "unauthenticated"
AUTHENTICATED = "authenticated"
SELECTED = "selected"
CLOSED = "closed"

_IMAPLIB_STATES = {
    "NONAUTH": UNAUTHENTICATED,
    "AUTH": AUTHENTICATED,
    "SELECTED": SELECTED,
    "LOGOUT": CLOSED,
}


def session_state(imap: imaplib.IMAP4) -> str:
    return _IMAPLIB_STATES.get(imap.state, CLOSED)


class Session:
    """One live connection with a selected mailbox.

    Owned by a single cycle, which must hand it to :func:`close_session`.
    """

    def __init__(
        self, imap: imaplib.IMAP4, mailbox: str, message_count: int
    ) -> None:
        self.imap = imap
        self.mailbox = mailbox
        self.message_count = message_count
        self.closed = False

    @property
    def state(self) -> str:
        if self.closed:
            return CLOSED
        return session_state(self.imap)

    def __repr__(self) -> str:
        return (
            f"<Session {self.mailbox!r} messages={self.message_count} "
            f"state={self.state}>"
        )


def _authenticate(
    imap: imaplib.IMAP4, target: Target, log: logging.Logger
) -> None:
    if session_state(imap) == UNAUTHENTICATED:
        imap_login(imap, target.user, target.password, log)
    if session_state(imap) != AUTHENTICATED:
        log.debug("Authentication failed")
        raise AuthError(f"Cannot authenticate: {target.user}")


def connect(target: Target, log: logging.Logger) -> Session:
    """Dial, authenticate and select the target mailbox.

    Raises ConnectError, AuthError or EmptyMailboxError. Nothing is retried.
    A connection that fails past the dial is logged out before the error
    leaves this function.
    """
    host, port = target.address
    log.debug(
        "Connecting to %s:%d over %s", host, port,
        "TLS" if target.tls else "plain text",
    )
    imap = imap_dial(target)
    try:
        _authenticate(imap, target, log)
        count = imap_select(imap, target.mailbox, target.readonly)
    except Exception:
        logout_imap(imap)
        raise
    log.debug("Selected %r with %d message(s)", target.mailbox, count)
    return Session(imap, target.mailbox, count)


def close_session(session: Session, log: logging.Logger) -> None:
    """Logout, always log intent."""
    log.debug("Logging out of %r", session.mailbox)
    logout_imap(session.imap)
    session.closed = True
