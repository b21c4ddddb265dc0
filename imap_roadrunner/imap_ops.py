"""IMAP operations - connection, login and selection."""
from __future__ import annotations

import imaplib
import logging
import ssl

from imapclient.imap_utf7 import encode as encode_utf7

from .errors import ConnectError, EmptyMailboxError
from .models import Target
from .utils import quote_mailbox


def make_ssl_context(verify: bool) -> ssl.SSLContext:
    """TLS context; verification is off unless asked for."""
    if verify:
        return ssl.create_default_context()
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def imap_dial(target: Target) -> imaplib.IMAP4:
    """Open a plain or implicit-TLS connection to the target."""
    host, port = target.address
    try:
        if target.tls:
            return imaplib.IMAP4_SSL(
                host=host, port=port,
                ssl_context=make_ssl_context(target.verify_tls),
                timeout=target.timeout,
            )
        return imaplib.IMAP4(host=host, port=port, timeout=target.timeout)
    except (imaplib.IMAP4.error, OSError) as err:
        raise ConnectError(f"{host}:{port}: {err}") from err


def imap_login(
    imap: imaplib.IMAP4, user: str, password: str, log: logging.Logger
) -> None:
    """Attempt LOGIN; a refusal leaves the connection unauthenticated.

    A server may close the session with BYE when it refuses the login,
    which imaplib reports as an abort. Only an abort without any BYE from
    the server means the transport was lost.
    """
    try:
        imap.login(user, password)
    except imaplib.IMAP4.abort as err:
        if "BYE" not in imap.untagged_responses:
            raise ConnectError(f"connection lost during login: {err}") \
                from err
        log.debug("LOGIN refused with BYE for %s: %s", user, err)
    except imaplib.IMAP4.error as err:
        log.debug("LOGIN refused for %s: %s", user, err)
    except OSError as err:
        raise ConnectError(f"connection lost during login: {err}") from err


def encode_mailbox(name: str) -> str:
    """Mailbox name as sent on the wire, in modified UTF-7."""
    return quote_mailbox(encode_utf7(name).decode("ascii"))


def imap_select(imap: imaplib.IMAP4, mailbox: str, readonly: bool) -> int:
    """Select mailbox and return its message count."""
    try:
        typ, data = imap.select(encode_mailbox(mailbox), readonly=readonly)
    except (imaplib.IMAP4.abort, OSError) as err:
        raise ConnectError(f"connection lost during select: {err}") from err
    except imaplib.IMAP4.error as err:
        raise EmptyMailboxError(f"select {mailbox!r} failed: {err}") from err
    if typ != "OK":
        raise EmptyMailboxError(f"select {mailbox!r} failed: {data}")
    try:
        return int(data[0])
    except (IndexError, TypeError, ValueError) as err:
        raise EmptyMailboxError(
            f"no message count for {mailbox!r}: {data}"
        ) from err


def logout_imap(imap: imaplib.IMAP4) -> None:
    """Logout gently; ignore errors."""
    try:
        imap.logout()
    except (imaplib.IMAP4.error, OSError):
        pass
