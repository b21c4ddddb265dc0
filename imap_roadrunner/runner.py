"""Execute and time a single benchmark operation."""
from __future__ import annotations

import imaplib
import logging
from typing import Tuple

from .errors import OperationError, SearchError
from .models import OperationSpec, ResultRecord
from .session import Session
from .utils import (
    ResponseData, first_item_literals, quote_string, search_payload_size,
    start_timer, stop_timer,
)


def _fetch(imap: imaplib.IMAP4, spec: OperationSpec) -> ResponseData:
    """FETCH; NO and BAD replies become OperationError."""
    parts = f"({' '.join(spec.items)})"
    try:
        typ, data = imap.fetch(spec.sequence, parts)
    except imaplib.IMAP4.abort:
        raise
    except imaplib.IMAP4.error as err:
        raise OperationError(str(err)) from err
    if typ != "OK":
        raise OperationError(f"{typ} {data}")
    return data


def _send_search(
    imap: imaplib.IMAP4, field: str, term: str
) -> Tuple[str, ResponseData]:
    """ASCII terms go quoted, others as a UTF-8 literal with CHARSET."""
    if term.isascii():
        return imap.search(None, field, quote_string(term))
    imap.literal = term.encode("utf-8")
    return imap.search("UTF-8", field)


def _search(imap: imaplib.IMAP4, spec: OperationSpec) -> ResponseData:
    """SEARCH; only a NO reply is recoverable."""
    try:
        typ, data = _send_search(imap, spec.field, spec.term)
    except (imaplib.IMAP4.error, OSError) as err:
        raise SearchError(f"{spec.label} could not be dispatched: {err}") \
            from err
    if typ != "OK":
        raise OperationError(f"{typ} {data}")
    return data


def timed_call(
    session: Session, spec: OperationSpec
) -> Tuple[ResponseData, float]:
    """Issue the IMAP command for *spec*; time only the round trip."""
    call = _search if spec.is_search else _fetch
    start = start_timer()
    data = call(session.imap, spec)
    return data, stop_timer(start)


def response_size(spec: OperationSpec, data: ResponseData) -> int:
    if spec.is_search:
        return search_payload_size(data)
    return len(first_item_literals(data))


def run_operation(
    session: Session, spec: OperationSpec, cycle: int, log: logging.Logger
) -> ResultRecord:
    """Run one operation and reduce it to a ResultRecord.

    A refused FETCH or SEARCH is logged and yields a zero-size record.
    SearchError, IMAP4.abort and OSError propagate.
    """
    log.debug("Cycle %d: %s", cycle, spec.label)
    start = start_timer()
    try:
        data, elapsed = timed_call(session, spec)
    except OperationError as err:
        log.warning(
            "Message %s could not be retrieved: %s (%s)",
            spec.sequence or "(empty)", spec.label, err,
        )
        return ResultRecord(
            cycle, spec.sequence, 0, stop_timer(start), spec.label, ok=False
        )
    return ResultRecord(
        cycle, spec.sequence, response_size(spec, data), elapsed, spec.label
    )
