"""Utility functions."""
from __future__ import annotations

import logging
import time
from typing import List, Sequence, Tuple, Union

ResponseData = List[Union[bytes, Tuple[bytes, bytes], None]]


def start_timer() -> float:
    return time.perf_counter()


def stop_timer(start: float) -> float:
    return time.perf_counter() - start


def human_size(n: int) -> str:
    """Convert bytes to a compact human-readable string."""
    units = ("B", "KB", "MB", "GB", "TB")
    size = float(n)
    for u in units:
        if size < 1024 or u == "TB":
            return f"{size:.1f}{u}"
        size /= 1024
    return f"{size:.1f}TB"


def make_range_set(count: int) -> str:
    """IMAP sequence set covering messages 1..count, empty when count is 0."""
    if count <= 0:
        return ""
    return f"1:{count}"


def quote_string(value: str) -> str:
    """Render *value* as an IMAP quoted string."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def quote_mailbox(name: str) -> str:
    """Quote a mailbox name only when it is not a plain atom."""
    if name and not any(c in name for c in ' (){%*"\\]'):
        return name
    return quote_string(name)


def first_item_literals(data: ResponseData) -> bytes:
    """Concatenate the literals of the first item of a FETCH response.

    imaplib yields a ``(prefix, literal)`` tuple for every literal of an
    item and a plain bytes element for the line that closes the item.
    """
    buf = bytearray()
    for part in data:
        if part is None:
            continue
        if not isinstance(part, tuple):
            break
        buf += part[1]
    return bytes(buf)


def search_payload_size(data: Sequence[Union[bytes, None]]) -> int:
    """Byte size of the first untagged SEARCH payload."""
    if not data or not isinstance(data[0], bytes):
        return 0
    return len(data[0])


def logger_level(verbose: bool) -> int:
    return logging.DEBUG if verbose else logging.INFO


def setup_logger(verbose: bool) -> logging.Logger:
    """Configure root logger and return named logger."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)5s %(message)s",
        level=logger_level(verbose),
    )
    return logging.getLogger("imap-roadrunner")
