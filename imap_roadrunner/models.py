"""Benchmark data model."""
from __future__ import annotations

import dataclasses
from typing import Optional, Tuple

from .config import PLAIN_PORT, TLS_PORT
from .utils import quote_string

FETCH_ONE = "fetch-one"
FETCH_RANGE = "fetch-range"
FETCH_HEADERS = "fetch-headers"
SEARCH = "search"


@dataclasses.dataclass(frozen=True)
class Target:
    """Where and how to connect.

    :ivar host: IMAP server host name
    :ivar user: login name
    :ivar password: login password
    :ivar mailbox: mailbox selected for every cycle
    :ivar tls: connect over implicit TLS instead of plain text
    :ivar port: explicit port, defaults to 143 or 993 depending on *tls*
    :ivar readonly: select with EXAMINE semantics
    :ivar verify_tls: verify the server certificate and host name
    :ivar timeout: socket timeout in seconds, ``None`` for blocking sockets
    """
    host: str
    user: str
    password: str = dataclasses.field(repr=False)
    mailbox: str
    tls: bool = False
    port: Optional[int] = None
    readonly: bool = True
    verify_tls: bool = False
    timeout: Optional[float] = None

    @property
    def address(self) -> Tuple[str, int]:
        if self.port is not None:
            return self.host, self.port
        return self.host, TLS_PORT if self.tls else PLAIN_PORT


@dataclasses.dataclass(frozen=True)
class OperationSpec:
    """One operation of the benchmark battery.

    *sequence* is an IMAP sequence set such as ``"3"`` or ``"1:12"``; it is
    empty when the mailbox holds no messages.
    """
    kind: str
    sequence: str
    items: Tuple[str, ...] = ()
    field: str = ""
    term: str = ""

    @property
    def is_search(self) -> bool:
        return self.kind == SEARCH

    @property
    def label(self) -> str:
        if self.is_search:
            return f"SEARCH {self.field} {quote_string(self.term)}"
        return f"FETCH {self.sequence} ({' '.join(self.items)})"


@dataclasses.dataclass(frozen=True)
class ResultRecord:
    cycle: int
    sequence: str
    size: int
    elapsed: float
    label: str
    ok: bool = True


@dataclasses.dataclass
class CycleTotals:
    """Running sums over the records of a cycle (or of a whole run)."""
    operations: int = 0
    failures: int = 0
    size: int = 0
    elapsed: float = 0.0

    def add(self, record: ResultRecord) -> None:
        self.operations += 1
        self.size += record.size
        self.elapsed += record.elapsed
        if not record.ok:
            self.failures += 1

    def merge(self, other: "CycleTotals") -> None:
        self.operations += other.operations
        self.failures += other.failures
        self.size += other.size
        self.elapsed += other.elapsed
