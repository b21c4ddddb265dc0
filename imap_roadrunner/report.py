"""Result output - CSV rows or human readable lines.

Results go to stdout so CSV output can be piped; diagnostics go through
logging to stderr. Every CSV column also appears in the text line for the
same record.
"""
from __future__ import annotations

import csv
import sys
from typing import Optional, TextIO

from .config import BANNER, CSV_HEADER
from .models import CycleTotals, ResultRecord
from .session import Session
from .utils import human_size


def format_elapsed(seconds: float) -> str:
    return f"{seconds:.6f}"


def csv_row(record: ResultRecord) -> list:
    return [
        record.cycle, record.sequence, record.size,
        format_elapsed(record.elapsed), record.label,
    ]


def text_line(record: ResultRecord) -> str:
    line = (
        f"Cycle {record.cycle} [{record.sequence}] {record.label}"
        f" => IMAP reply => {record.size} bytes ({human_size(record.size)})"
        f" received in {format_elapsed(record.elapsed)} secs"
    )
    if not record.ok:
        line += " [FAILED]"
    return line


def totals_line(label: str, totals: CycleTotals) -> str:
    return (
        f"{label} => {totals.operations} operations, "
        f"{totals.failures} failed, {human_size(totals.size)} "
        f"in {format_elapsed(totals.elapsed)} secs"
    )


class Reporter:
    """Renders records and run progress in CSV or text mode.

    Keeps running totals for the current cycle and the whole run, never
    the records themselves.
    """

    def __init__(self, csv_mode: bool, stream: Optional[TextIO] = None):
        self.csv_mode = csv_mode
        self.stream = stream if stream is not None else sys.stdout
        self.writer = csv.writer(self.stream, lineterminator="\n")
        self.cycle_totals = CycleTotals()
        self.run_totals = CycleTotals()

    def _print(self, text: str) -> None:
        print(text, file=self.stream)

    def start(self) -> None:
        """CSV header or banner, once per run."""
        if self.csv_mode:
            self.writer.writerow(CSV_HEADER)
        else:
            self._print(BANNER)

    def cycle_started(self, cycle: int) -> None:
        self.cycle_totals = CycleTotals()
        if not self.csv_mode:
            self._print(f"Launch cycle {cycle}")

    def mailbox_opened(self, session: Session) -> None:
        if not self.csv_mode:
            self._print(
                f"Server responded with => {session.message_count} "
                f"total messages in {session.mailbox}"
            )

    def report(self, record: ResultRecord) -> None:
        self.cycle_totals.add(record)
        if self.csv_mode:
            self.writer.writerow(csv_row(record))
        else:
            self._print(text_line(record))

    def cycle_finished(self, cycle: int) -> CycleTotals:
        totals = self.cycle_totals
        self.run_totals.merge(totals)
        if not self.csv_mode:
            self._print(totals_line(f"Cycle {cycle} complete", totals))
        return totals

    def finish(self, elapsed: float) -> None:
        """Overall summary and total wall time, text mode only."""
        if self.csv_mode:
            return
        self._print(totals_line("All cycles", self.run_totals))
        self._print(f"Total run time => {elapsed:.3f}s")
