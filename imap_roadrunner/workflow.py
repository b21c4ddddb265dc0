"""High-level benchmark orchestration."""
from __future__ import annotations

import logging
from typing import Iterator, List

from .battery import build_battery
from .models import CycleTotals, OperationSpec, ResultRecord, Target
from .report import Reporter
from .runner import run_operation
from .session import Session, close_session, connect


def iter_records(
    session: Session, cycle: int, battery: List[OperationSpec],
    log: logging.Logger,
) -> Iterator[ResultRecord]:
    """Run the battery in order, one record per operation."""
    for spec in battery:
        yield run_operation(session, spec, cycle, log)


def run_cycle(
    target: Target, cycle: int, reporter: Reporter, log: logging.Logger,
    subject_term: str, body_term: str,
) -> CycleTotals:
    """Connect, run the whole battery, logout.

    Connection failures propagate. Once connected, logout happens whatever
    the operations do.
    """
    reporter.cycle_started(cycle)
    session = connect(target, log)
    try:
        reporter.mailbox_opened(session)
        battery = build_battery(
            session.message_count, subject_term, body_term
        )
        for record in iter_records(session, cycle, battery, log):
            reporter.report(record)
    finally:
        close_session(session, log)
    return reporter.cycle_finished(cycle)


def run_benchmark(
    target: Target, cycles: int, reporter: Reporter, log: logging.Logger,
    subject_term: str, body_term: str,
) -> CycleTotals:
    """Run cycles 1..cycles sequentially; stop at the first fatal error."""
    for cycle in range(1, cycles + 1):
        run_cycle(target, cycle, reporter, log, subject_term, body_term)
    return reporter.run_totals
