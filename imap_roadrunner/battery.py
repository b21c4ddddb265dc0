"""The fixed, ordered set of operations run every cycle."""
from __future__ import annotations

from typing import List

from .config import (
    DEFAULT_BODY_TERM, DEFAULT_SUBJECT_TERM, FULL_FETCH_ITEMS,
    HEADER_FETCH_ITEMS,
)
from .models import (
    FETCH_HEADERS, FETCH_ONE, FETCH_RANGE, SEARCH, OperationSpec,
)
from .utils import make_range_set


def fetch_each(message_count: int) -> List[OperationSpec]:
    """One full FETCH per message id."""
    return [
        OperationSpec(FETCH_ONE, str(i), FULL_FETCH_ITEMS)
        for i in range(1, message_count + 1)
    ]


def build_battery(
    message_count: int,
    subject_term: str = DEFAULT_SUBJECT_TERM,
    body_term: str = DEFAULT_BODY_TERM,
) -> List[OperationSpec]:
    """Per-message fetches, range fetch, header fetch, two searches.

    Always ``message_count + 4`` operations; with an empty mailbox the range
    operations run against an empty sequence set.
    """
    seq = make_range_set(message_count)
    return fetch_each(message_count) + [
        OperationSpec(FETCH_RANGE, seq, FULL_FETCH_ITEMS),
        OperationSpec(FETCH_HEADERS, seq, HEADER_FETCH_ITEMS),
        OperationSpec(SEARCH, seq, field="SUBJECT", term=subject_term),
        OperationSpec(SEARCH, seq, field="BODY", term=body_term),
    ]
