"""Bounded, newest-first ledger of successful calculations."""

from __future__ import annotations

import itertools
import logging
import datetime as _dt
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20
TIMESTAMP_FORMAT = "%c"

@dataclass(frozen=True)
class HistoryRecord:
    id: str
    expression: str
    result: str
    timestamp: str

    def __str__(self) -> str:
        return f"{self.expression} = {self.result}"

class HistoryLedger:
    def __init__(self, capacity: int = HISTORY_LIMIT,
                 clock: Callable[[], _dt.datetime] = _dt.datetime.now) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._clock = clock
        self._seq = itertools.count(1)
        # appendleft on a bounded deque drops the oldest entry off the right end
        self._records: Deque[HistoryRecord] = deque(maxlen=capacity)

    def _next_id(self, now: _dt.datetime) -> str:
        return f"{int(now.timestamp() * 1000)}-{next(self._seq)}"

    def add(self, expression: str, result: str) -> HistoryRecord:
        now = self._clock()
        record = HistoryRecord(id=self._next_id(now), expression=expression, result=result,
                               timestamp=now.strftime(TIMESTAMP_FORMAT))
        if len(self._records) == self.capacity:
            logger.debug("history full, dropping %s", self._records[-1].id)
        self._records.appendleft(record)
        return record

    def clear(self) -> None:
        self._records.clear()

    def list(self) -> Tuple[HistoryRecord, ...]:
        return tuple(self._records)

    def get(self, record_id: str) -> Optional[HistoryRecord]:
        for record in self._records:
            if record.id == record_id: return record
        return None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[HistoryRecord]:
        return iter(self.list())
