"""
History export

CSV layout (kept byte-exact for files already shared by users):

    Expression,Result,Timestamp
    "2+2","4","10/19/2026, 3:04:05 PM"

Rows are joined by '\\n' with no trailing newline. Fields are wrapped in
double quotes without escaping.
"""

from __future__ import annotations

import logging
import datetime as _dt
from pathlib import Path
from typing import Iterable, Optional, Union

from .history import HistoryRecord

logger = logging.getLogger(__name__)

CSV_HEADER = "Expression,Result,Timestamp"
TEXT_EXPORT_LIMIT = 500

def history_to_csv(records: Iterable[HistoryRecord]) -> str:
    rows = [f'"{r.expression}","{r.result}","{r.timestamp}"' for r in records]
    return CSV_HEADER + "\n" + "\n".join(rows)

def history_to_text(records: Iterable[HistoryRecord], limit: int = TEXT_EXPORT_LIMIT) -> str:
    text = "\n".join(f"{r.expression} = {r.result} ({r.timestamp})" for r in records)
    return text[:limit] + "..." if len(text) > limit else text

def export_filename(now: Optional[_dt.datetime] = None) -> str:
    now = now or _dt.datetime.now()
    return f"calculator-history-{int(now.timestamp() * 1000)}.csv"

def write_history_csv(records: Iterable[HistoryRecord], directory: Union[str, Path],
                      now: Optional[_dt.datetime] = None) -> Path:
    records = list(records)
    if not records:
        raise ValueError("No history to export.")
    path = Path(directory) / export_filename(now)
    # newline="" keeps '\n' row separators on every platform
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(history_to_csv(records))
    logger.info("exported %d history records to %s", len(records), path)
    return path
