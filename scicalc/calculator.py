"""
Calculator session

Ties the input buffer, the evaluator and the history ledger together. This is
the object a front end talks to: it reads display/expression/history and
calls the mutating operations in response to key presses.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional, Tuple

from .accumulator import ExpressionState, InputAccumulator, InputState
from .engine import (AngleMode, EvaluationOptions, EvaluationResult, Success,
                     evaluate, format_number)
from .history import HistoryLedger, HistoryRecord

logger = logging.getLogger(__name__)

class Calculator:
    def __init__(self, options: Optional[EvaluationOptions] = None,
                 history: Optional[HistoryLedger] = None) -> None:
        self.options = options or EvaluationOptions(); self.options.validate()
        self.ledger = history if history is not None else HistoryLedger()
        self._input = InputAccumulator()
        # One lock for the buffer and the ledger; a front end may read from another thread.
        self._lock = threading.RLock()

    # Read-only state
    @property
    def display(self) -> str: return self._input.display
    @property
    def expression(self) -> str: return self._input.expression
    @property
    def state(self) -> InputState: return self._input.state
    @property
    def history(self) -> Tuple[HistoryRecord, ...]: return self.ledger.list()
    @property
    def precision(self) -> int: return self.options.precision
    @property
    def angle_mode(self) -> AngleMode: return self.options.angle_mode

    def snapshot(self) -> ExpressionState:
        with self._lock: return self._input.snapshot()

    # Input
    def append_token(self, token: str) -> ExpressionState:
        with self._lock: return self._input.append(token)

    def delete_last(self) -> ExpressionState:
        with self._lock: return self._input.delete_last()

    def clear(self) -> ExpressionState:
        with self._lock: return self._input.clear()

    def recall(self, record_id: str) -> Optional[ExpressionState]:
        """Append a past expression to the buffer; None when the record is gone."""
        with self._lock:
            record = self.ledger.get(record_id)
            if record is None: return None
            return self._input.append(record.expression)

    # Evaluation
    def evaluate_current(self) -> Optional[EvaluationResult]:
        with self._lock:
            expr = self._input.expression
            if not expr: return None
            outcome = evaluate(expr, self.options)
            if isinstance(outcome, Success):
                result = format_number(outcome.value)
                self._input.set_display(result)
                self.ledger.add(expr, result)
                # the result becomes the start of the next calculation
                self._input.set_expression(result)
            else:
                self._input.fail()
            return outcome

    # Settings
    def set_precision(self, value: int) -> None:
        with self._lock:
            candidate = EvaluationOptions(precision=value, angle_mode=self.options.angle_mode)
            candidate.validate()
            self.options = candidate
        logger.info("precision set to %d decimals", value)

    def set_angle_mode(self, mode: AngleMode) -> None:
        with self._lock:
            candidate = EvaluationOptions(precision=self.options.precision, angle_mode=mode)
            candidate.validate()
            self.options = candidate
        logger.info("angle mode set to %s", mode.value)

    def toggle_angle_mode(self) -> AngleMode:
        with self._lock:
            mode = AngleMode.DEGREES if self.options.angle_mode is AngleMode.RADIANS else AngleMode.RADIANS
            self.set_angle_mode(mode)
            return mode

    def clear_history(self) -> None:
        with self._lock: self.ledger.clear()
