"""Scientific calculator engine: input buffer, safe evaluator, history ledger."""

from .accumulator import ERROR_SENTINEL, ExpressionState, InputAccumulator, InputState
from .calculator import Calculator
from .engine import (PRECISION_CHOICES, AngleMode, CalculationError, EvalErrorKind,
                     EvaluationOptions, EvaluationResult, Failure, Success, evaluate,
                     format_number)
from .export import history_to_csv, history_to_text, write_history_csv
from .history import HISTORY_LIMIT, HistoryLedger, HistoryRecord

__version__ = "1.0.0"

__all__ = [
    "AngleMode", "Calculator", "CalculationError", "ERROR_SENTINEL", "EvalErrorKind",
    "EvaluationOptions", "EvaluationResult", "ExpressionState", "Failure", "HISTORY_LIMIT",
    "HistoryLedger", "HistoryRecord", "InputAccumulator", "InputState", "PRECISION_CHOICES",
    "Success", "evaluate", "format_number", "history_to_csv", "history_to_text",
    "write_history_csv",
]
