"""Keypad input buffer: the expression being typed and what the display shows."""

from __future__ import annotations

import enum
from dataclasses import dataclass

ERROR_SENTINEL = "Error"
ZERO_PLACEHOLDER = "0"

class InputState(enum.Enum):
    EMPTY = "empty"
    BUILDING = "building"
    ERROR = "error"

@dataclass(frozen=True)
class ExpressionState:
    display: str = ZERO_PLACEHOLDER
    expression: str = ""

class InputAccumulator:
    """
    Tokens are concatenated as-is; legality is only checked at evaluation.
    An empty expression shows as '0'. After a failed evaluation the display
    holds 'Error' and the expression is empty until the next token.
    """

    def __init__(self) -> None:
        self.display: str = ZERO_PLACEHOLDER
        self.expression: str = ""

    @property
    def state(self) -> InputState:
        if self.display == ERROR_SENTINEL: return InputState.ERROR
        return InputState.BUILDING if self.expression else InputState.EMPTY

    def snapshot(self) -> ExpressionState:
        return ExpressionState(self.display, self.expression)

    def append(self, token: str) -> ExpressionState:
        if self.display == ERROR_SENTINEL:
            self.clear()
        # a lone '0' is replaced, so '0' then '7' reads '7' and not '07'
        new_expr = token if self.expression == ZERO_PLACEHOLDER else self.expression + token
        self.expression = new_expr
        self.display = new_expr
        return self.snapshot()

    def delete_last(self) -> ExpressionState:
        if self.expression:
            self.expression = self.expression[:-1]
            self.display = self.expression or ZERO_PLACEHOLDER
        return self.snapshot()

    def clear(self) -> ExpressionState:
        self.display = ZERO_PLACEHOLDER
        self.expression = ""
        return self.snapshot()

    def set_display(self, text: str) -> None:
        self.display = text

    def set_expression(self, text: str) -> None:
        if text == ERROR_SENTINEL:
            raise ValueError("the error sentinel cannot become part of the expression")
        self.expression = text

    def fail(self) -> ExpressionState:
        """Show the error sentinel and drop the expression."""
        self.display = ERROR_SENTINEL
        self.expression = ""
        return self.snapshot()
