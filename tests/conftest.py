import datetime as _dt
import itertools

import pytest

from scicalc import Calculator, HistoryLedger


@pytest.fixture
def clock():
    """Clock that ticks one second per call, starting at a fixed instant."""
    start = _dt.datetime(2026, 10, 19, 15, 4, 5)
    ticks = itertools.count()
    return lambda: start + _dt.timedelta(seconds=next(ticks))


@pytest.fixture
def ledger(clock):
    return HistoryLedger(clock=clock)


@pytest.fixture
def calc(ledger):
    return Calculator(history=ledger)


def type_in(calculator, *tokens):
    for token in tokens:
        calculator.append_token(token)
    return calculator
