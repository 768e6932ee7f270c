import threading

import pytest

from scicalc import (AngleMode, Calculator, EvalErrorKind, EvaluationOptions, Failure,
                     InputState, Success)

from .conftest import type_in


def test_defaults(calc):
    assert calc.display == "0"
    assert calc.expression == ""
    assert calc.precision == 6
    assert calc.angle_mode is AngleMode.RADIANS
    assert calc.history == ()


def test_evaluate_publishes_result_and_records_history(calc):
    type_in(calc, "2", "+", "3", "×", "4")
    outcome = calc.evaluate_current()
    assert outcome == Success(14.0)
    assert calc.display == "14"
    assert calc.expression == "14"
    assert [(r.expression, r.result) for r in calc.history] == [("2+3×4", "14")]


def test_chained_calculation(calc):
    type_in(calc, "1", "÷", "4")
    calc.evaluate_current()
    type_in(calc, "×", "8")
    assert calc.expression == "0.25×8"
    calc.evaluate_current()
    assert calc.display == "2"
    assert [r.expression for r in calc.history] == ["0.25×8", "1÷4"]


def test_division_by_zero_enters_error_state(calc):
    type_in(calc, "1", "÷", "0")
    outcome = calc.evaluate_current()
    assert isinstance(outcome, Failure)
    assert outcome.kind is EvalErrorKind.NON_FINITE_RESULT
    assert calc.display == "Error"
    assert calc.expression == ""
    assert calc.state is InputState.ERROR
    assert calc.history == ()


def test_malformed_input_enters_error_state(calc):
    type_in(calc, "sin(", "×", ")")
    outcome = calc.evaluate_current()
    assert outcome.kind is EvalErrorKind.MALFORMED_EXPRESSION
    assert calc.display == "Error"


def test_next_token_after_error_starts_fresh(calc):
    type_in(calc, "1", "÷", "0")
    calc.evaluate_current()
    calc.append_token("7")
    assert calc.display == "7"
    assert calc.expression == "7"
    assert calc.state is InputState.BUILDING


def test_evaluate_on_empty_is_a_no_op(calc):
    assert calc.evaluate_current() is None
    assert calc.display == "0"
    assert calc.history == ()


def test_zero_result_is_replaced_by_next_digit(calc):
    type_in(calc, "5", "-", "5")
    calc.evaluate_current()
    assert calc.expression == "0"
    calc.append_token("7")
    assert calc.expression == "7"


def test_delete_and_clear(calc):
    type_in(calc, "1", "2")
    calc.delete_last()
    assert calc.expression == "1"
    calc.clear()
    calc.delete_last()
    assert (calc.display, calc.expression) == ("0", "")


def test_precision_setting(calc):
    calc.set_precision(2)
    type_in(calc, "1", "÷", "3")
    calc.evaluate_current()
    assert calc.display == "0.33"
    calc.clear()
    calc.set_precision(8)
    type_in(calc, "1", "÷", "3")
    calc.evaluate_current()
    assert calc.display == "0.33333333"


@pytest.mark.parametrize("bad", [0, 3, 12, "6", None])
def test_precision_outside_choices_is_rejected(calc, bad):
    with pytest.raises(ValueError):
        calc.set_precision(bad)
    assert calc.precision == 6


def test_angle_mode(calc):
    calc.set_angle_mode(AngleMode.DEGREES)
    type_in(calc, "sin(", "9", "0", ")")
    calc.evaluate_current()
    assert calc.display == "1"
    assert calc.toggle_angle_mode() is AngleMode.RADIANS
    assert calc.toggle_angle_mode() is AngleMode.DEGREES
    with pytest.raises(ValueError):
        calc.set_angle_mode("deg")


def test_settings_keep_each_other(calc):
    calc.set_precision(10)
    calc.set_angle_mode(AngleMode.DEGREES)
    assert calc.options == EvaluationOptions(precision=10, angle_mode=AngleMode.DEGREES)


def test_invalid_initial_options():
    with pytest.raises(ValueError):
        Calculator(EvaluationOptions(precision=5))


def test_clear_history(calc):
    type_in(calc, "1", "+", "1")
    calc.evaluate_current()
    calc.clear_history()
    assert calc.history == ()
    assert calc.display == "2"


def test_recall_appends_expression(calc):
    type_in(calc, "2", "^", "3")
    calc.evaluate_current()
    record = calc.history[0]
    calc.clear()
    calc.recall(record.id)
    assert calc.expression == "2^3"
    calc.recall(record.id)
    assert calc.expression == "2^32^3"
    assert calc.recall("missing") is None


def test_history_bound_through_session(calc):
    for i in range(25):
        calc.clear()
        type_in(calc, str(i), "+", "1")
        calc.evaluate_current()
    assert len(calc.history) == 20
    assert calc.history[0].expression == "24+1"


def test_concurrent_appends_are_serialised(calc):
    def worker():
        for _ in range(250):
            calc.append_token("1")

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert calc.expression == "1" * 1000


def test_oversized_number_shows_error(calc):
    type_in(calc, "9" * 400)
    outcome = calc.evaluate_current()
    assert outcome.kind is EvalErrorKind.NON_FINITE_RESULT
    assert calc.display == "Error"
    assert calc.expression == ""


def test_chaining_a_large_result(calc):
    type_in(calc, "1", "0", "^", "2", "1")
    calc.evaluate_current()
    assert calc.display == "1000000000000000000000"
    type_in(calc, "÷", "1", "0")
    calc.evaluate_current()
    assert calc.display == "100000000000000000000"


def test_concurrent_setters_keep_both_settings(calc):
    def set_precisions():
        for _ in range(200):
            for n in (2, 4, 6, 8, 10):
                calc.set_precision(n)

    def set_modes():
        for _ in range(200):
            calc.set_angle_mode(AngleMode.RADIANS)
            calc.set_angle_mode(AngleMode.DEGREES)

    threads = [threading.Thread(target=set_precisions), threading.Thread(target=set_modes)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert calc.options == EvaluationOptions(precision=10, angle_mode=AngleMode.DEGREES)
