"""
Expression evaluator

- Keypad text (×, ÷, ^, π, e) is tokenized and rewritten to Python syntax
- Safe AST evaluator (no eval/exec): floats, + - * / **, unary +/-,
  sin cos tan log ln sqrt, constants pi and e
- Degree mode converts trig arguments at each call node, so nesting works
- Results are rounded half-up to a fixed number of decimals
"""

from __future__ import annotations

import ast
import enum
import logging
import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Callable, Dict, List, Union

logger = logging.getLogger(__name__)

Number = Union[int, float]

PRECISION_CHOICES = (2, 4, 6, 8, 10)
DEFAULT_PRECISION = 6
MAX_EXPR_LEN = 2000

class AngleMode(enum.Enum):
    RADIANS = "rad"
    DEGREES = "deg"

class EvalErrorKind(enum.Enum):
    MALFORMED_EXPRESSION = "malformed_expression"
    NON_FINITE_RESULT = "non_finite_result"

class CalculationError(Exception):
    def __init__(self, kind: EvalErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind

def _malformed(message: str) -> CalculationError:
    return CalculationError(EvalErrorKind.MALFORMED_EXPRESSION, message)

def _non_finite(message: str) -> CalculationError:
    return CalculationError(EvalErrorKind.NON_FINITE_RESULT, message)

@dataclass
class EvaluationOptions:
    precision: int = DEFAULT_PRECISION
    angle_mode: AngleMode = AngleMode.RADIANS

    def validate(self) -> None:
        if not isinstance(self.angle_mode, AngleMode):
            raise ValueError("angle_mode must be AngleMode.RADIANS or AngleMode.DEGREES")
        if self.precision not in PRECISION_CHOICES:
            raise ValueError(f"precision must be one of {PRECISION_CHOICES}")

@dataclass(frozen=True)
class Success:
    value: float
    ok = True

@dataclass(frozen=True)
class Failure:
    kind: EvalErrorKind
    message: str = ""
    ok = False

EvaluationResult = Union[Success, Failure]

# ============================= Rewriting ====================================

_TOKEN_RE = re.compile(r"""
    (?P<number>\d+\.?\d*|\.\d+)
  | (?P<name>[A-Za-z_]+)
  | (?P<power>\*\*)
  | (?P<space>\s+)
  | (?P<other>.)
""", re.VERBOSE)

_SYMBOLS = {"×": "*", "÷": "/", "^": "**", "π": "pi"}
_LEADING_ZEROS = re.compile(r"^0+(?=\d)")

def tokenize(expr: str) -> List[str]:
    """Split keypad text into tokens, mapping display symbols to Python operators."""
    tokens: List[str] = []
    for m in _TOKEN_RE.finditer(expr):
        if m.lastgroup == "space": continue
        text = m.group()
        if m.lastgroup == "number":
            text = _LEADING_ZEROS.sub("", text)   # '007' reads as decimal 7
        tokens.append(_SYMBOLS.get(text, text))
    return tokens

def rewrite(expr: str) -> str:
    # Tokens are space separated so '2π' or '2e' stay juxtaposed values, a syntax error.
    return " ".join(tokenize(expr))

# ============================= Evaluation ===================================

class SafeEvaluator:
    _BINOPS: Dict[type, Callable[[float, float], float]] = {
        ast.Add: lambda l, r: l + r,
        ast.Sub: lambda l, r: l - r,
        ast.Mult: lambda l, r: l * r,
        ast.Div: lambda l, r: l / r,
        ast.Pow: lambda l, r: l ** r,
    }
    _UNARYOPS: Dict[type, Callable[[float], float]] = {
        ast.UAdd: lambda v: +v,
        ast.USub: lambda v: -v,
    }
    _CONSTANTS: Dict[str, float] = {"pi": math.pi, "e": math.e}
    _TRIG = {"sin": math.sin, "cos": math.cos, "tan": math.tan}

    def __init__(self, options: EvaluationOptions) -> None:
        self.options = options
        self.functions: Dict[str, Callable[[float], float]] = {
            "log": math.log10, "ln": math.log, "sqrt": math.sqrt,
        }
        for name, func in self._TRIG.items():
            self.functions[name] = self._angle_aware(func)

    def _angle_aware(self, func: Callable[[float], float]) -> Callable[[float], float]:
        def call(x: float) -> float:
            if self.options.angle_mode is AngleMode.DEGREES: x = math.radians(x)
            return func(x)
        return call

    def eval_expr(self, expr: str) -> float:
        if not expr or not expr.strip():
            raise _malformed("Empty expression.")
        if len(expr) > MAX_EXPR_LEN:
            raise _malformed(f"Expression too long (limit: {MAX_EXPR_LEN} chars).")
        try:
            node = ast.parse(rewrite(expr), mode="eval")
        except SyntaxError as exc:
            raise _malformed(f"Syntax error: {exc.msg}") from None
        except ValueError as exc:
            raise _malformed(str(exc)) from None
        value = self._eval(node.body)
        if math.isnan(value) or math.isinf(value):
            raise _non_finite("Result is not a finite number.")
        return value

    def _eval(self, node: ast.AST) -> float:
        if isinstance(node, ast.Constant):
            if type(node.value) not in (int, float):
                raise _malformed("Only numeric literals are allowed.")
            try:
                return float(node.value)
            except OverflowError:
                raise _non_finite("Number too large.") from None

        if isinstance(node, ast.Name):
            if node.id in self._CONSTANTS: return self._CONSTANTS[node.id]
            raise _malformed(f"Unknown name: {node.id}.")

        if isinstance(node, ast.UnaryOp) and type(node.op) in self._UNARYOPS:
            return self._UNARYOPS[type(node.op)](self._eval(node.operand))

        if isinstance(node, ast.BinOp) and type(node.op) in self._BINOPS:
            l, r = self._eval(node.left), self._eval(node.right)
            try:
                value = self._BINOPS[type(node.op)](l, r)
            except ZeroDivisionError: raise _non_finite("Division by zero.") from None
            except OverflowError:     raise _non_finite("Overflow during computation.") from None
            # float ** float goes complex for a negative base and fractional exponent
            if isinstance(value, complex): raise _non_finite("Complex result.")
            return value

        if isinstance(node, ast.Call):
            name = node.func.id if isinstance(node.func, ast.Name) else None
            func = self.functions.get(name) if name else None
            if func is None:
                raise _malformed("Only sin, cos, tan, log, ln and sqrt can be called.")
            if node.keywords or len(node.args) != 1:
                raise _malformed(f"{name} takes exactly one argument.")
            arg = self._eval(node.args[0])
            try:
                return func(arg)
            except (ValueError, OverflowError) as exc:
                raise _non_finite(f"{name} domain error: {exc}.") from None

        raise _malformed("Unsupported or unsafe expression construct.")

def round_to_precision(value: float, precision: int) -> float:
    """Round half-up on the exact binary value; magnitudes of 1e21 and beyond are returned as is."""
    if abs(value) >= 1e21:
        return value
    with localcontext() as ctx:
        ctx.prec = 40
        quantum = Decimal(1).scaleb(-precision)
        rounded = float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
    return 0.0 if rounded == 0.0 else rounded

def evaluate(expr: str, options: EvaluationOptions) -> EvaluationResult:
    """Evaluate keypad text. Never raises for bad input; failures come back as Failure."""
    try:
        value = SafeEvaluator(options).eval_expr(expr)
    except CalculationError as exc:
        logger.debug("evaluation failed for %r: %s (%s)", expr, exc, exc.kind.value)
        return Failure(exc.kind, str(exc))
    except RecursionError:
        logger.debug("evaluation failed for %r: nesting too deep", expr)
        return Failure(EvalErrorKind.MALFORMED_EXPRESSION, "Expression nested too deeply.")
    result = round_to_precision(value, options.precision)
    logger.debug("evaluated %r -> %r", expr, result)
    return Success(result)

def format_number(value: Number) -> str:
    """Shortest round-trip digits, always positional so a result can be typed back in."""
    x = float(value)
    if math.isnan(x): return "NaN"
    if math.isinf(x): return "Infinity" if x > 0 else "-Infinity"
    if x == 0: return "0"
    text = format(Decimal(repr(x)), "f")
    if "." in text: text = text.rstrip("0").rstrip(".")
    return text
