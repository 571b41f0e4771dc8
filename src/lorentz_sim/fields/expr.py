# MIT License (see LICENSE)
"""
Safe compiler for user-supplied scalar field expressions.

An expression such as ``"sin(t) * exp(-(x**2 + y**2))"`` is parsed with
Python's ``ast`` module in ``eval`` mode. Every node is checked against a
small whitelist and turned into a tree of closures, which is then evaluated
per call. No source text is ever passed to eval/exec.

Grammar:
    - numeric literals
    - names: x, y, z, t, PI
    - binary: + - * / % **      unary: + -
    - calls: sin cos tan sqrt abs pow sign exp min max tanh

Anything else raises FieldCompileError at compile time.
"""
from __future__ import annotations

import ast
import math
from dataclasses import dataclass
from typing import Callable

from ..errors import FieldCompileError, NumericDomainError

# Evaluator node: takes (x, y, z, t) and returns a float.
Node = Callable[[float, float, float, float], float]

VARIABLES = ("x", "y", "z", "t")

CONSTANTS: dict[str, float] = {
    "PI": math.pi,
}


def _sign(a: float) -> float:
    if a > 0:
        return 1.0
    if a < 0:
        return -1.0
    return a  # keeps 0.0, -0.0 and NaN as they are


# name -> (function, min_args, max_args); None means variadic
FUNCTIONS: dict[str, tuple[Callable[..., float], int, int | None]] = {
    "sin": (math.sin, 1, 1),
    "cos": (math.cos, 1, 1),
    "tan": (math.tan, 1, 1),
    "sqrt": (math.sqrt, 1, 1),
    "abs": (abs, 1, 1),
    "pow": (math.pow, 2, 2),
    "sign": (_sign, 1, 1),
    "exp": (math.exp, 1, 1),
    "min": (lambda *a: min(a), 1, None),
    "max": (lambda *a: max(a), 1, None),
    "tanh": (math.tanh, 1, 1),
}

_BINARY = {
    ast.Add: lambda a, b: a + b,
    ast.Sub: lambda a, b: a - b,
    ast.Mult: lambda a, b: a * b,
    ast.Div: lambda a, b: a / b,
    ast.Mod: lambda a, b: math.fmod(a, b),
    ast.Pow: lambda a, b: math.pow(a, b),
}

_UNARY = {
    ast.UAdd: lambda a: +a,
    ast.USub: lambda a: -a,
}


@dataclass(frozen=True)
class CompiledExpression:
    """
    A compiled scalar expression f(x, y, z, t).

    Attributes:
        source: The original expression text.
    """
    source: str
    _root: Node

    def __call__(self, x: float, y: float, z: float, t: float) -> float:
        """
        Evaluate the expression at a point.

        Raises:
            NumericDomainError: On division by zero, overflow, a math
                domain error (e.g. sqrt of a negative) or a non-finite result.
        """
        try:
            value = float(self._root(float(x), float(y), float(z), float(t)))
        except (ZeroDivisionError, OverflowError, ValueError) as exc:
            raise NumericDomainError(
                f"{self.source!r} failed at (x={x}, y={y}, z={z}, t={t}): {exc}"
            ) from exc
        if not math.isfinite(value):
            raise NumericDomainError(
                f"{self.source!r} is not finite at (x={x}, y={y}, z={z}, t={t}): {value}"
            )
        return value


class _Builder:
    """Walks a parsed expression tree and emits closures."""

    def __init__(self, source: str):
        self.source = source

    def fail(self, message: str) -> FieldCompileError:
        return FieldCompileError(self.source, message)

    def build(self, node: ast.AST) -> Node:
        if isinstance(node, ast.Expression):
            return self.build(node.body)

        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
                raise self.fail(f"unsupported literal {node.value!r}")
            try:
                value = float(node.value)
            except OverflowError as exc:
                raise FieldCompileError(self.source, "numeric literal is too large",
                                        cause=exc) from exc
            if not math.isfinite(value):
                raise self.fail(f"numeric literal {node.value!r} is not finite")
            return lambda x, y, z, t: value

        if isinstance(node, ast.Name):
            return self._name(node.id)

        if isinstance(node, ast.BinOp):
            if isinstance(node.op, ast.BitXor):
                raise self.fail("'^' is not exponentiation; use '**' or pow(a, b)")
            op = _BINARY.get(type(node.op))
            if op is None:
                raise self.fail(f"unsupported operator {type(node.op).__name__}")
            left, right = self.build(node.left), self.build(node.right)
            return lambda x, y, z, t: op(left(x, y, z, t), right(x, y, z, t))

        if isinstance(node, ast.UnaryOp):
            op = _UNARY.get(type(node.op))
            if op is None:
                raise self.fail(f"unsupported unary operator {type(node.op).__name__}")
            operand = self.build(node.operand)
            return lambda x, y, z, t: op(operand(x, y, z, t))

        if isinstance(node, ast.Call):
            return self._call(node)

        raise self.fail(f"unsupported syntax {type(node).__name__}")

    def _name(self, name: str) -> Node:
        if name == "x":
            return lambda x, y, z, t: x
        if name == "y":
            return lambda x, y, z, t: y
        if name == "z":
            return lambda x, y, z, t: z
        if name == "t":
            return lambda x, y, z, t: t
        if name in CONSTANTS:
            value = CONSTANTS[name]
            return lambda x, y, z, t: value
        raise self.fail(f"unknown name {name!r}")

    def _call(self, node: ast.Call) -> Node:
        if not isinstance(node.func, ast.Name):
            raise self.fail("only plain function calls are allowed")
        name = node.func.id
        if name not in FUNCTIONS:
            raise self.fail(f"unknown function {name!r}")
        if node.keywords:
            raise self.fail(f"{name}() takes no keyword arguments")

        fn, lo, hi = FUNCTIONS[name]
        n = len(node.args)
        if n < lo or (hi is not None and n > hi):
            expected = str(lo) if lo == hi else f"at least {lo}"
            raise self.fail(f"{name}() expects {expected} argument(s), got {n}")

        args = [self.build(a) for a in node.args]
        if len(args) == 1:
            (a0,) = args
            return lambda x, y, z, t: fn(a0(x, y, z, t))
        if len(args) == 2:
            a0, a1 = args
            return lambda x, y, z, t: fn(a0(x, y, z, t), a1(x, y, z, t))
        return lambda x, y, z, t: fn(*[a(x, y, z, t) for a in args])


def compile_expression(source: str) -> CompiledExpression:
    """
    Compile a field expression into a callable f(x, y, z, t).

    Args:
        source: Expression text, e.g. ``"0.5 * cos(t)"``.

    Returns:
        The compiled expression.

    Raises:
        FieldCompileError: On syntax errors or any non-whitelisted construct.
    """
    if not isinstance(source, str):
        raise FieldCompileError(repr(source), "expression must be a string")
    text = source.strip()
    if not text:
        raise FieldCompileError(source, "expression is empty")
    try:
        tree = ast.parse(text, mode="eval")
        root = _Builder(source).build(tree)
    except SyntaxError as exc:
        raise FieldCompileError(source, f"syntax error: {exc.msg}", cause=exc) from exc
    except RecursionError as exc:
        raise FieldCompileError(source, "expression is nested too deeply", cause=exc) from exc
    return CompiledExpression(source=source, _root=root)
