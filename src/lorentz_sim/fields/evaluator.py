# MIT License (see LICENSE)
"""
Field evaluator: the six user-defined field components E(x,y,z,t), B(x,y,z,t).

Expressions are compiled once per edit and evaluated many times per frame
(once per particle per RK4 stage). Installing new expressions is atomic:
every requested component is compiled and sanity-checked first, and only
then are the compiled functions swapped in. A failed compile leaves the
previously installed functions untouched.
"""
from __future__ import annotations

import logging
from typing import Mapping

import numpy as np

from ..constants import FIELD_COMPONENTS
from ..errors import FieldCompileError, NumericDomainError
from .expr import CompiledExpression, compile_expression

logger = logging.getLogger(__name__)

DEFAULT_EXPRESSIONS: dict[str, str] = {
    "Ex": "0.0", "Ey": "0.0", "Ez": "0.0",
    "Bx": "0.0", "By": "0.0", "Bz": "1.0",
}


class FieldEvaluator:
    """
    Holds the compiled E and B field component functions.

    Example:
        fields = FieldEvaluator({"Ey": "0.5", "Bz": "1"})
        fields.evaluate("Bz", 0.0, 0.0, 0.0, 0.0)   # -> 1.0
        fields.set_expression("Ey", "sin(")          # raises FieldCompileError
        fields.evaluate("Ey", 0.0, 0.0, 0.0, 0.0)   # still 0.5
    """

    def __init__(self, expressions: Mapping[str, str] | None = None):
        self._functions: dict[str, CompiledExpression] = {}
        self.compile({**DEFAULT_EXPRESSIONS, **dict(expressions or {})})

    @property
    def expressions(self) -> dict[str, str]:
        """Source text of the currently installed expressions."""
        return {name: fn.source for name, fn in self._functions.items()}

    def compile(self, expressions: Mapping[str, str]) -> None:
        """
        Compile and install field expressions atomically.

        Components missing from ``expressions`` keep their current function.

        Args:
            expressions: Mapping of component name ("Ex" .. "Bz") to source.

        Raises:
            FieldCompileError: If any expression is invalid. Nothing is
                installed in that case.
        """
        compiled: dict[str, CompiledExpression] = {}
        for name, source in expressions.items():
            if name not in FIELD_COMPONENTS:
                raise FieldCompileError(str(source), f"unknown field component {name!r}",
                                        component=name)
            try:
                fn = compile_expression(source)
            except FieldCompileError as exc:
                raise FieldCompileError(exc.expression, exc.message,
                                        component=name, cause=exc.cause) from exc
            self._sanity_check(name, fn)
            compiled[name] = fn

        merged = {**self._functions, **compiled}
        missing = [c for c in FIELD_COMPONENTS if c not in merged]
        if missing:
            raise FieldCompileError("", f"no expression for {', '.join(missing)}",
                                    component=missing[0])
        self._functions = merged

    def set_expression(self, component: str, source: str) -> None:
        """Compile and install a single component. See compile()."""
        self.compile({component: source})

    def evaluate(self, component: str, x: float, y: float, z: float, t: float) -> float:
        """
        Evaluate one field component at a point in space and time.

        Raises:
            KeyError: Unknown component name.
            NumericDomainError: The expression is not finite at this point.
        """
        return self._functions[component](x, y, z, t)

    def electric(self, r: np.ndarray, t: float) -> np.ndarray:
        """Electric field vector E(r, t)."""
        f = self._functions
        x, y, z = r[0], r[1], r[2]
        return np.array([f["Ex"](x, y, z, t), f["Ey"](x, y, z, t), f["Ez"](x, y, z, t)],
                        dtype=np.float64)

    def magnetic(self, r: np.ndarray, t: float) -> np.ndarray:
        """Magnetic field vector B(r, t)."""
        f = self._functions
        x, y, z = r[0], r[1], r[2]
        return np.array([f["Bx"](x, y, z, t), f["By"](x, y, z, t), f["Bz"](x, y, z, t)],
                        dtype=np.float64)

    @staticmethod
    def _sanity_check(name: str, fn: CompiledExpression) -> None:
        # Structural problems are caught by the parser; an expression that is
        # only singular at the origin (1/x) is still a valid field.
        try:
            fn(0.0, 0.0, 0.0, 0.0)
        except NumericDomainError as exc:
            logger.warning(f"Field {name} is not finite at the origin: {exc}")
        except (TypeError, RecursionError) as exc:
            raise FieldCompileError(fn.source, f"evaluation failed: {exc}",
                                    component=name, cause=exc) from exc
