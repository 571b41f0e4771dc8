# MIT License (see LICENSE)
"""
User-defined electric and magnetic fields.

    - compile_expression: safe compiler for one scalar expression f(x,y,z,t).
    - FieldEvaluator: the six compiled components Ex..Bz with atomic updates.
"""
from .expr import CompiledExpression, compile_expression
from .evaluator import DEFAULT_EXPRESSIONS, FieldEvaluator

__all__ = [
    "CompiledExpression",
    "compile_expression",
    "DEFAULT_EXPRESSIONS",
    "FieldEvaluator",
]
