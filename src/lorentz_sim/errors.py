# MIT License (see LICENSE)
"""
Exception hierarchy for the simulation core.

Every error raised on purpose by this package derives from LorentzSimError
and also from the closest builtin, so callers can catch either.

    FieldCompileError    - a field expression could not be compiled.
                           Recoverable: the previous functions stay active.
    ConfigurationError   - a physical or particle parameter is invalid.
    DivisionByZeroError  - the shared rest mass is zero.
    NumericDomainError   - a NaN/inf appeared in a field value or a step.

The force model and integrator never catch these; only the simulation loop
does, because only it can pause and keep the last committed state.
"""
from __future__ import annotations


class LorentzSimError(Exception):
    """Base class for all errors raised by lorentz_sim."""


class FieldCompileError(LorentzSimError, ValueError):
    """
    A field expression failed to parse or failed its sanity evaluation.

    Attributes:
        component: Field component name ("Ex" .. "Bz"), or None when the
            expression was compiled on its own.
        expression: The offending source text.
        message: Why compilation failed.
        cause: The underlying exception, if any.
    """

    def __init__(self, expression: str, message: str,
                 component: str | None = None, cause: BaseException | None = None):
        self.component = component
        self.message = message
        self.expression = expression
        self.cause = cause
        where = f"{component} = " if component else ""
        super().__init__(f"cannot compile field expression {where}{expression!r}: {message}")


class ConfigurationError(LorentzSimError, ValueError):
    """A configuration value is outside its valid range."""


class DivisionByZeroError(LorentzSimError, ZeroDivisionError):
    """Rest mass is zero, so acceleration F/m is undefined."""


class NumericDomainError(LorentzSimError, ArithmeticError):
    """A non-finite number was produced by a field or an integration step."""
