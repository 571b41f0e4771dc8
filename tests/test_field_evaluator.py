import numpy as np
import pytest

from lorentz_sim.errors import FieldCompileError
from lorentz_sim.fields import DEFAULT_EXPRESSIONS, FieldEvaluator


def test_defaults_are_uniform_bz():
    fields = FieldEvaluator()
    assert fields.expressions == DEFAULT_EXPRESSIONS
    r = np.array([1.0, 2.0, 3.0])
    assert np.array_equal(fields.electric(r, 0.0), [0.0, 0.0, 0.0])
    assert np.array_equal(fields.magnetic(r, 0.0), [0.0, 0.0, 1.0])


def test_vector_evaluation_uses_position_and_time():
    fields = FieldEvaluator({"Ex": "x", "Ey": "-y", "Ez": "t", "Bx": "z", "Bz": "0"})
    E = fields.electric(np.array([1.0, 2.0, 3.0]), 4.0)
    B = fields.magnetic(np.array([1.0, 2.0, 3.0]), 4.0)
    assert np.array_equal(E, [1.0, -2.0, 4.0])
    assert np.array_equal(B, [3.0, 0.0, 0.0])


def test_compile_failure_keeps_previous_function():
    """
    A rejected edit must not corrupt the evaluator: the previously valid
    expression keeps returning the same values.
    """
    fields = FieldEvaluator({"Ex": "2*x"})
    assert fields.evaluate("Ex", 3.0, 0.0, 0.0, 0.0) == 6.0

    with pytest.raises(FieldCompileError) as info:
        fields.set_expression("Ex", "2*(x")
    assert info.value.component == "Ex"
    assert info.value.expression == "2*(x"

    assert fields.evaluate("Ex", 3.0, 0.0, 0.0, 0.0) == 6.0
    assert fields.expressions["Ex"] == "2*x"

    fields.set_expression("Ex", "2*x")
    assert fields.evaluate("Ex", 3.0, 0.0, 0.0, 0.0) == 6.0


def test_batch_compile_is_all_or_nothing():
    fields = FieldEvaluator({"Ey": "1", "Bz": "2"})
    with pytest.raises(FieldCompileError) as info:
        fields.compile({"Ey": "5", "Bz": "bogus(x)"})
    assert info.value.component == "Bz"
    assert fields.evaluate("Ey", 0, 0, 0, 0) == 1.0
    assert fields.evaluate("Bz", 0, 0, 0, 0) == 2.0


def test_unknown_component_is_rejected():
    fields = FieldEvaluator()
    with pytest.raises(FieldCompileError):
        fields.set_expression("Qx", "1")
    with pytest.raises(KeyError):
        fields.evaluate("Qx", 0, 0, 0, 0)


def test_singular_at_origin_is_accepted_with_warning(caplog):
    fields = FieldEvaluator()
    with caplog.at_level("WARNING"):
        fields.set_expression("Ex", "1/x")
    assert "not finite at the origin" in caplog.text
    assert fields.evaluate("Ex", 2.0, 0, 0, 0) == 0.5
