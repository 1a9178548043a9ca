"""
Unit tests for the basic activation functions.

Tests the eleven activation functions in nevo.activations.basic_activations
and their textual parsing.
"""

import dataclasses
import math

import pytest
from nevo.activations.basic_activations import (
    ActivationFunction,
    Sigmoid,
    Tanh,
    Sinus,
    Step,
    Sign,
    Random,
    ReLU,
    SELU,
    SiLU,
    Linear,
    Identity,
    activations,
    activation_codes,
    parse_activation,
    parse_activation_list,
)


class TestActivationsDictionary:
    """Test that all activations are accessible via the activations dictionary."""

    def test_all_names_in_dictionary(self):
        """Test that all eleven activation names are in the dictionary."""
        expected_names = ['sigmoid', 'tanh', 'sinus', 'step', 'sign', 'random',
                          'relu', 'selu', 'silu', 'linear', 'identity']
        assert sorted(activations) == sorted(expected_names)

    def test_factories_build_activation_functions(self):
        """Test that every factory builds an ActivationFunction with default parameters."""
        for name, factory in activations.items():
            assert isinstance(factory(), ActivationFunction), name

    def test_every_class_has_a_code(self):
        """Test that every activation class has a 3-letter code."""
        for factory in activations.values():
            code = activation_codes[type(factory())]
            assert len(code) == 3


class TestSigmoid:

    def test_zero(self):
        assert Sigmoid()(0.0) == 0.5

    def test_default_slope(self):
        assert Sigmoid().slope == 4.9
        assert Sigmoid()(1.0) == pytest.approx(1.0 / (1.0 + math.exp(-4.9)))

    def test_custom_slope(self):
        assert Sigmoid(1.0)(2.0) == pytest.approx(1.0 / (1.0 + math.exp(-2.0)))

    def test_saturation(self):
        assert Sigmoid()(1000.0) == pytest.approx(1.0)
        assert Sigmoid()(-1000.0) == pytest.approx(0.0)


class TestTanh:

    def test_zero(self):
        assert Tanh()(0.0) == pytest.approx(0.0)

    def test_default_slope_is_hyperbolic_tangent(self):
        """With slope 2 the function equals tanh."""
        for x in (-2.0, -0.5, 0.3, 1.7):
            assert Tanh()(x) == pytest.approx(math.tanh(x))

    def test_range(self):
        assert Tanh()(1000.0) == pytest.approx(1.0)
        assert Tanh()(-1000.0) == pytest.approx(-1.0)


class TestSinus:

    def test_default(self):
        assert Sinus()(math.pi / 2) == pytest.approx(1.0)

    def test_compression(self):
        assert Sinus(2.0)(math.pi / 4) == pytest.approx(1.0)

    @pytest.mark.filterwarnings("error")
    def test_infinite_input_does_not_warn(self):
        assert math.isnan(Sinus()(math.inf))
        assert math.isnan(Sinus(0.5)(-math.inf))


class TestStep:

    def test_at_threshold(self):
        assert Step()(0.0) == 1.0

    def test_below_threshold(self):
        assert Step()(-0.1) == 0.0

    def test_custom_threshold(self):
        assert Step(1.0)(0.5) == 0.0
        assert Step(1.0)(1.5) == 1.0


class TestSign:

    def test_values(self):
        assert Sign()(3.0) == 1.0
        assert Sign()(-3.0) == -1.0
        assert Sign()(0.0) == 0.0


class TestRandom:

    def test_not_deterministic(self):
        assert Random.deterministic is False
        assert Random().deterministic is False

    def test_range(self):
        activation = Random()
        for _ in range(100):
            assert -1.0 <= activation(0.0) < 1.0


class TestReLU:

    def test_values(self):
        assert ReLU()(-1.0) == 0.0
        assert ReLU()(0.0) == 0.0
        assert ReLU()(2.0) == 2.0


class TestSELU:

    def test_positive(self):
        assert SELU()(1.0) == pytest.approx(SELU.LAMBDA)

    def test_zero(self):
        assert SELU()(0.0) == pytest.approx(0.0)

    def test_negative_limit(self):
        assert SELU()(-1000.0) == pytest.approx(-SELU.LAMBDA * SELU.ALPHA)


class TestSiLU:

    def test_zero(self):
        assert SiLU()(0.0) == 0.0

    def test_value(self):
        assert SiLU()(1.0) == pytest.approx(1.0 / (1.0 + math.exp(-1.0)))


class TestLinear:

    def test_gradient(self):
        assert Linear(2.0)(3.0) == 6.0

    def test_identity_is_linear_one(self):
        assert Identity() == Linear(1.0)
        assert Identity()(5.0) == 5.0


class TestActivationValues:
    """Activations are immutable values."""

    def test_equality_and_hash(self):
        assert Sigmoid() == Sigmoid(4.9)
        assert hash(Sigmoid()) == hash(Sigmoid(4.9))
        assert Sigmoid(1.0) != Sigmoid(2.0)
        assert Sigmoid(1.0) != Tanh(1.0)

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Sigmoid().slope = 1.0

    def test_deterministic_flag(self):
        for name, factory in activations.items():
            assert factory().deterministic is (name != 'random')

    @pytest.mark.parametrize("name", sorted(activations))
    def test_large_inputs_do_not_raise(self, name):
        """Every activation returns a value for very large finite inputs."""
        activation = activations[name]()
        for x in (1e300, -1e300):
            assert isinstance(activation(x), float)


class TestParseActivation:

    def test_name_only(self):
        assert parse_activation("relu") == ReLU()

    def test_case_and_whitespace(self):
        assert parse_activation("  ReLU ") == ReLU()

    def test_parameter(self):
        assert parse_activation("sigmoid(2.5)") == Sigmoid(2.5)

    def test_identity(self):
        assert parse_activation("identity") == Linear(1.0)

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            parse_activation("softmax")

    def test_unexpected_parameter(self):
        with pytest.raises(ValueError):
            parse_activation("relu(2)")

    def test_bad_parameter(self):
        with pytest.raises(ValueError):
            parse_activation("sigmoid(abc)")

    def test_list(self):
        result = parse_activation_list("identity, sigmoid(2.0), tanh")
        assert result == [Linear(1.0), Sigmoid(2.0), Tanh()]

    def test_empty_list(self):
        assert parse_activation_list("") == []
