import numpy as np
import random
import re
from dataclasses import dataclass
from typing      import ClassVar

# Arguments of 'exp' are clipped to this range to prevent under/overflow.
_EXP_LIMIT = 500.0

def _exp(z: float) -> float:
    return float(np.exp(np.clip(z, -_EXP_LIMIT, _EXP_LIMIT)))

class ActivationFunction:
    """
    Base class of all activation functions: an immutable 'float -> float' mapping.

    Activations are values: two instances with the same parameters compare (and
    hash) equal, so they can be placed in the activation pools of a Config.
    """

    # whether the output depends only on the input
    deterministic: ClassVar[bool] = True

    def __call__(self, x: float) -> float:
        raise NotImplementedError

@dataclass(frozen=True)
class Sigmoid(ActivationFunction):
    slope: float = 4.9

    def __call__(self, x: float) -> float:
        return 1.0 / (1.0 + _exp(-self.slope * x))

@dataclass(frozen=True)
class Tanh(ActivationFunction):
    """Like Sigmoid, but with output range (-1, 1)."""
    slope: float = 2.0

    def __call__(self, x: float) -> float:
        return 2.0 / (1.0 + _exp(-self.slope * x)) - 1.0

@dataclass(frozen=True)
class Sinus(ActivationFunction):
    # values < 1 stretch the curve instead of compressing it
    compression: float = 1.0

    def __call__(self, x: float) -> float:
        # an overflowed input gives nan without a RuntimeWarning
        with np.errstate(invalid="ignore"):
            return float(np.sin(self.compression * x))

@dataclass(frozen=True)
class Step(ActivationFunction):
    threshold: float = 0.0

    def __call__(self, x: float) -> float:
        return 1.0 if x >= self.threshold else 0.0

@dataclass(frozen=True)
class Sign(ActivationFunction):

    def __call__(self, x: float) -> float:
        if x > 0.0:
            return 1.0
        if x < 0.0:
            return -1.0
        return 0.0

@dataclass(frozen=True)
class Random(ActivationFunction):
    """Ignores its input and returns a uniform random value in [-1, 1)."""

    deterministic: ClassVar[bool] = False

    def __call__(self, x: float) -> float:
        return random.random() * 2.0 - 1.0

@dataclass(frozen=True)
class ReLU(ActivationFunction):

    def __call__(self, x: float) -> float:
        return x if x > 0.0 else 0.0

@dataclass(frozen=True)
class SELU(ActivationFunction):

    ALPHA : ClassVar[float] = 1.6732632423543772848170429916717
    LAMBDA: ClassVar[float] = 1.0507009873554804934193349852946

    def __call__(self, x: float) -> float:
        if x > 0.0:
            return self.LAMBDA * x
        return self.LAMBDA * (self.ALPHA * _exp(x) - self.ALPHA)

@dataclass(frozen=True)
class SiLU(ActivationFunction):
    # controls the amount of leakage for inputs below 0
    a: float = 1.0

    def __call__(self, x: float) -> float:
        return x / (1.0 + _exp(-self.a * x))

@dataclass(frozen=True)
class Linear(ActivationFunction):
    gradient: float = 1.0

    def __call__(self, x: float) -> float:
        return self.gradient * x

def Identity() -> Linear:
    return Linear(1.0)

activations = {
    "sigmoid" : Sigmoid,
    "tanh"    : Tanh,
    "sinus"   : Sinus,
    "step"    : Step,
    "sign"    : Sign,
    "random"  : Random,
    "relu"    : ReLU,
    "selu"    : SELU,
    "silu"    : SiLU,
    "linear"  : Linear,
    "identity": Identity
    }

# 3-letter identifiers for each activation class
activation_codes = {
    Sigmoid: "SIG",
    Tanh   : "TNH",
    Sinus  : "SIN",
    Step   : "STP",
    Sign   : "SGN",
    Random : "RND",
    ReLU   : "RLU",
    SELU   : "SLU",
    SiLU   : "SIL",
    Linear : "LIN"
    }

_ACTIVATION_PATTERN = re.compile(r"^\s*([a-z]+)\s*(?:\(\s*([^()]*?)\s*\))?\s*$")

def parse_activation(text: str) -> ActivationFunction:
    """
    Build an activation function from its textual description.

    Parameters:
        text: the activation name, optionally followed by its parameter in
              parentheses; for example "relu", "sigmoid(2.5)", "identity"

    Returns:
        The activation function described by 'text'

    Raises:
        ValueError: if the name is unknown or the parameter cannot be parsed
    """
    match = _ACTIVATION_PATTERN.match(text.lower())
    if match is None:
        raise ValueError(f"Invalid activation function '{text}'")

    name, raw_param = match.groups()
    if name not in activations:
        raise ValueError(f"Invalid activation function '{name}'")

    if not raw_param:
        return activations[name]()
    try:
        return activations[name](float(raw_param))
    except TypeError:
        raise ValueError(f"Activation function '{name}' does not take a parameter") from None

def parse_activation_list(text: str) -> list[ActivationFunction]:
    """
    Parse a comma-separated list of activation descriptions (see 'parse_activation').
    """
    # split on commas which are not inside parentheses
    parts = re.split(r",(?![^()]*\))", text)
    return [parse_activation(part) for part in parts if part.strip()]
