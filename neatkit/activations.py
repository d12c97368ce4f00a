"""Neuron activation functions and the factory that selects them by type."""

from __future__ import annotations

import enum
import math
import sys
from collections.abc import Callable, Sequence

ActivationFunction = Callable[[float, Sequence[float]], float]
ModuleActivationFunction = Callable[[Sequence[float], Sequence[float]], list]


class NodeActivationType(enum.IntEnum):
    """The types of activation functions a neuron node can use."""

    # sigmoid activation functions
    SIGMOID_PLAIN = 1
    SIGMOID_REDUCED = 2
    SIGMOID_BIPOLAR = 3
    SIGMOID_STEEPENED = 4
    SIGMOID_APPROXIMATION = 5
    SIGMOID_STEEPENED_APPROXIMATION = 6
    SIGMOID_INVERSE_ABSOLUTE = 7
    SIGMOID_LEFT_SHIFTED = 8
    SIGMOID_LEFT_SHIFTED_STEEPENED = 9
    SIGMOID_RIGHT_SHIFTED_STEEPENED = 10

    # other activators
    TANH = 11
    GAUSSIAN_BIPOLAR = 12
    GAUSSIAN = 13
    LINEAR = 14
    LINEAR_ABS = 15
    LINEAR_CLIPPED = 16
    NULL = 17
    SIGN = 18
    SINE = 19
    STEP = 20

    # modular activators (multiple inputs/outputs)
    MULTIPLY_MODULE = 21
    MAX_MODULE = 22
    MIN_MODULE = 23


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _signbit(x: float) -> bool:
    return math.copysign(1.0, x) < 0


# sigmoid activation functions

def _plain_sigmoid(value: float, aux_params: Sequence[float]) -> float:
    return 1.0 / (1.0 + _exp(-value))


def _reduced_sigmoid(value: float, aux_params: Sequence[float]) -> float:
    return 1.0 / (1.0 + _exp(-0.5 * value))


def _steepened_sigmoid(value: float, aux_params: Sequence[float]) -> float:
    return 1.0 / (1.0 + _exp(-4.924273 * value))


def _bipolar_sigmoid(value: float, aux_params: Sequence[float]) -> float:
    return (2.0 / (1.0 + _exp(-4.924273 * value))) - 1.0


def _approximation_sigmoid(value: float, aux_params: Sequence[float]) -> float:
    four, one32nd = 4.0, 0.03125
    if value < -4.0:
        return 0.0
    if value < 0.0:
        return (value + four) * (value + four) * one32nd
    if value < 4.0:
        return 1.0 - (value - four) * (value - four) * one32nd
    return 1.0


def _approximation_steepened_sigmoid(value: float, aux_params: Sequence[float]) -> float:
    one, one_half = 1.0, 0.5
    if value < -1.0:
        return 0.0
    if value < 0.0:
        return (value + one) * (value + one) * one_half
    if value < 1.0:
        return 1.0 - (value - one) * (value - one) * one_half
    return 1.0


def _inverse_absolute_sigmoid(value: float, aux_params: Sequence[float]) -> float:
    return 0.5 + (value / (1.0 + abs(value))) * 0.5


def _left_shifted_sigmoid(value: float, aux_params: Sequence[float]) -> float:
    return 1.0 / (1.0 + _exp(-value - 2.4621365))


def _left_shifted_steepened_sigmoid(value: float, aux_params: Sequence[float]) -> float:
    return 1.0 / (1.0 + _exp(-(4.924273 * value + 2.4621365)))


def _right_shifted_steepened_sigmoid(value: float, aux_params: Sequence[float]) -> float:
    return 1.0 / (1.0 + _exp(-(4.924273 * value - 2.4621365)))


# other activation functions

def _hyperbolic_tangent(value: float, aux_params: Sequence[float]) -> float:
    return math.tanh(0.9 * value)


def _bipolar_gaussian(value: float, aux_params: Sequence[float]) -> float:
    scaled = value * 2.5
    return 2.0 * _exp(-(scaled * scaled)) - 1.0


def _gaussian(value: float, aux_params: Sequence[float]) -> float:
    return _exp(-(value * value))


def _absolute_linear(value: float, aux_params: Sequence[float]) -> float:
    return abs(value)


def _clipped_linear(value: float, aux_params: Sequence[float]) -> float:
    if value < -1.0:
        return -1.0
    if value > 1.0:
        return 1.0
    return value


def _sign_function(value: float, aux_params: Sequence[float]) -> float:
    if math.isnan(value) or value == 0.0:
        return 0.0
    if _signbit(value):
        return -1.0
    return 1.0


def _sine_function(value: float, aux_params: Sequence[float]) -> float:
    if not math.isfinite(value):
        return math.nan
    return math.sin(2.0 * value)


def _step_function(value: float, aux_params: Sequence[float]) -> float:
    if _signbit(value):
        return 0.0
    return 1.0


# modular activators

def _nan_aware(pick: Callable[[float, float], float]) -> Callable[[float, float], float]:
    def choose(a: float, b: float) -> float:
        if math.isnan(a) or math.isnan(b):
            return math.nan
        return pick(a, b)

    return choose


_max2 = _nan_aware(max)
_min2 = _nan_aware(min)


def _multiply_module(inputs: Sequence[float], aux_params: Sequence[float]) -> list:
    result = 1.0
    for value in inputs:
        result *= value
    return [result]


def _max_module(inputs: Sequence[float], aux_params: Sequence[float]) -> list:
    max_value = float(-(2**63))
    for value in inputs:
        max_value = _max2(max_value, value)
    return [max_value]


def _min_module(inputs: Sequence[float], aux_params: Sequence[float]) -> list:
    min_value = sys.float_info.max
    for value in inputs:
        min_value = _min2(min_value, value)
    return [min_value]


class NodeActivatorsFactory:
    """Registry of node and module activation functions, keyed by type and name."""

    def __init__(self) -> None:
        self._activators: dict[int, ActivationFunction] = {}
        self._module_activators: dict[int, ModuleActivationFunction] = {}
        self._names: dict[int, str] = {}
        self._types: dict[str, int] = {}

        t = NodeActivationType
        for activation_type, function, name in (
            (t.SIGMOID_PLAIN, _plain_sigmoid, "SigmoidPlainActivation"),
            (t.SIGMOID_REDUCED, _reduced_sigmoid, "SigmoidReducedActivation"),
            (t.SIGMOID_STEEPENED, _steepened_sigmoid, "SigmoidSteepenedActivation"),
            (t.SIGMOID_BIPOLAR, _bipolar_sigmoid, "SigmoidBipolarActivation"),
            (t.SIGMOID_APPROXIMATION, _approximation_sigmoid, "SigmoidApproximationActivation"),
            (
                t.SIGMOID_STEEPENED_APPROXIMATION,
                _approximation_steepened_sigmoid,
                "SigmoidSteepenedApproximationActivation",
            ),
            (t.SIGMOID_INVERSE_ABSOLUTE, _inverse_absolute_sigmoid, "SigmoidInverseAbsoluteActivation"),
            (t.SIGMOID_LEFT_SHIFTED, _left_shifted_sigmoid, "SigmoidLeftShiftedActivation"),
            (
                t.SIGMOID_LEFT_SHIFTED_STEEPENED,
                _left_shifted_steepened_sigmoid,
                "SigmoidLeftShiftedSteepenedActivation",
            ),
            (
                t.SIGMOID_RIGHT_SHIFTED_STEEPENED,
                _right_shifted_steepened_sigmoid,
                "SigmoidRightShiftedSteepenedActivation",
            ),
            (t.TANH, _hyperbolic_tangent, "TanhActivation"),
            (t.GAUSSIAN_BIPOLAR, _bipolar_gaussian, "GaussianBipolarActivation"),
            (t.GAUSSIAN, _gaussian, "GaussianActivation"),
            (t.LINEAR, lambda value, _aux: value, "LinearActivation"),
            (t.LINEAR_ABS, _absolute_linear, "LinearAbsActivation"),
            (t.LINEAR_CLIPPED, _clipped_linear, "LinearClippedActivation"),
            (t.NULL, lambda _value, _aux: 0.0, "NullActivation"),
            (t.SIGN, _sign_function, "SignActivation"),
            (t.SINE, _sine_function, "SineActivation"),
            (t.STEP, _step_function, "StepActivation"),
        ):
            self.register(activation_type, function, name)

        for activation_type, function, name in (
            (t.MULTIPLY_MODULE, _multiply_module, "MultiplyModuleActivation"),
            (t.MAX_MODULE, _max_module, "MaxModuleActivation"),
            (t.MIN_MODULE, _min_module, "MinModuleActivation"),
        ):
            self.register_module(activation_type, function, name)

    def activate_by_type(
        self, value: float, aux_params: Sequence[float], activation_type: int
    ) -> float:
        """Apply the node activation function of the given type to ``value``.

        Raises ValueError for an unknown activation type.
        """
        try:
            function = self._activators[activation_type]
        except KeyError:
            raise ValueError(f"unknown neuron activation type: {int(activation_type)}") from None
        return function(value, aux_params)

    def activate_module_by_type(
        self, inputs: Sequence[float], aux_params: Sequence[float], activation_type: int
    ) -> list:
        """Apply the module activation function of the given type to ``inputs``.

        Raises ValueError for an unknown module activation type.
        """
        try:
            function = self._module_activators[activation_type]
        except KeyError:
            raise ValueError(f"unknown module activation type: {int(activation_type)}") from None
        return function(inputs, aux_params)

    def register(self, activation_type: int, function: ActivationFunction, name: str) -> None:
        """Register a node activation function under the given type and name."""
        self._activators[activation_type] = function
        self._names[activation_type] = name
        self._types[name] = activation_type

    def register_module(
        self, activation_type: int, function: ModuleActivationFunction, name: str
    ) -> None:
        """Register a module activation function under the given type and name."""
        self._module_activators[activation_type] = function
        self._names[activation_type] = name
        self._types[name] = activation_type

    def activation_type_from_name(self, name: str) -> int:
        """Return the activation type registered under ``name``."""
        try:
            activation_type = self._types[name]
        except KeyError:
            raise ValueError(f"unsupported activation type name: {name}") from None
        try:
            return NodeActivationType(activation_type)
        except ValueError:
            return activation_type

    def activation_name_from_type(self, activation_type: int) -> str:
        """Return the name registered for ``activation_type``."""
        try:
            return self._names[activation_type]
        except KeyError:
            raise ValueError(f"unsupported activation type: {int(activation_type)}") from None


NODE_ACTIVATORS = NodeActivatorsFactory()