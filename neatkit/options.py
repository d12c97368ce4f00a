"""NEAT algorithm options and the readers for their file encodings."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Callable

import yaml

from neatkit.activations import NODE_ACTIVATORS, NodeActivationType
from neatkit.log import init_logger
from neatkit.mathutil import single_roulette_throw


class OptionsError(ValueError):
    """Raised when NEAT options are malformed or inconsistent."""


class NoActivatorsRegisteredError(OptionsError):
    """Raised when no node activators are registered with the options."""

    def __init__(self) -> None:
        super().__init__(
            "no node activators registered with NEAT options, "
            "please assign at least one to NodeActivators"
        )


class ActivatorsProbabilitiesMismatchError(OptionsError):
    """Raised when activators and their probabilities differ in number."""

    def __init__(self) -> None:
        super().__init__(
            "number of node activator probabilities doesn't match number of activators"
        )


class GenomeCompatibilityMethod(str, enum.Enum):
    """The method used to calculate compatibility between genomes."""

    LINEAR = "linear"
    FAST = "fast"


class EpochExecutorType(str, enum.Enum):
    """The kind of executor that turns over a population's epoch."""

    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


def _coerce_enum(enum_cls: type[enum.Enum], value: Any) -> Any:
    """Return the enum member for ``value``, or the raw text when it is not one."""
    text = value.value if isinstance(value, enum.Enum) else str(value)
    try:
        return enum_cls(text)
    except ValueError:
        return text


@dataclass
class Options:
    """The NEAT algorithm options."""

    # probability of mutating a single trait param
    trait_param_mut_prob: float = 0.0
    # power of mutation on a single trait param
    trait_mutation_power: float = 0.0
    # power of a link weight mutation
    weight_mut_power: float = 0.0

    # coefficients of the genome compatibility formula
    disjoint_coeff: float = 0.0
    excess_coeff: float = 0.0
    mutdiff_coeff: float = 0.0

    # compatibility threshold under which two genomes are the same species
    compat_threshold: float = 0.0

    # how much species age matters: 1 means young species get no boost
    age_significance: float = 0.0
    # fraction of a species allowed to reproduce
    survival_thresh: float = 0.0

    # probabilities of non-mating reproduction
    mutate_only_prob: float = 0.0
    mutate_random_trait_prob: float = 0.0
    mutate_link_trait_prob: float = 0.0
    mutate_node_trait_prob: float = 0.0
    mutate_link_weights_prob: float = 0.0
    mutate_toggle_enable_prob: float = 0.0
    mutate_gene_reenable_prob: float = 0.0
    mutate_add_node_prob: float = 0.0
    mutate_add_link_prob: float = 0.0
    mutate_connect_sensors: float = 0.0

    # probabilities of mating
    interspecies_mate_rate: float = 0.0
    mate_multipoint_prob: float = 0.0
    mate_multipoint_avg_prob: float = 0.0
    mate_singlepoint_prob: float = 0.0
    mate_only_prob: float = 0.0
    recur_only_prob: float = 0.0

    pop_size: int = 0
    dropoff_age: int = 0
    newlink_tries: int = 0
    print_every: int = 0
    babies_stolen: int = 0
    num_runs: int = 0
    num_generations: int = 0

    epoch_executor_type: EpochExecutorType | str = ""
    gen_compat_method: GenomeCompatibilityMethod | str = ""

    # activation functions to choose from and their selection probabilities
    node_activators: list[NodeActivationType] = field(default_factory=list)
    node_activators_prob: list[float] = field(default_factory=list)
    # raw "<ActivatorName> <probability>" lines as read from configuration
    node_activators_with_probs: list[str] = field(default_factory=list)

    log_level: str = ""

    def random_node_activation_type(self) -> NodeActivationType:
        """Pick a node activation type at random, weighted by its probability."""
        if not self.node_activators:
            raise NoActivatorsRegisteredError()
        if len(self.node_activators) == 1:
            return self.node_activators[0]
        if len(self.node_activators) != len(self.node_activators_prob):
            raise ActivatorsProbabilitiesMismatchError()
        index = single_roulette_throw(self.node_activators_prob)
        if not 0 <= index < len(self.node_activators):
            raise OptionsError(
                "unexpected error when trying to find random node activator, "
                f"activator index: {index}"
            )
        return self.node_activators[index]

    def validate(self) -> None:
        """Check that the options hold supported values; raise OptionsError if not."""
        if not isinstance(self.epoch_executor_type, EpochExecutorType):
            if _coerce_enum(EpochExecutorType, self.epoch_executor_type) not in EpochExecutorType.__members__.values():
                raise OptionsError(
                    f"unsupported epoch executor type: [{self.epoch_executor_type}]"
                )
        if not isinstance(self.gen_compat_method, GenomeCompatibilityMethod):
            if _coerce_enum(GenomeCompatibilityMethod, self.gen_compat_method) not in GenomeCompatibilityMethod.__members__.values():
                raise OptionsError(
                    f"unsupported genome compatibility method: [{self.gen_compat_method}]"
                )
        if not self.node_activators:
            raise NoActivatorsRegisteredError()
        if len(self.node_activators) != len(self.node_activators_prob):
            raise ActivatorsProbabilitiesMismatchError()

    def _init_node_activators(self) -> None:
        """Fill activators and probabilities from the raw lines, or the default."""
        if not self.node_activators_with_probs:
            self.node_activators = [NodeActivationType.SIGMOID_STEEPENED]
            self.node_activators_prob = [1.0]
            return
        activators: list[NodeActivationType] = []
        probabilities: list[float] = []
        for line in self.node_activators_with_probs:
            fields = str(line).split()
            if len(fields) < 2:
                raise OptionsError(f"malformed node activator line: [{line}]")
            activators.append(NODE_ACTIVATORS.activation_type_from_name(fields[0]))
            try:
                probabilities.append(float(fields[1]))
            except ValueError:
                raise OptionsError(
                    f"invalid node activator probability: [{fields[1]}]"
                ) from None
        self.node_activators = activators
        self.node_activators_prob = probabilities


def _trim_zero_decimal(text: str) -> str:
    head, dot, tail = text.partition(".")
    if dot and tail and set(tail) == {"0"}:
        return head
    return text


def _lenient_int(text: str) -> int:
    """Parse an integer the lenient way: prefixes select the base, failures give 0."""
    body = _trim_zero_decimal(text)
    sign = 1
    if body[:1] in ("+", "-"):
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    lower = body.lower()
    if lower.startswith("0x"):
        base, digits = 16, body[2:]
    elif lower.startswith("0b"):
        base, digits = 2, body[2:]
    elif lower.startswith("0o"):
        base, digits = 8, body[2:]
    elif len(body) > 1 and body.startswith("0"):
        base, digits = 8, body[1:]
    else:
        base, digits = 10, body
    if not digits or not digits.isalnum():
        return 0
    try:
        return sign * int(digits, base)
    except ValueError:
        return 0


def _lenient_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return 0.0


def _yaml_float(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise OptionsError(f"failed to decode NEAT options from YAML: {key} is not a number: {value!r}")
    return float(value)


def _yaml_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise OptionsError(f"failed to decode NEAT options from YAML: {key} is not an integer: {value!r}")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not isinstance(value, int):
        raise OptionsError(f"failed to decode NEAT options from YAML: {key} is not an integer: {value!r}")
    return value


_FLOAT_KEYS = (
    "trait_param_mut_prob",
    "trait_mutation_power",
    "weight_mut_power",
    "disjoint_coeff",
    "excess_coeff",
    "mutdiff_coeff",
    "compat_threshold",
    "age_significance",
    "survival_thresh",
    "mutate_only_prob",
    "mutate_random_trait_prob",
    "mutate_link_trait_prob",
    "mutate_node_trait_prob",
    "mutate_link_weights_prob",
    "mutate_toggle_enable_prob",
    "mutate_gene_reenable_prob",
    "mutate_add_node_prob",
    "mutate_add_link_prob",
    "mutate_connect_sensors",
    "interspecies_mate_rate",
    "mate_multipoint_prob",
    "mate_multipoint_avg_prob",
    "mate_singlepoint_prob",
    "mate_only_prob",
    "recur_only_prob",
)

_INT_KEYS = (
    "pop_size",
    "dropoff_age",
    "newlink_tries",
    "print_every",
    "babies_stolen",
    "num_runs",
    "num_generations",
)

# key -> (attribute, converter) for the plain text encoding
_PLAIN_FIELDS: dict[str, tuple[str, Callable[[str], Any]]] = {
    **{key: (key, _lenient_float) for key in _FLOAT_KEYS},
    **{key: (key, _lenient_int) for key in _INT_KEYS},
    "epoch_executor": (
        "epoch_executor_type",
        lambda text: _coerce_enum(EpochExecutorType, text),
    ),
    "genome_compat_method": (
        "gen_compat_method",
        lambda text: _coerce_enum(GenomeCompatibilityMethod, text),
    ),
    "log_level": ("log_level", str),
}


def _read_text(stream: IO[Any]) -> str:
    content = stream.read()
    if isinstance(content, bytes):
        return content.decode("utf-8")
    return content


def _init_logger(level: str) -> None:
    try:
        init_logger(level)
    except ValueError as exc:
        raise OptionsError(f"failed to initialize logger: {exc}") from exc


def load_yaml_options(stream: IO[Any]) -> Options:
    """Load NEAT options encoded as YAML from ``stream``."""
    content = _read_text(stream)
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise OptionsError(f"failed to decode NEAT options from YAML: {exc}") from exc
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise OptionsError("failed to decode NEAT options from YAML: mapping expected")

    opts = Options()
    for key, value in document.items():
        if value is None:
            continue
        if key in _FLOAT_KEYS:
            setattr(opts, key, _yaml_float(key, value))
        elif key in _INT_KEYS:
            setattr(opts, key, _yaml_int(key, value))
        elif key == "epoch_executor":
            opts.epoch_executor_type = _coerce_enum(EpochExecutorType, value)
        elif key == "genome_compat_method":
            opts.gen_compat_method = _coerce_enum(GenomeCompatibilityMethod, value)
        elif key == "log_level":
            opts.log_level = str(value)
        elif key == "node_activators":
            if not isinstance(value, list):
                raise OptionsError(
                    "failed to decode NEAT options from YAML: node_activators must be a list"
                )
            opts.node_activators_with_probs = [str(item) for item in value]

    _init_logger(opts.log_level)

    try:
        opts._init_node_activators()
    except ValueError as exc:
        raise OptionsError(f"failed to read node activators: {exc}") from exc

    try:
        opts.validate()
    except OptionsError as exc:
        raise OptionsError(f"invalid NEAT options: {exc}") from exc
    return opts


def load_neat_options(stream: IO[Any]) -> Options:
    """Load NEAT options from ``stream`` in the plain "name value" per line encoding."""
    content = _read_text(stream)
    opts = Options()
    for line in content.splitlines():
        fields = line.split()
        if not fields:
            continue
        if len(fields) != 2:
            raise OptionsError(f"malformed configuration line: [{line}]")
        name, param = fields
        try:
            attribute, convert = _PLAIN_FIELDS[name]
        except KeyError:
            raise OptionsError(
                f"unknown configuration parameter found: {name} = {param}"
            ) from None
        setattr(opts, attribute, convert(param))

    _init_logger(opts.log_level)
    opts._init_node_activators()
    opts.validate()
    return opts


def read_neat_options_from_file(path: str | Path) -> Options:
    """Read NEAT options from ``path``, choosing the encoding by file suffix."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as stream:
        if path.name.endswith(("yml", "yaml")):
            return load_yaml_options(stream)
        return load_neat_options(stream)