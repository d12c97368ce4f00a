import io
import random

import pytest

from neatkit import log
from neatkit.activations import NodeActivationType
from neatkit.options import (
    ActivatorsProbabilitiesMismatchError,
    EpochExecutorType,
    GenomeCompatibilityMethod,
    NoActivatorsRegisteredError,
    Options,
    OptionsError,
    load_neat_options,
    load_yaml_options,
    read_neat_options_from_file,
)

ALWAYS_ERROR_TEXT = "always be failing"

XOR_PLAIN = """trait_param_mut_prob 0.5
trait_mutation_power 1.0
weight_mut_power 2.5
disjoint_coeff 1.0
excess_coeff 1.0
mutdiff_coeff 0.4
compat_threshold 3.0
age_significance 1.0
survival_thresh 0.2
mutate_only_prob 0.25
mutate_random_trait_prob 0.1
mutate_link_trait_prob 0.1
mutate_node_trait_prob 0.1
mutate_link_weights_prob 0.9
mutate_toggle_enable_prob 0.0
mutate_gene_reenable_prob 0.0
mutate_add_node_prob 0.03
mutate_add_link_prob 0.08
mutate_connect_sensors 0.5
interspecies_mate_rate 0.001
mate_multipoint_prob 0.3
mate_multipoint_avg_prob 0.3
mate_singlepoint_prob 0.3
mate_only_prob 0.2
recur_only_prob 0.0
pop_size 200
dropoff_age 50
newlink_tries 50
print_every 10
babies_stolen 0
num_runs 100
num_generations 100
epoch_executor sequential
genome_compat_method fast
log_level info
"""

XOR_YAML = """trait_param_mut_prob: 0.5
trait_mutation_power: 1.0
weight_mut_power: 2.5
disjoint_coeff: 1.0
excess_coeff: 1.0
mutdiff_coeff: 0.4
compat_threshold: 3.0
age_significance: 1.0
survival_thresh: 0.2
mutate_only_prob: 0.25
mutate_random_trait_prob: 0.1
mutate_link_trait_prob: 0.1
mutate_node_trait_prob: 0.1
mutate_link_weights_prob: 0.9
mutate_toggle_enable_prob: 0.0
mutate_gene_reenable_prob: 0.0
mutate_add_node_prob: 0.03
mutate_add_link_prob: 0.08
mutate_connect_sensors: 0.5
interspecies_mate_rate: 0.001
mate_multipoint_prob: 0.3
mate_multipoint_avg_prob: 0.3
mate_singlepoint_prob: 0.3
mate_only_prob: 0.2
recur_only_prob: 0.0
pop_size: 200
dropoff_age: 50
newlink_tries: 50
print_every: 10
babies_stolen: 0
num_runs: 100
num_generations: 100
epoch_executor: sequential
genome_compat_method: fast
log_level: info
node_activators:
  - "SigmoidBipolarActivation 0.25"
  - "GaussianBipolarActivation 0.35"
  - "LinearAbsActivation 0.15"
  - "SineActivation 0.25"
"""


class ErrorReader:
    def read(self, *args):
        raise OSError(ALWAYS_ERROR_TEXT)


def check_neat_options(nc):
    assert nc.trait_param_mut_prob == 0.5
    assert nc.trait_mutation_power == 1.0
    assert nc.weight_mut_power == 2.5
    assert nc.disjoint_coeff == 1.0
    assert nc.excess_coeff == 1.0
    assert nc.mutdiff_coeff == 0.4
    assert nc.compat_threshold == 3.0
    assert nc.age_significance == 1.0
    assert nc.survival_thresh == 0.2
    assert nc.mutate_only_prob == 0.25
    assert nc.mutate_random_trait_prob == 0.1
    assert nc.mutate_link_trait_prob == 0.1
    assert nc.mutate_node_trait_prob == 0.1
    assert nc.mutate_link_weights_prob == 0.9
    assert nc.mutate_toggle_enable_prob == 0.0
    assert nc.mutate_gene_reenable_prob == 0.0
    assert nc.mutate_add_node_prob == 0.03
    assert nc.mutate_add_link_prob == 0.08
    assert nc.mutate_connect_sensors == 0.5
    assert nc.interspecies_mate_rate == 0.001
    assert nc.mate_multipoint_prob == 0.3
    assert nc.mate_multipoint_avg_prob == 0.3
    assert nc.mate_singlepoint_prob == 0.3
    assert nc.mate_only_prob == 0.2
    assert nc.recur_only_prob == 0.0
    assert nc.pop_size == 200
    assert nc.dropoff_age == 50
    assert nc.newlink_tries == 50
    assert nc.print_every == 10
    assert nc.babies_stolen == 0
    assert nc.num_runs == 100
    assert nc.num_generations == 100
    assert nc.epoch_executor_type == EpochExecutorType.SEQUENTIAL
    assert nc.gen_compat_method == GenomeCompatibilityMethod.FAST


def test_load_neat_options():
    opts = load_neat_options(io.StringIO(XOR_PLAIN))
    check_neat_options(opts)
    assert opts.node_activators == [NodeActivationType.SIGMOID_STEEPENED]
    assert opts.node_activators_prob == [1.0]
    assert log.log_level == log.LoggerLevel.INFO


def test_load_neat_options_read_error():
    with pytest.raises(OSError, match=ALWAYS_ERROR_TEXT):
        load_neat_options(ErrorReader())


def test_load_yaml_options():
    opts = load_yaml_options(io.StringIO(XOR_YAML))
    check_neat_options(opts)
    assert len(opts.node_activators) == 4
    activators = [
        NodeActivationType.SIGMOID_BIPOLAR,
        NodeActivationType.GAUSSIAN_BIPOLAR,
        NodeActivationType.LINEAR_ABS,
        NodeActivationType.SINE,
    ]
    probs = [0.25, 0.35, 0.15, 0.25]
    assert opts.node_activators == activators
    assert opts.node_activators_prob == probs


def test_load_yaml_options_read_error():
    with pytest.raises(OSError, match=ALWAYS_ERROR_TEXT):
        load_yaml_options(ErrorReader())


def test_read_neat_options_from_file(tmp_path):
    plain = tmp_path / "xor_test.neat"
    plain.write_text(XOR_PLAIN, encoding="utf-8")
    yml = tmp_path / "xor_test.neat.yml"
    yml.write_text(XOR_YAML, encoding="utf-8")

    opts = read_neat_options_from_file(plain)
    check_neat_options(opts)
    assert len(opts.node_activators) == 1

    opts = read_neat_options_from_file(str(yml))
    check_neat_options(opts)
    assert len(opts.node_activators) == 4


def test_read_neat_options_from_file_error():
    with pytest.raises(FileNotFoundError):
        read_neat_options_from_file("file doesnt exist")


def test_load_neat_options_unknown_parameter():
    text = XOR_PLAIN + "bogus_param 12\n"
    with pytest.raises(OptionsError, match="unknown configuration parameter found: bogus_param = 12"):
        load_neat_options(io.StringIO(text))


def test_load_neat_options_bad_log_level():
    text = XOR_PLAIN.replace("log_level info", "log_level loud")
    with pytest.raises(OptionsError, match="failed to initialize logger"):
        load_neat_options(io.StringIO(text))


def test_load_neat_options_bad_executor():
    text = XOR_PLAIN.replace("epoch_executor sequential", "epoch_executor random")
    with pytest.raises(OptionsError, match=r"unsupported epoch executor type: \[random\]"):
        load_neat_options(io.StringIO(text))


def test_load_yaml_options_bad_compat_method():
    text = XOR_YAML.replace("genome_compat_method: fast", "genome_compat_method: slow")
    with pytest.raises(OptionsError, match=r"unsupported genome compatibility method: \[slow\]"):
        load_yaml_options(io.StringIO(text))


def test_load_yaml_options_unknown_activator():
    text = XOR_YAML.replace("SineActivation", "NoSuchActivation")
    with pytest.raises(OptionsError, match="failed to read node activators"):
        load_yaml_options(io.StringIO(text))


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("200.0", 200), ("0x10", 16), ("010", 8), ("-7", -7), ("abc", 0)],
)
def test_load_neat_options_lenient_int(raw, expected):
    text = XOR_PLAIN.replace("pop_size 200", f"pop_size {raw}")
    opts = load_neat_options(io.StringIO(text))
    assert opts.pop_size == expected


def test_load_neat_options_lenient_float():
    text = XOR_PLAIN.replace("weight_mut_power 2.5", "weight_mut_power abc")
    opts = load_neat_options(io.StringIO(text))
    assert opts.weight_mut_power == 0.0


def test_random_node_activation_type_no_activators():
    opts = Options(compat_threshold=0.5, pop_size=10)
    with pytest.raises(NoActivatorsRegisteredError) as info:
        opts.random_node_activation_type()
    assert "no node activators registered" in str(info.value)


def test_random_node_activation_type_mismatch():
    opts = Options(
        node_activators=[
            NodeActivationType.SIGMOID_APPROXIMATION,
            NodeActivationType.SIGMOID_BIPOLAR,
        ],
        node_activators_prob=[0.5],
    )
    with pytest.raises(ActivatorsProbabilitiesMismatchError) as info:
        opts.random_node_activation_type()
    assert "doesn't match number of activators" in str(info.value)


def test_random_node_activation_type_single_value():
    opts = Options(
        node_activators=[NodeActivationType.GAUSSIAN_BIPOLAR],
        node_activators_prob=[1.0],
    )
    assert opts.random_node_activation_type() == NodeActivationType.GAUSSIAN_BIPOLAR


def test_random_node_activation_type():
    random.seed(42)
    choices = {NodeActivationType.SIGMOID_APPROXIMATION, NodeActivationType.SIGMOID_BIPOLAR}
    opts = Options(node_activators=list(choices), node_activators_prob=[0.5, 0.5])
    seen = {opts.random_node_activation_type() for _ in range(200)}
    assert seen == choices


def test_validate_ok():
    opts = Options(
        epoch_executor_type=EpochExecutorType.PARALLEL,
        gen_compat_method=GenomeCompatibilityMethod.LINEAR,
        node_activators=[NodeActivationType.TANH],
        node_activators_prob=[1.0],
    )
    opts.validate()
    assert opts.epoch_executor_type == "parallel"


def test_validate_accepts_plain_strings():
    opts = Options(
        epoch_executor_type="sequential",
        gen_compat_method="fast",
        node_activators=[NodeActivationType.TANH],
        node_activators_prob=[1.0],
    )
    opts.validate()
    assert opts.gen_compat_method == GenomeCompatibilityMethod.FAST


def test_validate_no_activators():
    opts = Options(
        epoch_executor_type=EpochExecutorType.SEQUENTIAL,
        gen_compat_method=GenomeCompatibilityMethod.FAST,
    )
    with pytest.raises(NoActivatorsRegisteredError):
        opts.validate()


def test_validate_empty_executor():
    opts = Options(
        gen_compat_method=GenomeCompatibilityMethod.FAST,
        node_activators=[NodeActivationType.TANH],
        node_activators_prob=[1.0],
    )
    with pytest.raises(OptionsError, match=r"unsupported epoch executor type: \[\]"):
        opts.validate()