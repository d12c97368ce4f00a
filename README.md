# neatkit

Building blocks for NeuroEvolution of Augmenting Topologies (NEAT). NEAT evolves
neural networks from scratch with a genetic algorithm.

The package has these modules:

- `neatkit.options`: the algorithm's options (`Options`). They can be read from the
  plain `.neat` key/value format or from YAML, and they are validated.
- `neatkit.activations`: neuron activation functions and module activators
  (multiply, max, min). The neuron functions are sigmoids, tanh, Gaussian, linear,
  sign, sine, step and others. A `NodeActivatorsFactory` looks them up by
  `NodeActivationType` or by name, and `NODE_ACTIVATORS` is a ready-made default factory.
- `neatkit.species`: `Species`. It handles fitness sharing and survival selection
  (`adjust_fitness`), offspring counting (`count_offspring`), finding the champion
  and writing as text. The module also has the helpers `sort_by_original_fitness`
  and `sort_by_max_fitness`.
- `neatkit.population`: `Population`. It handles speciation (`speciate`) and
  offspring assignment (`purge_zero_offspring_species`). For stagnation it has
  `delta_coding` and `give_babies_to_the_best`. It also purges eliminated
  organisms and old generations, and hands out node IDs and innovation numbers
  in a thread-safe way. It can write its genomes as text (`write`,
  `write_by_species`).
- `neatkit.log`: logging filtered by level: `debug`, `info`, `warn` and `error`.
  Set the level with `init_logger`, and write messages with `debug_log`,
  `info_log`, `warn_log` and `error_log`.
- `neatkit.mathutil`: `rand_sign` and `single_roulette_throw`.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Loading options

```python
from neatkit.options import read_neat_options_from_file

options = read_neat_options_from_file("xor.neat")      # plain format
options = read_neat_options_from_file("xor.neat.yml")  # YAML, chosen by suffix
print(options.pop_size, options.compat_threshold)
```

`load_neat_options(stream)` and `load_yaml_options(stream)` read from an open
stream in the same way.

A plain `.neat` file has one `name value` pair per line:

```
pop_size 200
compat_threshold 3.0
epoch_executor sequential
genome_compat_method fast
log_level info
```

Errors are raised as `OptionsError`. This happens for an unknown parameter, an
unsupported executor type or compatibility method, and an unknown log level.

In YAML, `node_activators` lists entries of the form
`"<ActivationName> <probability>"`. When the list is absent, the default is
`SigmoidSteepenedActivation` with probability 1.0.
`Options.random_node_activation_type()` picks one of the activators. The choice
is weighted by the probabilities.

## Activation functions

```python
from neatkit.activations import NodeActivatorsFactory, NodeActivationType

factory = NodeActivatorsFactory()
factory.activate_by_type(0.5, [], NodeActivationType.SIGMOID_STEEPENED)
factory.activation_type_from_name("TanhActivation")   # NodeActivationType.TANH
factory.activate_module_by_type([2.0, 3.0], [], NodeActivationType.MULTIPLY_MODULE)  # [6.0]
```

An unknown type or name raises `ValueError`.

## Roulette selection

```python
from neatkit.mathutil import single_roulette_throw

index = single_roulette_throw([0.1, 0.2, 0.4, 0.15, 0.15])
```

## What the package does not do

The package has no genome or organism classes. `Species` and `Population`
work with organism objects that you supply. Such an object has these attributes:

- `fitness`, `original_fitness`, `error` and `expected_offspring`
- the flags `is_winner`, `is_champion` and `to_eliminate`
- `super_champ_offspring`
- `species`
- a `genotype`

The genotype has an `id`, a `write(stream)` method, a `verify()` method and a
`compatibility(other, options)` method.

The package also lacks the following:

- reproduction: no mating and no mutation
- an epoch executor that runs whole generations
- reading populations back from text
- a command-line program for running experiments