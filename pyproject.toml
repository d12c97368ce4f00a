[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "neatkit"
version = "0.1.0"
description = "NeuroEvolution of Augmenting Topologies building blocks: options, activation functions, species and populations"
requires-python = ">=3.10"
keywords = ["neat", "neuroevolution", "genetic-algorithms", "neural-networks", "evolution"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["neatkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
