"""NEAT building blocks: options, activation functions, logging, species and populations."""

__version__ = "0.1.0"

__all__ = ["activations", "log", "mathutil", "options", "population", "species"]