"""Bias functions for meaning ranking."""

from .mapping import MappingBias, UniformBias  # noqa: F401
