"""Meaning disambiguators."""

from .top import TopCandidateDisambiguator  # noqa: F401
