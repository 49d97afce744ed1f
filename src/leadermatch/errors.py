"""Exceptions raised by the matching engine."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Inputs that cannot be compared, e.g. vectors of different lengths."""


class ProviderNotConfiguredError(RuntimeError):
    """An AI provider was invoked without the credentials it needs."""


class EmbeddingError(RuntimeError):
    """The embedding provider failed while generating vectors."""


class GenerationError(RuntimeError):
    """The generative provider failed to produce text."""
