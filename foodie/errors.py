from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when a mandatory provider credential is missing."""


class ProviderError(RuntimeError):
    """Raised when a language-model provider fails or returns unusable output."""
