"""Engine-specific exceptions.

Errors raised by the ``meilisearch`` client itself are not wrapped; they
propagate to the caller unchanged.
"""


class EngineError(Exception):
    """Base exception for engine errors."""


class EngineNotFoundError(EngineError):
    """Raised when a requested engine driver is not registered."""


class ConfigurationError(EngineError):
    """Raised when engine configuration is invalid."""


class IndexResolutionError(EngineError):
    """Raised when the target index of a batch cannot be determined."""
