class BlastError(Exception):
    """Base class for engine errors."""


class InvalidConfigurationError(BlastError, ValueError):
    """Raised by ``GameSession.start`` when the supplied configuration is malformed."""


class BoardGenerationError(BlastError, RuntimeError):
    """Raised when no playable grid was sampled within the attempt budget."""
