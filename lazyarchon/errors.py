"""Exception types raised by the repository client and the core."""


class LazyArchonError(Exception):
    """Base class for all application errors."""


class RepositoryError(LazyArchonError):
    """Transport failure: connection lost, timeout, bad status, failed payload."""


class NotFoundError(RepositoryError):
    """The server no longer knows the requested entity."""


class PayloadError(RepositoryError):
    """Server response did not match the expected schema."""


class UpdateValidationError(LazyArchonError, ValueError):
    """A task update was malformed and was rejected before being sent."""


class ConfigError(LazyArchonError, ValueError):
    """Startup configuration is invalid."""
