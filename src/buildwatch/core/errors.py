"""Exceptions raised by the buildwatch core."""


class BuildServerError(RuntimeError):
    """Raised when the build server cannot be reached or returns an error."""


class ConfigError(RuntimeError):
    """Raised when server settings are missing or invalid."""
