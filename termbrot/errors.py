"""Exceptions raised by the fractal engine."""


class InvalidParameter(ValueError):
    """A setter was given a value that would break the viewport mapping."""


class ConfigError(ValueError):
    """A configuration value could not be parsed."""
