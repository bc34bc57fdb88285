"""Exceptions raised by typespool."""


class ConfigError(ValueError):
    """Raised when animation options or a fade configuration are invalid.

    Configuration is validated before any timer is armed, so an animation
    never runs with options that raised this error.
    """
