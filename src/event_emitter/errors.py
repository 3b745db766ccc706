class EventEmitterError(Exception):
    """Base error for event emitter exceptions."""


class InvalidListenerError(EventEmitterError, TypeError):
    """Raised when a value that cannot be invoked is added as a listener."""


class ConfigError(EventEmitterError, ValueError):
    """Raised when emitter settings cannot be parsed."""
