"""
In-process publish/subscribe registry.

Listeners are attached to named events and triggered synchronously:

    from event_emitter import EventEmitter

    emitter = EventEmitter()
    emitter.add_listener("saved", on_saved)
    emitter.emit("saved", record_id)

Events can also be selected with a compiled regular expression, which matches
every event name already known to the emitter.
"""
from .config import EmitterSettings
from .emitter import EventEmitter, get_event_emitter, reset_event_emitter
from .errors import ConfigError, EventEmitterError, InvalidListenerError
from .listeners import ListenerRecord, flatten_listeners, is_valid_listener
from .logging_config import configure_logging

__all__ = [
    "EventEmitter",
    "EmitterSettings",
    "ListenerRecord",
    "ConfigError",
    "EventEmitterError",
    "InvalidListenerError",
    "configure_logging",
    "flatten_listeners",
    "get_event_emitter",
    "is_valid_listener",
    "reset_event_emitter",
]
