from __future__ import annotations

import logging
import numbers
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Sequence

from .errors import InvalidListenerError
from .listeners import (
    ListenerLike,
    ListenerRecord,
    classify,
    flatten_listeners,
    index_of_listener,
    is_valid_listener,
    unwrap,
)
from .selectors import ByKey, ByMap, ByPattern, EventKey, resolve_selector

if TYPE_CHECKING:  # pragma: no cover
    from .config import EmitterSettings

logger = logging.getLogger(__name__)

ListenerMap = Dict[str, List[ListenerRecord]]


def _name(callback: Any) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)


class EventEmitter:
    """Synchronous in-process publish/subscribe registry.

    Listeners are stored per event name in registration order. An event can be
    addressed by its exact name or by a compiled regular expression; a pattern
    selects every event name already present in the table and never creates
    new ones, so use :meth:`define_event` to make a name discoverable before
    listeners are attached.

    Listener faults are not isolated. An exception raised by a listener
    propagates out of :meth:`emit` / :meth:`emit_event` and the remaining
    listeners of that dispatch are skipped. Wrap the call yourself if you need
    isolation.

    The class can be subclassed to give another object event functionality.
    It is not thread-safe; guard every call with a lock if an instance is
    shared between threads.
    """

    def __init__(self, once_return_value: Any = True) -> None:
        self._events: ListenerMap = {}
        self._once_return_value: Any = once_return_value

    @classmethod
    def from_settings(cls, settings: "EmitterSettings") -> "EventEmitter":
        """Build an emitter with the sentinel and pre-defined events of ``settings``."""
        emitter = cls(once_return_value=settings.once_return_value)
        emitter.define_events(settings.events)
        return emitter

    # ------------------------ Lookup ------------------------
    def get_listeners(self, evt: EventKey) -> Any:
        """Return the listener records for an event.

        Args:
            evt: Exact event name or compiled pattern.

        Returns:
            For a name, the live record list of that event (created empty when
            absent). For a pattern, a dict of every existing matching event
            name to its live record list.
        """
        selector = resolve_selector(evt)
        if isinstance(selector, ByMap):
            raise TypeError("event mappings are only accepted by add_listeners/remove_listeners")
        if isinstance(selector, ByPattern):
            return {key: records for key, records in self._events.items() if selector.matches(key)}
        return self._events.setdefault(selector.key, [])

    def get_listeners_as_object(self, evt: EventKey) -> ListenerMap:
        """Like :meth:`get_listeners` but always returns a name -> records dict."""
        listeners = self.get_listeners(evt)
        if isinstance(listeners, list):
            return {str(evt): listeners}
        return listeners

    def flatten_listeners(self, records: Sequence[ListenerRecord]) -> List[Callable[..., Any]]:
        return flatten_listeners(records)

    @property
    def once_return_value(self) -> Any:
        return self._once_return_value

    def set_once_return_value(self, value: Any) -> "EventEmitter":
        """Set the return value that makes a listener remove itself after a call.

        Numbers match across int and float (``1`` matches ``1.0``) but never
        match a bool sentinel. Other values must have the sentinel's type.
        """
        self._once_return_value = value
        return self

    # ------------------------ Add / define ------------------------
    def add_listener(self, evt: EventKey, listener: ListenerLike) -> "EventEmitter":
        """Attach a listener to an event, or to every existing event matching a pattern.

        A callback already attached to an event is not added again, whatever its
        fire_once flag.

        Raises:
            InvalidListenerError: If ``listener`` is neither callable nor a
                record wrapping a callable.
        """
        if not is_valid_listener(listener):
            raise InvalidListenerError(f"listener must be callable, got {listener!r}")
        record = classify(listener).record()
        for key, records in self.get_listeners_as_object(evt).items():
            if index_of_listener(records, record.callback) == -1:
                records.append(record)
                logger.debug("Added listener %s to '%s' (once=%s)", _name(record.callback), key, record.fire_once)
        return self

    def add_once_listener(self, evt: EventKey, listener: Callable[..., Any]) -> "EventEmitter":
        return self.add_listener(evt, ListenerRecord(listener, fire_once=True))

    def define_event(self, evt: str) -> "EventEmitter":
        """Create an empty listener list so patterns can find ``evt``."""
        self.get_listeners(evt)
        logger.debug("Defined event '%s'", evt)
        return self

    def define_events(self, evts: Iterable[str]) -> "EventEmitter":
        for evt in evts:
            self.define_event(evt)
        return self

    # ------------------------ Remove ------------------------
    def remove_listener(self, evt: EventKey, listener: ListenerLike) -> "EventEmitter":
        """Detach a callback from an event or every event matching a pattern.

        Records are matched by the callback they wrap. Missing callbacks are
        ignored.
        """
        listener = unwrap(listener)
        for key, records in self.get_listeners_as_object(evt).items():
            self._discard(key, records, listener)
        return self

    def remove_event(self, evt: Optional[EventKey] = None) -> "EventEmitter":
        """Drop an event and its listeners.

        Args:
            evt: Exact name, pattern (drops every matching event) or None to
                clear the whole table.
        """
        if evt is None:
            logger.debug("Removing all %d events", len(self._events))
            self._events.clear()
            return self
        selector = resolve_selector(evt)
        if isinstance(selector, ByPattern):
            for key in [k for k in self._events if selector.matches(k)]:
                del self._events[key]
                logger.debug("Removed event '%s'", key)
        elif self._events.pop(selector.key, None) is not None:
            logger.debug("Removed event '%s'", selector.key)
        return self

    # ------------------------ Bulk ------------------------
    def add_listeners(self, evt: Any, listeners: Sequence[ListenerLike] = ()) -> "EventEmitter":
        """Add many listeners at once.

        ``evt`` is either an event name or pattern (``listeners`` is then added
        to it) or a dict of event name to a listener or a list of listeners.
        """
        return self.manipulate_listeners(False, evt, listeners)

    def remove_listeners(self, evt: Any, listeners: Sequence[ListenerLike] = ()) -> "EventEmitter":
        """Remove many listeners at once; accepts the same shapes as :meth:`add_listeners`."""
        return self.manipulate_listeners(True, evt, listeners)

    def manipulate_listeners(self, remove: bool, evt: Any, listeners: Sequence[ListenerLike] = ()) -> "EventEmitter":
        """Add (``remove=False``) or remove (``remove=True``) listeners in bulk.

        Sequences are processed from the last element to the first.
        """
        single = self.remove_listener if remove else self.add_listener
        multiple = self.remove_listeners if remove else self.add_listeners

        selector = resolve_selector(evt)
        if isinstance(selector, ByMap):
            for key, value in selector.entries.items():
                if not value:
                    continue
                if isinstance(value, (list, tuple)):
                    multiple(key, value)
                else:
                    single(key, value)
        elif isinstance(selector, (ByKey, ByPattern)):
            target = evt if isinstance(selector, ByPattern) else selector.key
            for listener in reversed(list(listeners)):
                single(target, listener)  # type: ignore[arg-type]
        else:  # pragma: no cover
            raise AssertionError(f"unhandled selector {selector!r}")
        return self

    # ------------------------ Dispatch ------------------------
    def emit_event(self, evt: EventKey, args: Optional[Sequence[Any]] = None) -> "EventEmitter":
        """Call every listener of an event, or of every event matching a pattern.

        Each event's list is copied before the pass, so listeners added or
        removed by a running listener only affect later emits. Fire-once
        listeners are detached before they run; a listener returning the
        once-sentinel is detached after it returns.

        Exceptions raised by listeners propagate and abort the pass.
        """
        call_args = tuple(args or ())
        for key, records in self.get_listeners_as_object(evt).items():
            snapshot = list(records)
            logger.debug("Emitting '%s' to %d listeners", key, len(snapshot))
            for record in snapshot:
                if record.fire_once:
                    self._discard(key, self._events.get(key), record.callback)
                response = record.callback(*call_args)
                if self._is_once_return(response):
                    self._discard(key, self._events.get(key), record.callback)
        return self

    def emit(self, evt: EventKey, *args: Any) -> "EventEmitter":
        return self.emit_event(evt, args)

    # ------------------------ Aliases ------------------------
    def on(self, evt: EventKey, listener: ListenerLike) -> "EventEmitter":
        return self.add_listener(evt, listener)

    def once(self, evt: EventKey, listener: Callable[..., Any]) -> "EventEmitter":
        return self.add_once_listener(evt, listener)

    def off(self, evt: EventKey, listener: Callable[..., Any]) -> "EventEmitter":
        return self.remove_listener(evt, listener)

    def remove_all_listeners(self, evt: Optional[EventKey] = None) -> "EventEmitter":
        return self.remove_event(evt)

    def trigger(self, evt: EventKey, args: Optional[Sequence[Any]] = None) -> "EventEmitter":
        return self.emit_event(evt, args)

    # ------------------------ Internals ------------------------
    def _is_once_return(self, response: Any) -> bool:
        sentinel = self._once_return_value
        if response is sentinel:
            return True
        # 1 == True in Python; bools only match themselves
        if isinstance(response, bool) or isinstance(sentinel, bool):
            return False
        if isinstance(response, numbers.Number) and isinstance(sentinel, numbers.Number):
            return response == sentinel
        return type(response) is type(sentinel) and response == sentinel

    @staticmethod
    def _discard(key: str, records: Optional[List[ListenerRecord]], callback: Any) -> None:
        if not records:
            return
        index = index_of_listener(records, callback)
        if index != -1:
            del records[index]
            logger.debug("Removed listener %s from '%s'", _name(callback), key)


# Process-global default emitter (optional use)
_GLOBAL_EMITTER: Optional[EventEmitter] = None


def get_event_emitter() -> EventEmitter:
    """Return a process-global EventEmitter, creating one if necessary."""
    global _GLOBAL_EMITTER
    if _GLOBAL_EMITTER is None:
        _GLOBAL_EMITTER = EventEmitter()
    return _GLOBAL_EMITTER


def reset_event_emitter() -> None:
    """Forget the process-global emitter (useful in tests)."""
    global _GLOBAL_EMITTER
    _GLOBAL_EMITTER = None
