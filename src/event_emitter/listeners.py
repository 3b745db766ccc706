from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, List, Sequence, Union


@dataclass(frozen=True)
class ListenerRecord:
    """A registered listener.

    Attributes:
        callback: Invoked with the emitted arguments.
        fire_once: Remove the record right before its first invocation.
    """

    callback: Callable[..., Any]
    fire_once: bool = False


@dataclass(frozen=True)
class Bare:
    """A plain callback passed in by the caller."""

    callback: Callable[..., Any]

    def record(self) -> ListenerRecord:
        return ListenerRecord(self.callback, False)


@dataclass(frozen=True)
class Wrapped:
    """A record built by the caller; its fire_once flag is kept as given."""

    value: ListenerRecord

    def record(self) -> ListenerRecord:
        callback = unwrap(self.value)
        if callback is self.value.callback:
            return self.value
        return ListenerRecord(callback, self.value.fire_once)


ListenerLike = Union[Callable[..., Any], ListenerRecord]


def is_valid_listener(listener: Any) -> bool:
    """True for callables, compiled patterns and records wrapping either."""
    if callable(listener) or isinstance(listener, re.Pattern):
        return True
    if isinstance(listener, ListenerRecord):
        return is_valid_listener(listener.callback)
    return False


def unwrap(listener: Any) -> Any:
    """Return the callback inside any number of nested records."""
    while isinstance(listener, ListenerRecord):
        listener = listener.callback
    return listener


def classify(listener: ListenerLike) -> Union[Bare, Wrapped]:
    if isinstance(listener, ListenerRecord):
        return Wrapped(listener)
    return Bare(listener)


def index_of_listener(records: Sequence[ListenerRecord], callback: Any) -> int:
    """Return the highest index whose record holds ``callback``, or -1."""
    for i in range(len(records) - 1, -1, -1):
        if records[i].callback is callback or records[i].callback == callback:
            return i
    return -1


def flatten_listeners(records: Sequence[ListenerRecord]) -> List[Callable[..., Any]]:
    return [record.callback for record in records]
