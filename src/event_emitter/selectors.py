"""Event identifiers and the selector forms accepted by bulk operations.

An event is addressed either by its exact name or by a compiled regular
expression. Bulk add/remove additionally accept a mapping of event name to
one listener or a sequence of listeners. :func:`resolve_selector` turns any
of those into exactly one of :class:`ByKey`, :class:`ByPattern` or
:class:`ByMap` so callers branch once.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Pattern, Union

EventKey = Union[str, Pattern[str]]


@dataclass(frozen=True)
class ByKey:
    key: str


@dataclass(frozen=True)
class ByPattern:
    pattern: Pattern[str]

    def matches(self, key: str) -> bool:
        return self.pattern.search(key) is not None


@dataclass(frozen=True)
class ByMap:
    entries: Mapping[str, Any]


Selector = Union[ByKey, ByPattern, ByMap]


def resolve_selector(evt: Any) -> Selector:
    if isinstance(evt, re.Pattern):
        return ByPattern(evt)
    if isinstance(evt, Mapping):
        return ByMap(evt)
    return ByKey(str(evt))
