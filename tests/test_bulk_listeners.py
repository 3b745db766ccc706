import re

import pytest

from event_emitter import EventEmitter, InvalidListenerError, ListenerRecord


def make(name, log):
    def listener():
        log.append(name)

    listener.__name__ = name
    return listener


def names(emitter: EventEmitter, evt: str):
    return [cb.__name__ for cb in emitter.flatten_listeners(emitter.get_listeners(evt))]


def test_add_listeners_processes_list_in_reverse():
    emitter = EventEmitter()
    log = []
    a, b, c = make("a", log), make("b", log), make("c", log)
    emitter.add_listeners("foo", [a, b, c])
    assert names(emitter, "foo") == ["c", "b", "a"]
    emitter.emit("foo")
    assert log == ["c", "b", "a"]


def test_remove_listeners_from_key():
    emitter = EventEmitter()
    log = []
    a, b, c = make("a", log), make("b", log), make("c", log)
    emitter.add_listeners("foo", [a, b, c])
    emitter.remove_listeners("foo", [a, c])
    assert names(emitter, "foo") == ["b"]


def test_add_listeners_by_mapping():
    emitter = EventEmitter()
    log = []
    a, b, c = make("a", log), make("b", log), make("c", log)
    emitter.add_listeners({"foo": a, "bar": [b, c], "skip": None})
    assert names(emitter, "foo") == ["a"]
    assert names(emitter, "bar") == ["c", "b"]
    assert "skip" not in emitter.get_listeners(re.compile(".*"))


def test_remove_listeners_by_mapping():
    emitter = EventEmitter()
    log = []
    a, b, c = make("a", log), make("b", log), make("c", log)
    emitter.add_listeners({"foo": [a, b], "bar": [b, c]})
    emitter.remove_listeners({"foo": a, "bar": [b, c]})
    assert names(emitter, "foo") == ["b"]
    assert names(emitter, "bar") == []


def test_mapping_values_may_be_records():
    emitter = EventEmitter()
    log = []
    a = make("a", log)
    emitter.add_listeners({"foo": ListenerRecord(a, fire_once=True)})
    emitter.emit("foo")
    emitter.emit("foo")
    assert log == ["a"]


def test_bulk_with_pattern():
    emitter = EventEmitter()
    log = []
    a, b = make("a", log), make("b", log)
    emitter.define_events(["bar", "baz", "foo"])
    emitter.add_listeners(re.compile("^ba"), [a, b])
    assert names(emitter, "bar") == ["b", "a"]
    assert names(emitter, "baz") == ["b", "a"]
    assert names(emitter, "foo") == []

    emitter.remove_listeners(re.compile("z$"), [a])
    assert names(emitter, "baz") == ["b"]
    assert names(emitter, "bar") == ["b", "a"]


def test_manipulate_listeners_switches_on_flag():
    emitter = EventEmitter()
    log = []
    a = make("a", log)
    emitter.manipulate_listeners(False, "foo", [a])
    assert names(emitter, "foo") == ["a"]
    emitter.manipulate_listeners(True, "foo", [a])
    assert names(emitter, "foo") == []


def test_bulk_add_propagates_invalid_listener():
    emitter = EventEmitter()
    log = []
    a = make("a", log)
    with pytest.raises(InvalidListenerError):
        emitter.add_listeners("foo", [a, "not callable"])
    with pytest.raises(InvalidListenerError):
        emitter.add_listeners({"bar": 42})


def test_mapping_not_accepted_as_emit_target():
    emitter = EventEmitter()
    with pytest.raises(TypeError):
        emitter.emit({"foo": None})  # type: ignore[arg-type]


def test_remove_listeners_accepts_records():
    emitter = EventEmitter()
    log = []
    a, b = make("a", log), make("b", log)
    record_a = ListenerRecord(a, fire_once=True)
    record_b = ListenerRecord(b)

    emitter.add_listeners({"foo": record_a})
    emitter.remove_listeners({"foo": record_a})
    assert names(emitter, "foo") == []

    emitter.add_listeners("bar", [record_a, record_b])
    emitter.remove_listeners("bar", [record_a, record_b])
    assert names(emitter, "bar") == []
