"""Tests for ollabot.agent.context: bounded log and transcript rendering."""

import pytest

from ollabot.agent.context import ContextEntry, ContextLog


# ── Append / trim ───────────────────────────────────────────


def test_append_keeps_order():
    log = ContextLog()
    log.append("user_input", "add 2 and 3")
    log.append("tool_call", '{"intent":"add","a":2,"b":3}')
    assert log.kinds() == ["user_input", "tool_call"]
    assert len(log) == 2


def test_length_never_exceeds_cap():
    log = ContextLog()
    for i in range(100):
        log.append("user_input", f"msg {i}")
        assert len(log) <= 20


def test_trim_to_retain_on_overflow():
    """The 21st append trims to exactly the 15 most recent entries."""
    log = ContextLog()
    for i in range(20):
        log.append("user_input", f"msg {i}")
    assert len(log) == 20

    log.append("user_input", "msg 20")
    assert len(log) == 15
    assert [e.payload for e in log] == [f"msg {i}" for i in range(6, 21)]


def test_custom_bounds():
    log = ContextLog(max_entries=4, retain_entries=2)
    for i in range(5):
        log.append("tool_response", str(i))
    assert [e.payload for e in log] == ["3", "4"]


def test_invalid_bounds():
    with pytest.raises(ValueError):
        ContextLog(max_entries=5, retain_entries=6)
    with pytest.raises(ValueError):
        ContextLog(max_entries=0, retain_entries=0)


def test_unknown_kind_rejected():
    log = ContextLog()
    with pytest.raises(ValueError):
        log.append("assistant", "nope")
    assert len(log) == 0


def test_entry_is_frozen():
    entry = ContextEntry("error", "boom")
    with pytest.raises(AttributeError):
        entry.payload = "changed"


# ── Render ──────────────────────────────────────────────────


def test_render_blocks():
    log = ContextLog()
    log.append("user_input", "hello")
    log.append("error", "timeout")
    assert log.render() == "<user_input>\nhello\n</user_input>\n\n<error>\ntimeout\n</error>"


def test_render_empty():
    assert ContextLog().render() == ""


def test_render_is_idempotent():
    log = ContextLog()
    log.append("user_input", "multiply 4 by 5")
    log.append("tool_call", '{"intent":"multiply","a":4,"b":5}')
    assert log.render() == log.render()


def test_entries_are_a_copy():
    log = ContextLog()
    log.append("user_input", "x")
    snapshot = log.to_list()
    log.append("user_input", "y")
    assert snapshot == [{"kind": "user_input", "payload": "x"}]
    log.clear()
    assert len(log) == 0
