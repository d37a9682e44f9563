# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for the @log_method decorator."""

import json
from pathlib import Path
from typing import Any

import pytest

from atomicwrite.logging import EventLog, log_method


class FakeWriter:
    """Minimal writer-like class for testing the decorator."""

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log
        self._log_context = {"target": "/tmp/x"}

    @log_method(before=True, after=True)
    def stamp(self, label: str, blob: bytes = b"") -> str:
        return f"stamped {label}"

    @log_method(after=True)
    def commit(self) -> None:
        pass

    @log_method(after=True)
    def fail(self, reason: str) -> None:
        raise ValueError(reason)


@pytest.fixture()
def event_log(tmp_path: Path) -> EventLog:
    log = EventLog(tmp_path / "events.jsonl")
    log.open()
    return log


def _read_events(log: EventLog) -> list[dict[str, Any]]:
    log.close()
    lines = log.path.read_text().strip().split("\n")
    return [json.loads(line) for line in lines if line]


def test_before_and_after(event_log: EventLog) -> None:
    w = FakeWriter(log=event_log)
    assert w.stamp("a", blob=b"state-blob") == "stamped a"
    events = _read_events(event_log)
    assert [e["event"] for e in events] == ["stamp", "stamp.result"]
    assert events[0]["data"] == {"label": "a", "blob": "c3RhdGUtYmxvYg=="}
    assert events[1]["data"]["result"] == "stamped a"
    assert all(e["target"] == "/tmp/x" for e in events)


def test_none_result_omitted(event_log: EventLog) -> None:
    FakeWriter(log=event_log).commit()
    events = _read_events(event_log)
    assert events == [
        {"target": "/tmp/x", "ts": events[0]["ts"], "event": "commit.result", "data": {}}
    ]


def test_error_logged_and_reraised(event_log: EventLog) -> None:
    with pytest.raises(ValueError, match="nope"):
        FakeWriter(log=event_log).fail("nope")
    events = _read_events(event_log)
    assert len(events) == 1
    assert events[0]["event"] == "fail.error"
    assert events[0]["data"] == {"reason": "nope", "error": "ValueError", "message": "nope"}


def test_no_log_still_works() -> None:
    w = FakeWriter(log=None)
    assert w.stamp("b") == "stamped b"
    w.commit()


def test_closed_log_does_not_fail_call(
    event_log: EventLog, caplog: pytest.LogCaptureFixture
) -> None:
    event_log.close()
    w = FakeWriter(log=event_log)
    with caplog.at_level("WARNING", logger="atomicwrite.logging.decorator"):
        w.commit()
    assert "could not record commit.result" in caplog.text
