import json
import logging
from pathlib import Path

from meshpolicy.observers.console import ConsoleObserver
from meshpolicy.observers.dispatcher import EventBus
from meshpolicy.observers.events import DecisionMade, PolicyRejected, new_ctx
from meshpolicy.observers.interface import Observer
from meshpolicy.observers.jsonfile import JsonFileObserver
from meshpolicy.observers.logger import LoggerObserver


class Capture(Observer):
    def __init__(self): self.events = []
    def notify(self, event): self.events.append(event)


class Broken:
    def notify(self, event):
        raise RuntimeError("boom")


def test_broken_observer_does_not_stop_others():
    cap = Capture()
    bus = EventBus([Broken(), cap])
    bus.emit(DecisionMade(decision="ALLOW", reason="no allow policies apply", **new_ctx("req.yaml")))
    assert len(cap.events) == 1
    assert cap.events[0].source == "req.yaml"


def test_new_ctx_reuses_run_id():
    a = new_ctx(run_id="r-1")
    b = new_ctx("x", run_id="r-1")
    assert a["run_id"] == b["run_id"] == "r-1"
    assert a["ts"].endswith("Z")


def test_jsonfile_observer_appends_lines(tmp_path: Path):
    path = tmp_path / "events" / "run.jsonl"
    ob = JsonFileObserver(path)
    ob.notify(PolicyRejected(ref="AuthorizationPolicy/foo/x", kind="AuthorizationPolicy", error="bad", **new_ctx()))
    ob.notify(DecisionMade(decision="DENY", reason="matched deny policy", policy="p", **new_ctx()))

    lines = [json.loads(l) for l in path.read_text().splitlines()]
    assert [l["event"] for l in lines] == ["policy_rejected", "decision_made"]
    assert lines[0]["error"] == "bad"


def test_logger_observer_warns_on_rejection(caplog):
    logger = logging.getLogger("observer-test")
    ob = LoggerObserver(logger)
    with caplog.at_level(logging.INFO, logger="observer-test"):
        ob.notify(PolicyRejected(ref="r", kind=None, error="bad", **new_ctx()))
        ob.notify(DecisionMade(decision="ALLOW", reason="x", **new_ctx()))

    levels = [r.levelno for r in caplog.records]
    assert levels == [logging.WARNING, logging.INFO]
    assert "PolicyRejected" in caplog.records[0].getMessage()


def test_console_observer_prints(capsys):
    ConsoleObserver().notify(DecisionMade(decision="DENY", reason="r", **new_ctx("req.yaml")))
    out = capsys.readouterr().out
    assert "DecisionMade" in out
    assert "decision=DENY" in out
