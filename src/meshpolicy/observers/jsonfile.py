# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/observers/jsonfile.py

from __future__ import annotations
import json
import re
from pathlib import Path
from typing import Any, Dict

from .interface import Observer
from .events import BaseEvent


def event_name(event: BaseEvent) -> str:
    """PolicyRejected -> policy_rejected"""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", type(event).__name__).lower()


def event_record(event: BaseEvent) -> Dict[str, Any]:
    return {"event": event_name(event), **event.dict()}


class JsonFileObserver(Observer):
    """Appends one JSON line per event, keyed by `event`."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def notify(self, event: BaseEvent) -> None:
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(event_record(event), sort_keys=False))
            f.write("\n")
