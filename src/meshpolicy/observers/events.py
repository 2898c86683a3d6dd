# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import List, Dict, Any, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str                 # ISO timestamp
    run_id: str             # correlates all events of one load/evaluate invocation
    source: Optional[str]   # file or stream the documents came from

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(source: Optional[str] = None, run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
        "source": source,
    }


# ---------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class PolicyAccepted(BaseEvent):
    ref: str

@dataclass(frozen=True)
class PolicyRejected(BaseEvent):
    ref: str
    kind: Optional[str]
    error: str


# ---------------------------------------------------------------------
# Snapshot lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class SnapshotPublished(BaseEvent):
    generation: int
    policies: List[str]


# ---------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class DecisionMade(BaseEvent):
    decision: str
    reason: str
    policy: Optional[str] = None
