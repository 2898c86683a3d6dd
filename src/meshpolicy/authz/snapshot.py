# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/authz/snapshot.py

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Tuple

from ..api.security.authorization_policy import AuthorizationPolicy
from ..observers.dispatcher import EventBus
from ..observers.events import SnapshotPublished, new_ctx
from .attributes import RequestAttributes, Workload
from .evaluator import Decision, DecisionResult, evaluate

log = logging.getLogger("meshpolicy")


@dataclass(frozen=True)
class PolicySnapshot:
    """A point-in-time, immutable set of policies plus the mesh-wide namespaces."""

    policies: Tuple[AuthorizationPolicy, ...] = ()
    root_namespaces: FrozenSet[str] = field(default_factory=frozenset)
    generation: int = 0

    def evaluate(self, attrs: RequestAttributes, workload: Optional[Workload] = None) -> DecisionResult:
        return evaluate(self.policies, attrs, workload=workload, root_namespaces=self.root_namespaces)

    def decide(self, attrs: RequestAttributes, workload: Optional[Workload] = None) -> Decision:
        return self.evaluate(attrs, workload).decision


class PolicyStore:
    """
    Holds the active snapshot. Readers take a reference and evaluate without
    locking; `publish` swaps the whole snapshot so a reader sees either the
    old set or the new one, never a mix.
    """

    def __init__(
        self,
        root_namespaces: Iterable[str] = (),
        bus: Optional[EventBus] = None,
    ):
        self._write_lock = threading.Lock()
        self._bus = bus
        self._snapshot = PolicySnapshot(root_namespaces=frozenset(root_namespaces))

    def current(self) -> PolicySnapshot:
        return self._snapshot

    def publish(
        self,
        policies: Iterable[AuthorizationPolicy],
        root_namespaces: Optional[Iterable[str]] = None,
        source: Optional[str] = None,
    ) -> PolicySnapshot:
        with self._write_lock:
            prev = self._snapshot
            roots = prev.root_namespaces if root_namespaces is None else frozenset(root_namespaces)
            snap = PolicySnapshot(
                policies=tuple(policies),
                root_namespaces=roots,
                generation=prev.generation + 1,
            )
            self._snapshot = snap

        log.info("published policy snapshot generation=%d policies=%d", snap.generation, len(snap.policies))
        if self._bus:
            self._bus.emit(
                SnapshotPublished(
                    generation=snap.generation,
                    policies=[p.ref() for p in snap.policies],
                    **new_ctx(source),
                )
            )
        return snap

    def decide(self, attrs: RequestAttributes, workload: Optional[Workload] = None) -> Decision:
        return self._snapshot.decide(attrs, workload)
