import dataclasses
import threading

import pytest

from meshpolicy.api.security.authorization_policy import AuthorizationPolicy
from meshpolicy.authz.attributes import RequestAttributes
from meshpolicy.authz.evaluator import Decision
from meshpolicy.authz.snapshot import PolicySnapshot, PolicyStore
from meshpolicy.observers.dispatcher import EventBus
from meshpolicy.observers.events import SnapshotPublished


class Capture:
    def __init__(self): self.events = []
    def notify(self, ev): self.events.append(ev)


def _deny_all(name, namespace="foo"):
    return AuthorizationPolicy.model_validate({
        "metadata": {"name": name, "namespace": namespace},
        "spec": {"action": "DENY", "rules": [{}]},
    })


def test_empty_store_allows():
    store = PolicyStore()
    assert store.current().generation == 0
    assert store.decide(RequestAttributes()) == Decision.ALLOW


def test_publish_swaps_snapshot_and_keeps_old_one_intact():
    store = PolicyStore(root_namespaces=["istio-system"])
    before = store.current()

    after = store.publish([_deny_all("deny")])
    assert after.generation == 1
    assert store.current() is after
    assert after.root_namespaces == frozenset({"istio-system"})

    assert before.decide(RequestAttributes()) == Decision.ALLOW
    assert store.decide(RequestAttributes()) == Decision.DENY


def test_publish_can_replace_root_namespaces():
    store = PolicyStore(root_namespaces=["istio-system"])
    snap = store.publish([], root_namespaces=["istio-config"])
    assert snap.root_namespaces == frozenset({"istio-config"})


def test_publish_emits_event():
    cap = Capture()
    store = PolicyStore(bus=EventBus([cap]))
    store.publish([_deny_all("a"), _deny_all("b")], source="policies.yaml")

    ev = next(e for e in cap.events if isinstance(e, SnapshotPublished))
    assert ev.generation == 1
    assert ev.source == "policies.yaml"
    assert ev.policies == ["AuthorizationPolicy/foo/a", "AuthorizationPolicy/foo/b"]


def test_readers_never_see_a_partial_snapshot():
    store = PolicyStore()
    errors = []
    stop = threading.Event()

    def reader():
        while not stop.is_set():
            snap = store.current()
            prefix = f"g{snap.generation}-"
            if not all(p.name.startswith(prefix) for p in snap.policies):
                errors.append(snap.generation)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    try:
        for g in range(1, 200):
            store.publish([_deny_all(f"g{g}-a"), _deny_all(f"g{g}-b"), _deny_all(f"g{g}-c")])
    finally:
        stop.set()
        for t in threads:
            t.join()

    assert errors == []
    assert store.current().generation == 199


def test_snapshot_is_frozen():
    snap = PolicySnapshot()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.generation = 5
