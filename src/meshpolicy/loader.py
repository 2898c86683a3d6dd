# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/loader.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

import yaml
from pydantic import ValidationError

from .api import KINDS
from .api.meta import IstioResource
from .api.security.authorization_policy import AuthorizationPolicy
from .authz.snapshot import PolicySnapshot
from .errors import MalformedPolicyError, UnknownKindError
from .observers.dispatcher import EventBus
from .observers.events import PolicyAccepted, PolicyRejected, new_ctx
from .validation import validate_resource

log = logging.getLogger("meshpolicy")

MANIFEST_SUFFIXES = (".yaml", ".yml", ".json")


@dataclass(frozen=True)
class Rejection:
    ref: str
    kind: Optional[str]
    reason: str
    source: Optional[str] = None


@dataclass
class LoadResult:
    accepted: List[IstioResource] = field(default_factory=list)
    rejected: List[Rejection] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.rejected

    def of_kind(self, kind: str) -> List[IstioResource]:
        return [r for r in self.accepted if r.kind == kind]

    def authorization_policies(self) -> List[AuthorizationPolicy]:
        return [r for r in self.accepted if isinstance(r, AuthorizationPolicy)]

    def extend(self, other: "LoadResult") -> None:
        self.accepted.extend(other.accepted)
        self.rejected.extend(other.rejected)


def _raw_ref(doc: Dict[str, Any]) -> str:
    meta = doc.get("metadata") or {}
    if not isinstance(meta, dict):
        meta = {}
    return f"{doc.get('kind') or '?'}/{meta.get('namespace') or '-'}/{meta.get('name') or '-'}"


def _describe(err: ValidationError) -> List[str]:
    out = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ()))
        out.append(f"{loc}: {e.get('msg')}" if loc else str(e.get("msg")))
    return out


def _expand_lists(doc: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    kind = doc.get("kind")
    if isinstance(kind, str) and kind.endswith("List") and isinstance(doc.get("items"), list):
        for item in doc["items"]:
            yield item
    else:
        yield doc


def parse_document(doc: Dict[str, Any]) -> IstioResource:
    """Turn one decoded document into a typed, validated resource or raise MalformedPolicyError."""
    ref = _raw_ref(doc)
    kind = doc.get("kind")
    model = KINDS.get(kind) if isinstance(kind, str) else None
    if model is None:
        raise UnknownKindError(ref, kind)

    try:
        resource = model.model_validate(doc)
    except ValidationError as e:
        raise MalformedPolicyError(ref, _describe(e)) from e

    return validate_resource(resource)


def parse_documents(
    text: str,
    source: Optional[str] = None,
    bus: Optional[EventBus] = None,
    run_id: Optional[str] = None,
) -> LoadResult:
    """
    Parse a YAML/JSON stream of Istio resources. Malformed documents are
    reported and left out; well-formed ones keep their stream order.
    """
    result = LoadResult()

    def reject(ref: str, kind: Optional[str], reason: str) -> None:
        log.warning("rejected %s from %s: %s", ref, source or "<stream>", reason)
        result.rejected.append(Rejection(ref=ref, kind=kind, reason=reason, source=source))
        if bus:
            bus.emit(PolicyRejected(ref=ref, kind=kind, error=reason, **new_ctx(source, run_id)))

    try:
        for raw in yaml.safe_load_all(text):
            if raw is None:
                continue
            if not isinstance(raw, dict):
                reject("?/-/-", None, f"document is a {type(raw).__name__}, expected a mapping")
                continue

            for doc in _expand_lists(raw):
                if not isinstance(doc, dict):
                    reject(_raw_ref(raw), None, "list item is not a mapping")
                    continue
                try:
                    resource = parse_document(doc)
                except MalformedPolicyError as e:
                    kind = doc.get("kind") if isinstance(doc.get("kind"), str) else None
                    reject(e.ref, kind, "; ".join(e.problems))
                    continue

                log.debug("accepted %s from %s", resource.ref(), source or "<stream>")
                result.accepted.append(resource)
                if bus:
                    bus.emit(PolicyAccepted(ref=resource.ref(), **new_ctx(source, run_id)))
    except yaml.YAMLError as e:
        reject(f"<{source or 'stream'}>", None, f"invalid YAML: {e}")

    return result


def _manifest_files(paths: Iterable[Union[str, Path]]) -> Iterator[Path]:
    for p in paths:
        p = Path(p)
        if p.is_dir():
            yield from sorted(f for f in p.rglob("*") if f.is_file() and f.suffix in MANIFEST_SUFFIXES)
        else:
            yield p


def load_documents(
    paths: Iterable[Union[str, Path]],
    bus: Optional[EventBus] = None,
    run_id: Optional[str] = None,
) -> LoadResult:
    """Load every manifest under `paths` (files, or directories scanned recursively)."""
    result = LoadResult()
    for f in _manifest_files(paths):
        log.debug("loading manifests from %s", f)
        result.extend(parse_documents(f.read_text(), source=str(f), bus=bus, run_id=run_id))
    return result


def build_snapshot(
    result: LoadResult,
    root_namespaces: Iterable[str] = (),
    generation: int = 0,
) -> PolicySnapshot:
    return PolicySnapshot(
        policies=tuple(result.authorization_policies()),
        root_namespaces=frozenset(root_namespaces),
        generation=generation,
    )
