# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/authz/evaluator.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Iterable, List, Optional

from ..api.security.authorization_policy import AuthorizationPolicy, AuthorizationPolicyAction
from .attributes import RequestAttributes, Workload
from .matchers import match_rule

log = logging.getLogger("meshpolicy")


class Decision(str, Enum):
    ALLOW = "ALLOW"
    DENY = "DENY"


@dataclass(frozen=True)
class DecisionResult:
    decision: Decision
    reason: str
    policy: Optional[str] = None     # kind/namespace/name of the deciding policy
    rule_index: Optional[int] = None


def applies_to(
    policy: AuthorizationPolicy,
    workload: Optional[Workload],
    root_namespaces: AbstractSet[str] = frozenset(),
) -> bool:
    """
    Namespace scope then selector. A policy in one of `root_namespaces` is
    mesh-wide; without a workload namespace the scope check is skipped.
    """
    if workload is None:
        return policy.selects(None)

    if workload.namespace is not None:
        ns = policy.namespace
        if ns is not None and ns != workload.namespace and ns not in root_namespaces:
            return False

    return policy.selects(workload.labels)


def _first_matching_rule(policy: AuthorizationPolicy, attrs: RequestAttributes) -> Optional[int]:
    # a policy without rules matches nothing
    for i, rule in enumerate(policy.spec.rules):
        if match_rule(rule, attrs):
            return i
    return None


def evaluate(
    policies: Iterable[AuthorizationPolicy],
    attrs: RequestAttributes,
    workload: Optional[Workload] = None,
    root_namespaces: Iterable[str] = (),
) -> DecisionResult:
    """
    Decide a request against a policy set.

    1. any matching DENY policy denies
    2. no ALLOW policy selects the workload: allow
    3. any matching ALLOW policy allows
    4. otherwise deny
    """
    roots = frozenset(root_namespaces)
    selected = [p for p in policies if applies_to(p, workload, roots)]

    deny: List[AuthorizationPolicy] = [p for p in selected if p.action == AuthorizationPolicyAction.DENY]
    allow: List[AuthorizationPolicy] = [p for p in selected if p.action == AuthorizationPolicyAction.ALLOW]

    for p in deny:
        idx = _first_matching_rule(p, attrs)
        if idx is not None:
            return DecisionResult(Decision.DENY, "matched deny policy", p.ref(), idx)

    if not allow:
        return DecisionResult(Decision.ALLOW, "no allow policies apply")

    for p in allow:
        idx = _first_matching_rule(p, attrs)
        if idx is not None:
            return DecisionResult(Decision.ALLOW, "matched allow policy", p.ref(), idx)

    return DecisionResult(Decision.DENY, "no allow policy matched")


def decide(
    policies: Iterable[AuthorizationPolicy],
    attrs: RequestAttributes,
    workload: Optional[Workload] = None,
    root_namespaces: Iterable[str] = (),
) -> Decision:
    result = evaluate(policies, attrs, workload=workload, root_namespaces=root_namespaces)
    log.debug(
        "authz decision=%s reason=%s policy=%s rule=%s",
        result.decision.value, result.reason, result.policy, result.rule_index,
    )
    return result.decision
