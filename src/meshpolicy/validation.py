# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/validation.py

"""
Load-time checks the schema alone cannot express.

A document that fails here never reaches a snapshot; nothing is defaulted.
"""

from __future__ import annotations

from typing import List, Sequence

from .api.meta import IstioResource
from .api.security.authorization_policy import AuthorizationPolicy, Condition, Operation, Source
from .authz.matchers import parse_ip_block
from .errors import MalformedPolicyError


def _check_ip_blocks(where: str, blocks: Sequence[str], problems: List[str]) -> None:
    for b in blocks:
        try:
            parse_ip_block(b)
        except ValueError:
            problems.append(f"{where}: invalid IP or CIDR '{b}'")


def _valid_port_pattern(p: str) -> bool:
    # ports use the same glob language as the other operation fields
    if p == "*":
        return True
    if p.endswith("*"):
        return p[:-1].isdigit()
    if p.startswith("*"):
        return p[1:].isdigit()
    return p.isdigit() and 0 <= int(p) <= 65535


def _check_ports(where: str, ports: Sequence[str], problems: List[str]) -> None:
    for p in ports:
        if not _valid_port_pattern(p):
            problems.append(f"{where}: invalid port '{p}'")


def _check_source(where: str, src: Source, problems: List[str]) -> None:
    _check_ip_blocks(f"{where}.ipBlocks", src.ip_blocks, problems)
    _check_ip_blocks(f"{where}.notIpBlocks", src.not_ip_blocks, problems)


def _check_operation(where: str, op: Operation, problems: List[str]) -> None:
    _check_ports(f"{where}.ports", op.ports, problems)
    _check_ports(f"{where}.notPorts", op.not_ports, problems)


def _check_condition(where: str, c: Condition, problems: List[str]) -> None:
    if not c.key:
        problems.append(f"{where}: condition key is required")
    if not c.values and not c.not_values:
        problems.append(f"{where}: condition '{c.key}' needs values or notValues")


def authorization_policy_problems(policy: AuthorizationPolicy) -> List[str]:
    problems: List[str] = []
    for i, rule in enumerate(policy.spec.rules):
        base = f"rules[{i}]"
        for j, f in enumerate(rule.from_):
            if f.source is not None:
                _check_source(f"{base}.from[{j}].source", f.source, problems)
        for j, t in enumerate(rule.to):
            if t.operation is not None:
                _check_operation(f"{base}.to[{j}].operation", t.operation, problems)
        for j, c in enumerate(rule.when):
            _check_condition(f"{base}.when[{j}]", c, problems)
    return problems


def validate_authorization_policy(policy: AuthorizationPolicy) -> AuthorizationPolicy:
    problems = authorization_policy_problems(policy)
    if problems:
        raise MalformedPolicyError(policy.ref(), problems)
    return policy


def validate_resource(resource: IstioResource) -> IstioResource:
    """Extra semantic checks per kind; kinds without any pass through unchanged."""
    if isinstance(resource, AuthorizationPolicy):
        return validate_authorization_policy(resource)
    return resource
