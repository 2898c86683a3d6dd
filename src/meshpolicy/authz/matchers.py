# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/authz/matchers.py

"""
Request matching for AuthorizationPolicy rules.

Rule fields use a small glob language, not StringMatch:
  "*"      presence (any non-empty value)
  "abc*"   prefix
  "*abc"   suffix
  other    exact

Within a Source/Operation every field pair is ANDed; entries inside one
positive list are ORed. A rule ORs its `from` entries and its `to` entries,
ANDs its `when` conditions, and ANDs the three categories. An absent
category matches everything.
"""

from __future__ import annotations

import ipaddress
from functools import lru_cache
from typing import Callable, Optional, Sequence, Union

from ..api.security.authorization_policy import Condition, Operation, Rule, Source
from .attributes import IP_KEYS, RequestAttributes

Matcher = Callable[[str, str], bool]
_Network = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def glob_match(pattern: str, value: str) -> bool:
    if pattern == "*":
        return value != ""
    if len(pattern) > 1 and pattern.endswith("*"):
        return value.startswith(pattern[:-1])
    if len(pattern) > 1 and pattern.startswith("*"):
        return value.endswith(pattern[1:])
    return value == pattern


@lru_cache(maxsize=1024)
def parse_ip_block(block: str) -> _Network:
    """Single address or CIDR. Raises ValueError on anything else."""
    return ipaddress.ip_network(block.strip(), strict=False)


def ip_match(block: str, value: str) -> bool:
    """True iff `value` is the address `block`, or lies inside the CIDR `block`."""
    if not value:
        return False
    try:
        addr = ipaddress.ip_address(value.strip())
        net = parse_ip_block(block)
    except ValueError:
        return False
    return addr.version == net.version and addr in net


def match_pair(
    positive: Sequence[str],
    negative: Sequence[str],
    value: str,
    matcher: Matcher = glob_match,
) -> bool:
    if positive and not any(matcher(p, value) for p in positive):
        return False
    if negative and any(matcher(n, value) for n in negative):
        return False
    return True


def match_source(src: Optional[Source], attrs: RequestAttributes) -> bool:
    if src is None:
        return True
    return (
        match_pair(src.principals, src.not_principals, attrs.principal)
        and match_pair(src.request_principals, src.not_request_principals, attrs.request_principal)
        and match_pair(src.namespaces, src.not_namespaces, attrs.namespace)
        and match_pair(src.ip_blocks, src.not_ip_blocks, attrs.source_ip, matcher=ip_match)
    )


def match_operation(op: Optional[Operation], attrs: RequestAttributes) -> bool:
    if op is None:
        return True
    port = str(attrs.port) if attrs.port is not None else ""
    return (
        match_pair(op.hosts, op.not_hosts, attrs.host)
        and match_pair(op.ports, op.not_ports, port)
        and match_pair(op.methods, op.not_methods, attrs.method)
        and match_pair(op.paths, op.not_paths, attrs.path)
    )


def match_condition(c: Condition, attrs: RequestAttributes) -> bool:
    actual = attrs.values_for(c.key)
    matcher: Matcher = ip_match if c.key in IP_KEYS else glob_match

    if c.values and not any(matcher(p, v) for p in c.values for v in actual):
        return False
    if c.not_values and any(matcher(p, v) for p in c.not_values for v in actual):
        return False
    return True


def match_rule(r: Rule, attrs: RequestAttributes) -> bool:
    from_ok = not r.from_ or any(match_source(f.source, attrs) for f in r.from_)
    to_ok = not r.to or any(match_operation(t.operation, attrs) for t in r.to)
    when_ok = all(match_condition(c, attrs) for c in r.when)
    return from_ok and to_ok and when_ok
