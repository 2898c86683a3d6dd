# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/security/__init__.py

from .authorization_policy import (
    AuthorizationPolicy,
    AuthorizationPolicyAction,
    AuthorizationPolicyList,
    Condition,
    Operation,
    Rule,
    RuleFrom,
    RuleTo,
    Source,
)
from .peer_authentication import MTLSMode, PeerAuthentication, PeerAuthenticationList
from .request_authentication import RequestAuthentication, RequestAuthenticationList

__all__ = [
    "AuthorizationPolicy",
    "AuthorizationPolicyAction",
    "AuthorizationPolicyList",
    "Condition",
    "MTLSMode",
    "Operation",
    "PeerAuthentication",
    "PeerAuthenticationList",
    "RequestAuthentication",
    "RequestAuthenticationList",
    "Rule",
    "RuleFrom",
    "RuleTo",
    "Source",
]
