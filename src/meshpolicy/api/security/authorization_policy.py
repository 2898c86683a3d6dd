# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/security/authorization_policy.py

from __future__ import annotations

from enum import Enum
from typing import ClassVar, List, Mapping, Optional

from pydantic import Field, field_validator

from ..meta import IstioModel, IstioResource, ListMeta
from ..selector import WorkloadSelector


class AuthorizationPolicyAction(str, Enum):
    ALLOW = "ALLOW"
    DENY = "DENY"


class Source(IstioModel):
    """
    Who sent the request. Each positive list narrows, each `not*` list excludes.
    An absent list leaves that attribute unconstrained.
    """

    principals: List[str] = Field(default_factory=list)
    not_principals: List[str] = Field(default_factory=list, alias="notPrincipals")
    request_principals: List[str] = Field(default_factory=list, alias="requestPrincipals")
    not_request_principals: List[str] = Field(default_factory=list, alias="notRequestPrincipals")
    namespaces: List[str] = Field(default_factory=list)
    not_namespaces: List[str] = Field(default_factory=list, alias="notNamespaces")
    ip_blocks: List[str] = Field(default_factory=list, alias="ipBlocks")
    not_ip_blocks: List[str] = Field(default_factory=list, alias="notIpBlocks")


class Operation(IstioModel):
    """What the request does: host, port, method and path, same paired structure as Source."""

    hosts: List[str] = Field(default_factory=list)
    not_hosts: List[str] = Field(default_factory=list, alias="notHosts")
    ports: List[str] = Field(default_factory=list)
    not_ports: List[str] = Field(default_factory=list, alias="notPorts")
    methods: List[str] = Field(default_factory=list)
    not_methods: List[str] = Field(default_factory=list, alias="notMethods")
    paths: List[str] = Field(default_factory=list)
    not_paths: List[str] = Field(default_factory=list, alias="notPaths")


class Condition(IstioModel):
    key: str = ""
    values: List[str] = Field(default_factory=list)
    not_values: List[str] = Field(default_factory=list, alias="notValues")


class RuleFrom(IstioModel):
    source: Optional[Source] = None


class RuleTo(IstioModel):
    operation: Optional[Operation] = None


class Rule(IstioModel):
    from_: List[RuleFrom] = Field(default_factory=list, alias="from")
    to: List[RuleTo] = Field(default_factory=list)
    when: List[Condition] = Field(default_factory=list)


class AuthorizationPolicySpec(IstioModel):
    selector: Optional[WorkloadSelector] = None
    rules: List[Rule] = Field(default_factory=list)
    action: AuthorizationPolicyAction = AuthorizationPolicyAction.ALLOW

    @field_validator("action", mode="before")
    @classmethod
    def _unset_is_allow(cls, v):
        # an empty or missing action means ALLOW
        if v is None or v == "":
            return AuthorizationPolicyAction.ALLOW
        return v


class AuthorizationPolicy(IstioResource):
    api_group: ClassVar[str] = "security.istio.io"

    api_version: str = Field(default="security.istio.io/v1beta1", alias="apiVersion")
    kind: str = "AuthorizationPolicy"
    spec: AuthorizationPolicySpec = Field(default_factory=AuthorizationPolicySpec)

    @property
    def action(self) -> AuthorizationPolicyAction:
        return self.spec.action

    def selects(self, labels: Optional[Mapping[str, str]]) -> bool:
        sel = self.spec.selector
        return sel is None or sel.matches(labels)


class AuthorizationPolicyList(IstioModel):
    api_version: str = Field(default="security.istio.io/v1beta1", alias="apiVersion")
    kind: str = "AuthorizationPolicyList"
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: List[AuthorizationPolicy] = Field(default_factory=list)
