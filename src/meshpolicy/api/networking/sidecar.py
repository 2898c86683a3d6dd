# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/networking/sidecar.py

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Dict, List, Mapping, Optional

from pydantic import Field

from ..meta import IstioModel, IstioResource, ListMeta
from ..selector import labels_match


class CaptureMode(str, Enum):
    DEFAULT = "DEFAULT"
    IPTABLES = "IPTABLES"
    NONE = "NONE"


class OutboundTrafficPolicyMode(str, Enum):
    REGISTRY_ONLY = "REGISTRY_ONLY"
    ALLOW_ANY = "ALLOW_ANY"


class Port(IstioModel):
    number: int = Field(ge=0, le=65535)
    protocol: Optional[str] = None
    name: Optional[str] = None
    target_port: Optional[int] = Field(default=None, alias="targetPort")


class SidecarWorkloadSelector(IstioModel):
    """Sidecar selects with plain `labels`, unlike the security resources."""

    labels: Dict[str, str] = Field(default_factory=dict)

    def matches(self, labels: Optional[Mapping[str, str]]) -> bool:
        return labels_match(self.labels, labels)


class OutboundTrafficPolicy(IstioModel):
    mode: Optional[OutboundTrafficPolicyMode] = None


class IstioIngressListener(IstioModel):
    port: Port
    bind: Optional[str] = None
    capture_mode: Optional[CaptureMode] = Field(default=None, alias="captureMode")
    default_endpoint: str = Field(alias="defaultEndpoint")


class IstioEgressListener(IstioModel):
    port: Optional[Port] = None
    bind: Optional[str] = None
    capture_mode: Optional[CaptureMode] = Field(default=None, alias="captureMode")
    hosts: List[str]


class SidecarSpec(IstioModel):
    workload_selector: Optional[SidecarWorkloadSelector] = Field(default=None, alias="workloadSelector")
    ingress: List[IstioIngressListener] = Field(default_factory=list)
    egress: List[IstioEgressListener] = Field(default_factory=list)
    outbound_traffic_policy: Optional[OutboundTrafficPolicy] = Field(default=None, alias="outboundTrafficPolicy")


class Sidecar(IstioResource):
    api_group: ClassVar[str] = "networking.istio.io"

    api_version: str = Field(default="networking.istio.io/v1beta1", alias="apiVersion")
    kind: str = "Sidecar"
    spec: SidecarSpec

    def applies_to(self, labels: Optional[Mapping[str, str]]) -> bool:
        sel = self.spec.workload_selector
        return sel is None or sel.matches(labels)


class SidecarList(IstioModel):
    api_version: str = Field(default="networking.istio.io/v1beta1", alias="apiVersion")
    kind: str = "SidecarList"
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: List[Sidecar] = Field(default_factory=list)
