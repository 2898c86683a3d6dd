# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/networking/workload_group.py

from __future__ import annotations

from typing import ClassVar, Dict, List, Optional

from pydantic import Field, model_validator

from ..meta import IstioModel, IstioResource, ListMeta
from .workload_entry import WorkloadEntrySpec


class WorkloadGroupObjectMeta(IstioModel):
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)


class HTTPHeader(IstioModel):
    name: Optional[str] = None
    value: Optional[str] = None


class HTTPHealthCheckConfig(IstioModel):
    path: Optional[str] = None
    port: int = Field(ge=0, le=65535)
    host: Optional[str] = None
    scheme: Optional[str] = None
    http_headers: List[HTTPHeader] = Field(default_factory=list)


class TCPHealthCheckConfig(IstioModel):
    host: Optional[str] = None
    port: int = Field(ge=0, le=65535)


class ExecHealthCheckConfig(IstioModel):
    command: List[str] = Field(default_factory=list)


class ReadinessProbe(IstioModel):
    # probe fields keep their snake_case wire names
    initial_delay_seconds: Optional[int] = None
    timeout_seconds: Optional[int] = None
    period_seconds: Optional[int] = None
    success_threshold: Optional[int] = None
    failure_threshold: Optional[int] = None
    http_get: Optional[HTTPHealthCheckConfig] = None
    tcp_socket: Optional[TCPHealthCheckConfig] = None
    exec: Optional[ExecHealthCheckConfig] = None

    @model_validator(mode="after")
    def _one_health_check(self) -> "ReadinessProbe":
        set_ = [n for n in ("http_get", "tcp_socket", "exec") if getattr(self, n) is not None]
        if len(set_) > 1:
            raise ValueError(f"probe accepts one of http_get, tcp_socket, exec (got {set_})")
        return self


class WorkloadGroupSpec(IstioModel):
    metadata: Optional[WorkloadGroupObjectMeta] = None
    template: WorkloadEntrySpec
    probe: Optional[ReadinessProbe] = None


class WorkloadGroup(IstioResource):
    api_group: ClassVar[str] = "networking.istio.io"

    api_version: str = Field(default="networking.istio.io/v1alpha3", alias="apiVersion")
    kind: str = "WorkloadGroup"
    spec: WorkloadGroupSpec


class WorkloadGroupList(IstioModel):
    api_version: str = Field(default="networking.istio.io/v1alpha3", alias="apiVersion")
    kind: str = "WorkloadGroupList"
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: List[WorkloadGroup] = Field(default_factory=list)
