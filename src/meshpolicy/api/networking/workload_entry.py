# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/networking/workload_entry.py

from __future__ import annotations

from typing import ClassVar, Dict, List, Optional

from pydantic import Field

from ..meta import IstioModel, IstioResource, ListMeta
from ..status import IstioStatus


class WorkloadEntrySpec(IstioModel):
    address: str
    ports: Dict[str, int] = Field(default_factory=dict)
    labels: Dict[str, str] = Field(default_factory=dict)
    network: Optional[str] = None
    locality: Optional[str] = None
    weight: Optional[int] = Field(default=None, ge=0)
    service_account: Optional[str] = Field(default=None, alias="serviceAccount")


class WorkloadEntry(IstioResource):
    api_group: ClassVar[str] = "networking.istio.io"

    api_version: str = Field(default="networking.istio.io/v1alpha3", alias="apiVersion")
    kind: str = "WorkloadEntry"
    spec: WorkloadEntrySpec
    status: IstioStatus = Field(default_factory=IstioStatus)


class WorkloadEntryList(IstioModel):
    api_version: str = Field(default="networking.istio.io/v1alpha3", alias="apiVersion")
    kind: str = "WorkloadEntryList"
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: List[WorkloadEntry] = Field(default_factory=list)
