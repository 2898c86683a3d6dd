# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/security/peer_authentication.py

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Dict, List, Optional

from pydantic import Field

from ..meta import IstioModel, IstioResource, ListMeta
from ..selector import WorkloadSelector


class MTLSMode(str, Enum):
    UNSET = "UNSET"
    DISABLE = "DISABLE"
    PERMISSIVE = "PERMISSIVE"
    STRICT = "STRICT"


class PeerAuthenticationMTLS(IstioModel):
    mode: MTLSMode = MTLSMode.UNSET


class PeerAuthenticationSpec(IstioModel):
    selector: Optional[WorkloadSelector] = None
    mtls: Optional[PeerAuthenticationMTLS] = None
    # keyed by port number; YAML/JSON string keys are coerced to int
    port_level_mtls: Dict[int, PeerAuthenticationMTLS] = Field(default_factory=dict, alias="portLevelMtls")


class PeerAuthentication(IstioResource):
    api_group: ClassVar[str] = "security.istio.io"

    api_version: str = Field(default="security.istio.io/v1beta1", alias="apiVersion")
    kind: str = "PeerAuthentication"
    spec: PeerAuthenticationSpec = Field(default_factory=PeerAuthenticationSpec)

    def effective_mode(self, port: Optional[int] = None) -> MTLSMode:
        """
        Port-level setting first, then the workload-wide one.
        UNSET means "inherit from the parent scope", which is resolved outside this object.
        """
        if port is not None:
            per_port = self.spec.port_level_mtls.get(port)
            if per_port is not None and per_port.mode != MTLSMode.UNSET:
                return per_port.mode
        if self.spec.mtls is not None:
            return self.spec.mtls.mode
        return MTLSMode.UNSET


class PeerAuthenticationList(IstioModel):
    api_version: str = Field(default="security.istio.io/v1beta1", alias="apiVersion")
    kind: str = "PeerAuthenticationList"
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: List[PeerAuthentication] = Field(default_factory=list)
