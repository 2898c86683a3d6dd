# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/security/request_authentication.py

from __future__ import annotations

from typing import ClassVar, List, Optional

from pydantic import Field

from ..meta import IstioModel, IstioResource, ListMeta
from ..selector import WorkloadSelector


class JWTHeader(IstioModel):
    name: str
    prefix: Optional[str] = None


class JWTRule(IstioModel):
    issuer: str
    audiences: List[str] = Field(default_factory=list)
    jwks_uri: Optional[str] = Field(default=None, alias="jwksUri")
    jwks: Optional[str] = None
    from_headers: List[JWTHeader] = Field(default_factory=list, alias="fromHeaders")
    from_params: List[str] = Field(default_factory=list, alias="fromParams")
    output_payload_to_header: Optional[str] = Field(default=None, alias="outputPayloadToHeader")
    forward_original_token: Optional[bool] = Field(default=None, alias="forwardOriginalToken")


class RequestAuthenticationSpec(IstioModel):
    selector: Optional[WorkloadSelector] = None
    jwt_rules: List[JWTRule] = Field(default_factory=list, alias="jwtRules")

    def issuers(self) -> List[str]:
        return [r.issuer for r in self.jwt_rules]


class RequestAuthentication(IstioResource):
    api_group: ClassVar[str] = "security.istio.io"

    api_version: str = Field(default="security.istio.io/v1beta1", alias="apiVersion")
    kind: str = "RequestAuthentication"
    spec: RequestAuthenticationSpec = Field(default_factory=RequestAuthenticationSpec)


class RequestAuthenticationList(IstioModel):
    api_version: str = Field(default="security.istio.io/v1beta1", alias="apiVersion")
    kind: str = "RequestAuthenticationList"
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: List[RequestAuthentication] = Field(default_factory=list)
