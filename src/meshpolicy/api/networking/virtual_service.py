# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/networking/virtual_service.py

from __future__ import annotations

from typing import ClassVar, Dict, List, Optional

from pydantic import Field

from ..common import PortSelector, StringMatch
from ..meta import IstioModel, IstioResource, ListMeta


class Percentage(IstioModel):
    value: float = Field(ge=0, le=100)


class HeaderOperations(IstioModel):
    set: Dict[str, str] = Field(default_factory=dict)
    add: Dict[str, str] = Field(default_factory=dict)
    remove: List[str] = Field(default_factory=list)


class Headers(IstioModel):
    request: Optional[HeaderOperations] = None
    response: Optional[HeaderOperations] = None


class HTTPMatchRequest(IstioModel):
    # match fields use StringMatch (exact/prefix/suffix/regex), not the
    # glob convention of AuthorizationPolicy rules
    name: Optional[str] = None
    uri: Optional[StringMatch] = None
    scheme: Optional[StringMatch] = None
    method: Optional[StringMatch] = None
    authority: Optional[StringMatch] = None
    headers: Dict[str, StringMatch] = Field(default_factory=dict)
    port: Optional[int] = Field(default=None, ge=0)
    source_labels: Dict[str, str] = Field(default_factory=dict, alias="sourceLabels")
    query_params: Dict[str, StringMatch] = Field(default_factory=dict, alias="queryParams")
    ignore_uri_case: Optional[bool] = Field(default=None, alias="ignoreUriCase")


class Destination(IstioModel):
    host: str
    subset: Optional[str] = None
    port: Optional[PortSelector] = None


class HTTPRouteDestination(IstioModel):
    destination: Destination
    weight: Optional[int] = Field(default=None, ge=0, le=100)
    headers: Optional[Headers] = None


class RouteDestination(IstioModel):
    destination: Destination
    weight: Optional[int] = Field(default=None, ge=0, le=100)


class HTTPRedirect(IstioModel):
    uri: Optional[str] = None
    authority: Optional[str] = None
    redirect_code: Optional[int] = Field(default=None, alias="redirectCode")


class HTTPRewrite(IstioModel):
    uri: Optional[str] = None
    authority: Optional[str] = None


class HTTPRetry(IstioModel):
    attempts: int = Field(ge=0)
    per_try_timeout: str = Field(alias="perTryTimeout")
    retry_on: Optional[str] = Field(default=None, alias="retryOn")


class CorsPolicy(IstioModel):
    allow_origin: List[str] = Field(default_factory=list, alias="allowOrigin")
    allow_methods: List[str] = Field(default_factory=list, alias="allowMethods")
    allow_headers: List[str] = Field(default_factory=list, alias="allowHeaders")
    expose_headers: List[str] = Field(default_factory=list, alias="exposeHeaders")
    max_age: Optional[str] = Field(default=None, alias="maxAge")
    allow_credentials: Optional[bool] = Field(default=None, alias="allowCredentials")


class Delay(IstioModel):
    fixed_delay: str = Field(alias="fixedDelay")
    percentage: Optional[Percentage] = None


class Abort(IstioModel):
    http_status: int = Field(alias="httpStatus")
    percentage: Optional[Percentage] = None


class HTTPFaultInjection(IstioModel):
    delay: Optional[Delay] = None
    abort: Optional[Abort] = None


class HTTPRoute(IstioModel):
    name: Optional[str] = None
    match: List[HTTPMatchRequest] = Field(default_factory=list)
    route: List[HTTPRouteDestination] = Field(default_factory=list)
    redirect: Optional[HTTPRedirect] = None
    rewrite: Optional[HTTPRewrite] = None
    timeout: Optional[str] = None
    retries: Optional[HTTPRetry] = None
    fault: Optional[HTTPFaultInjection] = None
    mirror: Optional[Destination] = None
    mirror_percent: Optional[int] = Field(default=None, alias="mirrorPercent", ge=0, le=100)
    mirror_percentage: Optional[Percentage] = Field(default=None, alias="mirrorPercentage")
    cors_policy: Optional[CorsPolicy] = Field(default=None, alias="corsPolicy")
    headers: Optional[Headers] = None


class L4MatchAttributes(IstioModel):
    destination_subnets: List[str] = Field(default_factory=list, alias="destinationSubnets")
    port: Optional[int] = None
    source_labels: Dict[str, str] = Field(default_factory=dict, alias="sourceLabels")
    gateways: List[str] = Field(default_factory=list)


class TLSMatchAttributes(IstioModel):
    sni_hosts: List[str] = Field(alias="sniHosts")
    destination_subnets: List[str] = Field(default_factory=list, alias="destinationSubnets")
    port: Optional[int] = None
    source_labels: Dict[str, str] = Field(default_factory=dict, alias="sourceLabels")
    gateways: List[str] = Field(default_factory=list)


class TCPRoute(IstioModel):
    match: List[L4MatchAttributes] = Field(default_factory=list)
    route: List[RouteDestination] = Field(default_factory=list)


class TLSRoute(IstioModel):
    match: List[TLSMatchAttributes] = Field(default_factory=list)
    route: List[RouteDestination] = Field(default_factory=list)


class VirtualServiceSpec(IstioModel):
    hosts: List[str]
    gateways: List[str] = Field(default_factory=list)
    http: List[HTTPRoute] = Field(default_factory=list)
    tls: List[TLSRoute] = Field(default_factory=list)
    tcp: List[TCPRoute] = Field(default_factory=list)
    export_to: List[str] = Field(default_factory=list, alias="exportTo")


class VirtualService(IstioResource):
    api_group: ClassVar[str] = "networking.istio.io"

    api_version: str = Field(default="networking.istio.io/v1beta1", alias="apiVersion")
    kind: str = "VirtualService"
    spec: VirtualServiceSpec


class VirtualServiceList(IstioModel):
    api_version: str = Field(default="networking.istio.io/v1beta1", alias="apiVersion")
    kind: str = "VirtualServiceList"
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: List[VirtualService] = Field(default_factory=list)
