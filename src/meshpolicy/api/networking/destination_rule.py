# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/networking/destination_rule.py

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Dict, List, Optional, Union

from pydantic import Field, model_validator

from ..common import PortSelector
from ..meta import IstioModel, IstioResource, ListMeta


class SimpleLB(str, Enum):
    ROUND_ROBIN = "ROUND_ROBIN"
    LEAST_CONN = "LEAST_CONN"
    RANDOM = "RANDOM"
    PASSTHROUGH = "PASSTHROUGH"


class H2UpgradePolicy(str, Enum):
    DEFAULT = "DEFAULT"
    DO_NOT_UPGRADE = "DO_NOT_UPGRADE"
    UPGRADE = "UPGRADE"


class TLSmode(str, Enum):
    DISABLE = "DISABLE"
    SIMPLE = "SIMPLE"
    MUTUAL = "MUTUAL"
    ISTIO_MUTUAL = "ISTIO_MUTUAL"


# -----------------------------
# Load balancing
# -----------------------------

class HTTPCookie(IstioModel):
    name: str
    path: Optional[str] = None
    ttl: str


class ConsistentHashLB(IstioModel):
    http_header_name: Optional[str] = Field(default=None, alias="httpHeaderName")
    http_cookie: Optional[HTTPCookie] = Field(default=None, alias="httpCookie")
    use_source_ip: Optional[bool] = Field(default=None, alias="useSourceIp")
    minimum_ring_size: Optional[int] = Field(default=None, alias="minimumRingSize", ge=0)

    @model_validator(mode="after")
    def _one_hash_key(self) -> "ConsistentHashLB":
        keys = [
            k for k, v in (
                ("httpHeaderName", self.http_header_name),
                ("httpCookie", self.http_cookie),
                ("useSourceIp", self.use_source_ip),
            )
            if v is not None
        ]
        if len(keys) != 1:
            raise ValueError(
                "consistentHash needs exactly one of httpHeaderName, httpCookie, useSourceIp"
                f" (got {keys or 'none'})"
            )
        return self


class SimpleLoadBalancer(IstioModel):
    simple: SimpleLB


class ConsistentHashLoadBalancer(IstioModel):
    consistent_hash: ConsistentHashLB = Field(alias="consistentHash")


LoadBalancerSettings = Union[SimpleLoadBalancer, ConsistentHashLoadBalancer]


# -----------------------------
# Connection pool / outlier detection / TLS
# -----------------------------

class TCPKeepalive(IstioModel):
    probes: Optional[int] = Field(default=None, ge=0)
    time: Optional[str] = None
    interval: Optional[str] = None


class TCPSettings(IstioModel):
    max_connections: Optional[int] = Field(default=None, alias="maxConnections")
    connect_timeout: Optional[str] = Field(default=None, alias="connectTimeout")
    tcp_keepalive: Optional[TCPKeepalive] = Field(default=None, alias="tcpKeepalive")


class HTTPSettings(IstioModel):
    http1_max_pending_requests: Optional[int] = Field(default=None, alias="http1MaxPendingRequests")
    http2_max_requests: Optional[int] = Field(default=None, alias="http2MaxRequests")
    max_requests_per_connection: Optional[int] = Field(default=None, alias="maxRequestsPerConnection")
    max_retries: Optional[int] = Field(default=None, alias="maxRetries")
    idle_timeout: Optional[str] = Field(default=None, alias="idleTimeout")
    h2_upgrade_policy: Optional[H2UpgradePolicy] = Field(default=None, alias="h2UpgradePolicy")


class ConnectionPoolSettings(IstioModel):
    tcp: Optional[TCPSettings] = None
    http: Optional[HTTPSettings] = None


class OutlierDetection(IstioModel):
    # deprecated upstream in favour of consecutive5xxErrors, still accepted
    consecutive_errors: Optional[int] = Field(default=None, alias="consecutiveErrors")
    consecutive_gateway_errors: Optional[int] = Field(default=None, alias="consecutiveGatewayErrors", ge=0)
    consecutive_5xx_errors: Optional[int] = Field(default=None, alias="consecutive5xxErrors", ge=0)
    interval: Optional[str] = None
    base_ejection_time: Optional[str] = Field(default=None, alias="baseEjectionTime")
    max_ejection_percent: Optional[int] = Field(default=None, alias="maxEjectionPercent", ge=0, le=100)
    min_health_percent: Optional[int] = Field(default=None, alias="minHealthPercent", ge=0, le=100)


class TLSSettings(IstioModel):
    mode: TLSmode
    client_certificate: Optional[str] = Field(default=None, alias="clientCertificate")
    private_key: Optional[str] = Field(default=None, alias="privateKey")
    ca_certificates: Optional[str] = Field(default=None, alias="caCertificates")
    subject_alt_names: List[str] = Field(default_factory=list, alias="subjectAltNames")
    sni: Optional[str] = None

    @model_validator(mode="after")
    def _mutual_needs_certs(self) -> "TLSSettings":
        if self.mode == TLSmode.MUTUAL and not (self.client_certificate and self.private_key):
            raise ValueError("tls mode MUTUAL requires clientCertificate and privateKey")
        return self


# -----------------------------
# Traffic policy
# -----------------------------

class TrafficPolicyCommon(IstioModel):
    load_balancer: Optional[LoadBalancerSettings] = Field(default=None, alias="loadBalancer")
    connection_pool: Optional[ConnectionPoolSettings] = Field(default=None, alias="connectionPool")
    outlier_detection: Optional[OutlierDetection] = Field(default=None, alias="outlierDetection")
    tls: Optional[TLSSettings] = None


class PortTrafficPolicy(TrafficPolicyCommon):
    port: Optional[PortSelector] = None


class TrafficPolicy(TrafficPolicyCommon):
    port_level_settings: List[PortTrafficPolicy] = Field(default_factory=list, alias="portLevelSettings")

    def for_port(self, port: int) -> TrafficPolicyCommon:
        """Port-level settings win over the top-level ones when the port matches."""
        for p in self.port_level_settings:
            if p.port is not None and p.port.number == port:
                return p
        return self


class Subset(IstioModel):
    name: str
    labels: Dict[str, str] = Field(default_factory=dict)
    traffic_policy: Optional[TrafficPolicy] = Field(default=None, alias="trafficPolicy")


class DestinationRuleSpec(IstioModel):
    host: str
    traffic_policy: Optional[TrafficPolicy] = Field(default=None, alias="trafficPolicy")
    subsets: List[Subset] = Field(default_factory=list)
    export_to: List[str] = Field(default_factory=list, alias="exportTo")

    def subset(self, name: str) -> Optional[Subset]:
        return next((s for s in self.subsets if s.name == name), None)


class DestinationRule(IstioResource):
    api_group: ClassVar[str] = "networking.istio.io"

    api_version: str = Field(default="networking.istio.io/v1alpha3", alias="apiVersion")
    kind: str = "DestinationRule"
    spec: DestinationRuleSpec


class DestinationRuleList(IstioModel):
    api_version: str = Field(default="networking.istio.io/v1alpha3", alias="apiVersion")
    kind: str = "DestinationRuleList"
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: List[DestinationRule] = Field(default_factory=list)
