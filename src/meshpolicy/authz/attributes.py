# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/authz/attributes.py

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field, field_validator

AttributeValue = Union[str, Sequence[str]]

_HEADER_KEY = re.compile(r"^request\.headers\[(.+)\]$")

# condition keys whose values are addresses and compare by CIDR membership
IP_KEYS = frozenset({"source.ip", "remote.ip", "destination.ip"})


def _scalar_text(value: Any) -> Any:
    # YAML and JWT claims carry numbers and booleans; match against their text form
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


def _as_list(value: Optional[AttributeValue]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


@dataclass(frozen=True)
class Workload:
    """The workload a request is addressed to."""

    namespace: Optional[str] = None
    labels: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RequestAttributes:
    """
    Everything the evaluator knows about one request.

    The well-known fields back Source/Operation matching; `attributes` carries
    arbitrary named, possibly multi-valued values such as JWT claims
    (`request.auth.claims[iss]`) for `when` conditions.
    """

    principal: str = ""
    request_principal: str = ""
    namespace: str = ""
    source_ip: str = ""
    host: str = ""
    port: Optional[int] = None
    method: str = ""
    path: str = ""
    destination_ip: str = ""
    headers: Mapping[str, AttributeValue] = field(default_factory=dict)
    attributes: Mapping[str, AttributeValue] = field(default_factory=dict)

    def values_for(self, key: str) -> List[str]:
        """
        Resolve a condition key to the request's values; an unknown key yields [].
        """
        builtin = {
            "source.ip": self.source_ip,
            "remote.ip": self.source_ip,
            "source.namespace": self.namespace,
            "source.principal": self.principal,
            "request.auth.principal": self.request_principal,
            "destination.ip": self.destination_ip,
            "destination.port": str(self.port) if self.port is not None else "",
        }
        if key in builtin:
            value = builtin[key]
            return [value] if value else []

        m = _HEADER_KEY.match(key)
        if m:
            wanted = m.group(1).lower()
            for name, value in self.headers.items():
                if name.lower() == wanted:
                    return _as_list(value)
            return []

        return _as_list(self.attributes.get(key))


class RequestAttributesDocument(BaseModel):
    """YAML/JSON form of a request, as read by the CLI."""

    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
    }

    principal: str = ""
    request_principal: str = Field(default="", alias="requestPrincipal")
    namespace: str = ""
    source_ip: str = Field(default="", alias="sourceIp")
    host: str = ""
    port: Optional[int] = None
    method: str = ""
    path: str = ""
    destination_ip: str = Field(default="", alias="destinationIp")
    headers: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)
    attributes: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)

    workload_namespace: Optional[str] = Field(default=None, alias="workloadNamespace")
    workload_labels: Dict[str, str] = Field(default_factory=dict, alias="workloadLabels")

    @field_validator("headers", "attributes", mode="before")
    @classmethod
    def _stringify_values(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        return {
            k: [_scalar_text(i) for i in val] if isinstance(val, list) else _scalar_text(val)
            for k, val in v.items()
        }

    @field_validator("workload_labels", mode="before")
    @classmethod
    def _stringify_labels(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        return {k: _scalar_text(val) for k, val in v.items()}

    def to_attributes(self) -> RequestAttributes:
        return RequestAttributes(
            principal=self.principal,
            request_principal=self.request_principal,
            namespace=self.namespace,
            source_ip=self.source_ip,
            host=self.host,
            port=self.port,
            method=self.method,
            path=self.path,
            destination_ip=self.destination_ip,
            headers=dict(self.headers),
            attributes=dict(self.attributes),
        )

    def to_workload(self) -> Workload:
        return Workload(namespace=self.workload_namespace, labels=dict(self.workload_labels))
