# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/meta.py

from __future__ import annotations

from typing import Any, ClassVar, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class IstioModel(BaseModel):
    """
    Base for every Istio wire type.

    Instances are immutable once loaded. Python attributes are snake_case,
    the wire form keeps the exact JSON names used by Kubernetes/Istio tooling.
    """

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "forbid",
    }

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    def deep_copy(self):
        return self.model_copy(deep=True)


class ObjectMeta(IstioModel):
    # creationTimestamp, uid, managedFields, ... are kept but not interpreted
    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "allow",
    }

    name: Optional[str] = None
    namespace: Optional[str] = None
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)
    generation: Optional[int] = None


class ListMeta(IstioModel):
    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "allow",
    }

    resource_version: Optional[str] = Field(default=None, alias="resourceVersion")
    continue_: Optional[str] = Field(default=None, alias="continue")


class IstioResource(IstioModel):
    """
    TypeMeta + ObjectMeta envelope shared by all custom resources.
    Subclasses declare `api_group`, a default `apiVersion`/`kind` and a `spec`.
    """

    api_group: ClassVar[str] = ""

    api_version: str = Field(alias="apiVersion")
    kind: str
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    # written by a controller; opaque here
    status: Optional[Dict[str, Any]] = None

    @field_validator("api_version")
    @classmethod
    def _check_group(cls, v: str) -> str:
        group = v.split("/", 1)[0] if "/" in v else ""
        if cls.api_group and group != cls.api_group:
            raise ValueError(
                f"apiVersion '{v}' does not belong to group '{cls.api_group}'"
            )
        return v

    @property
    def name(self) -> Optional[str]:
        return self.metadata.name

    @property
    def namespace(self) -> Optional[str]:
        return self.metadata.namespace

    def ref(self) -> str:
        """kind/namespace/name, used in logs and rejection reports."""
        return f"{self.kind}/{self.namespace or '-'}/{self.name or '-'}"
