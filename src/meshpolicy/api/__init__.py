# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/__init__.py

from .networking import (
    DestinationRule,
    Sidecar,
    VirtualService,
    WorkloadEntry,
    WorkloadGroup,
)
from .security import (
    AuthorizationPolicy,
    PeerAuthentication,
    RequestAuthentication,
)

# kind -> model, used by the document loader
KINDS = {
    cls.model_fields["kind"].default: cls
    for cls in (
        AuthorizationPolicy,
        PeerAuthentication,
        RequestAuthentication,
        DestinationRule,
        VirtualService,
        Sidecar,
        WorkloadEntry,
        WorkloadGroup,
    )
}

__all__ = [
    "KINDS",
    "AuthorizationPolicy",
    "DestinationRule",
    "PeerAuthentication",
    "RequestAuthentication",
    "Sidecar",
    "VirtualService",
    "WorkloadEntry",
    "WorkloadGroup",
]
