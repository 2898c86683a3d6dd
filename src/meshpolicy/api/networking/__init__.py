# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/networking/__init__.py

from .destination_rule import DestinationRule, DestinationRuleList
from .sidecar import Sidecar, SidecarList
from .virtual_service import VirtualService, VirtualServiceList
from .workload_entry import WorkloadEntry, WorkloadEntryList
from .workload_group import WorkloadGroup, WorkloadGroupList

__all__ = [
    "DestinationRule",
    "DestinationRuleList",
    "Sidecar",
    "SidecarList",
    "VirtualService",
    "VirtualServiceList",
    "WorkloadEntry",
    "WorkloadEntryList",
    "WorkloadGroup",
    "WorkloadGroupList",
]
