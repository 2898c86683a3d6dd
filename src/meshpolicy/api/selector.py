# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/selector.py

from __future__ import annotations

from typing import Dict, Mapping, Optional

from pydantic import Field

from .meta import IstioModel


def labels_match(selector: Mapping[str, str], labels: Optional[Mapping[str, str]]) -> bool:
    """
    True iff every selector label is present on the workload with the same value.
    An empty selector selects everything.
    """
    labels = labels or {}
    return all(labels.get(k) == v for k, v in selector.items())


class WorkloadSelector(IstioModel):
    """Selector used by the security resources (`matchLabels`)."""

    match_labels: Dict[str, str] = Field(default_factory=dict, alias="matchLabels")

    def matches(self, labels: Optional[Mapping[str, str]]) -> bool:
        return labels_match(self.match_labels, labels)
