# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/status.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import Field

from .meta import IstioModel


class IstioCondition(IstioModel):
    # controllers add their own fields next to the known ones
    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "allow",
    }

    type: str = ""
    status: str = ""
    last_probe_time: Optional[datetime] = None
    last_transition_time: Optional[datetime] = None
    reason: str = ""
    message: str = ""


class IstioStatus(IstioModel):
    """
    Written by a controller. Never read on the decision path.
    """

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "allow",
    }

    conditions: List[IstioCondition] = Field(default_factory=list)
    observed_generation: int = 0

    def get_condition(self, type_: str) -> Optional[IstioCondition]:
        for c in self.conditions:
            if c.type == type_:
                return c
        return None

    def set_condition(self, condition: IstioCondition) -> "IstioStatus":
        """
        Return a new status with `condition` replacing any condition of the same type.

        lastTransitionTime only moves when the status value actually changes.
        """
        now = datetime.now(timezone.utc)
        existing = self.get_condition(condition.type)

        if existing is not None and existing.status == condition.status:
            transition = existing.last_transition_time or now
        else:
            transition = condition.last_transition_time or now

        updated = condition.model_copy(
            update={
                "last_transition_time": transition,
                "last_probe_time": condition.last_probe_time or now,
            }
        )

        conditions = [c for c in self.conditions if c.type != condition.type]
        conditions.append(updated)
        return self.model_copy(update={"conditions": conditions})
