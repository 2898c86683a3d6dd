# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/config/models.py

from typing import List, Optional
from pydantic import BaseModel, Field


class MeshPolicyConfig(BaseModel):
    # namespaces whose policies apply mesh-wide
    root_namespaces: List[str] = Field(default_factory=lambda: ["istio-system"])

    # manifest files or directories loaded into the snapshot
    policy_paths: List[str] = Field(default_factory=list)

    log_dir: Optional[str] = None
    verbose: bool = False

    # optional JSONL event log
    events_file: Optional[str] = None

    model_config = {
        "extra": "forbid",
    }
