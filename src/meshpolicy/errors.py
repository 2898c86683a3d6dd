# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/errors.py

from __future__ import annotations

from typing import List, Optional


class MeshPolicyError(RuntimeError):
    """Base class for meshpolicy failures."""


class MalformedPolicyError(MeshPolicyError, ValueError):
    """Raised at load time when a document cannot enter the active snapshot."""

    def __init__(self, ref: str, problems: List[str]):
        self.ref = ref
        self.problems = list(problems)
        super().__init__(f"{ref}: " + "; ".join(self.problems))


class UnknownKindError(MalformedPolicyError):
    """Raised when a document's kind is not one of the supported Istio types."""

    def __init__(self, ref: str, kind: Optional[str]):
        self.kind = kind
        super().__init__(ref, [f"unsupported kind '{kind}'"])


class ConfigError(MeshPolicyError):
    """Raised when the meshpolicy configuration file is unusable."""
