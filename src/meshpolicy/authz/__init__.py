# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/authz/__init__.py

from .attributes import RequestAttributes, Workload
from .evaluator import Decision, DecisionResult, decide, evaluate
from .matchers import glob_match, match_condition, match_operation, match_pair, match_rule, match_source
from .snapshot import PolicySnapshot, PolicyStore

__all__ = [
    "Decision",
    "DecisionResult",
    "PolicySnapshot",
    "PolicyStore",
    "RequestAttributes",
    "Workload",
    "decide",
    "evaluate",
    "glob_match",
    "match_condition",
    "match_operation",
    "match_pair",
    "match_rule",
    "match_source",
]
