# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/observers/__init__.py

from .dispatcher import EventBus

__all__ = ["EventBus"]
