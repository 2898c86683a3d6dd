# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/api/common.py

from __future__ import annotations

import re
from typing import Union

from pydantic import field_validator

from .meta import IstioModel


# -----------------------------
# StringMatch (one-of)
# -----------------------------
# Each variant forbids extra keys, so a document carrying zero or several of
# exact/prefix/suffix/regex cannot validate as any member of the union.

class ExactMatch(IstioModel):
    exact: str

    def matches(self, value: str) -> bool:
        return value == self.exact


class PrefixMatch(IstioModel):
    prefix: str

    def matches(self, value: str) -> bool:
        return value.startswith(self.prefix)


class SuffixMatch(IstioModel):
    suffix: str

    def matches(self, value: str) -> bool:
        return value.endswith(self.suffix)


class RegexMatch(IstioModel):
    regex: str

    @field_validator("regex")
    @classmethod
    def _compiles(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid regex {v!r}: {e}") from e
        return v

    def matches(self, value: str) -> bool:
        return re.fullmatch(self.regex, value) is not None


StringMatch = Union[ExactMatch, PrefixMatch, SuffixMatch, RegexMatch]


class PortSelector(IstioModel):
    number: int
