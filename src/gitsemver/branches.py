# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Branch policy lookup.

Each key of ``[branches]`` is a regular expression searched (not
anchored) in the branch name. When several patterns match, the longest
pattern string is taken as the most specific one::

    ┌────────────────────────────┬──────────────────┬────────────┐
    │ Branch                     │ Patterns matched │ Winner     │
    ├────────────────────────────┼──────────────────┼────────────┤
    │ feature/login              │ feature, ^feat.+/│ ^feat.+/   │
    │ release/1.2.0              │ release/*, rel   │ release/*  │
    │ main                       │ (none)           │ None       │
    └────────────────────────────┴──────────────────┴────────────┘

Equal-length matches are resolved by the lexicographically smallest
pattern, so the result never depends on the order of the table.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Mapping
from dataclasses import dataclass

from gitsemver.config import BranchPolicy
from gitsemver.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class BranchMatch:
    """The policy selected for a branch and the pattern that selected it."""

    pattern: str
    policy: BranchPolicy


@functools.lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern)
    except re.error as exc:
        logger.warning('branch_pattern_invalid', pattern=pattern, error=str(exc))
        return None


def match_branch(branch_name: str, branches: Mapping[str, BranchPolicy]) -> BranchMatch | None:
    """Return the most specific policy whose pattern matches ``branch_name``.

    Args:
        branch_name: Short branch name, e.g. ``"feature/login"``.
        branches: Pattern to policy mapping from the configuration.

    Returns:
        The winning :class:`BranchMatch`, or ``None`` if no pattern
        matches. Invalid patterns are skipped.
    """
    best: str | None = None
    for pattern in branches:
        compiled = _compile(pattern)
        if compiled is None or not compiled.search(branch_name):
            continue
        if best is None or len(pattern) > len(best):
            best = pattern
        elif len(pattern) == len(best) and pattern < best:
            best = pattern
    if best is None:
        return None
    return BranchMatch(pattern=best, policy=branches[best])


__all__ = [
    'BranchMatch',
    'match_branch',
]
