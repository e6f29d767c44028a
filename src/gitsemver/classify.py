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

"""Bump classification of commit messages.

Checks run in this order; the first one that decides wins:

1. ``no-bump-message`` matches → ``NONE``.
2. Conventional-commit header: breaking → ``MAJOR``, ``feat`` →
   ``MINOR``, ``fix`` → ``PATCH``. A ``BREAKING CHANGE:`` anywhere in
   the message counts as breaking even without a conventional header.
3. ``major-``, ``minor-``, ``patch-version-bump-message``, in that
   order.
4. ``NONE``.

Custom patterns are searched anywhere in the full message. A pattern
that does not compile is reported once and then never matches.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from gitsemver.commit_parsing import (
    BREAKING_CHANGE_MARKER,
    BumpType,
    max_bump,
    parse_conventional_commit,
)
from gitsemver.config import Config
from gitsemver.logging import get_logger

logger = get_logger(__name__)


def _compile_optional(pattern: str, key: str) -> re.Pattern[str] | None:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        logger.warning(
            'bump_pattern_invalid',
            key=key,
            pattern=pattern,
            error=str(exc),
            hint=f'{key} is ignored until it is a valid regular expression.',
        )
        return None


@dataclass(frozen=True)
class BumpPatterns:
    """Compiled custom bump patterns; ``None`` means "never matches"."""

    major: re.Pattern[str] | None = None
    minor: re.Pattern[str] | None = None
    patch: re.Pattern[str] | None = None
    no_bump: re.Pattern[str] | None = None

    @classmethod
    def from_config(cls, config: Config) -> BumpPatterns:
        """Compile the four message patterns of a configuration."""
        return cls(
            major=_compile_optional(config.major_version_bump_message, 'major-version-bump-message'),
            minor=_compile_optional(config.minor_version_bump_message, 'minor-version-bump-message'),
            patch=_compile_optional(config.patch_version_bump_message, 'patch-version-bump-message'),
            no_bump=_compile_optional(config.no_bump_message, 'no-bump-message'),
        )


def classify(message: str, patterns: BumpPatterns) -> BumpType:
    """Return the bump class implied by one commit message."""
    if patterns.no_bump is not None and patterns.no_bump.search(message):
        return BumpType.NONE

    cc = parse_conventional_commit(message)
    if cc is not None and cc.bump is not BumpType.NONE:
        logger.debug('commit_classified', type=cc.type, scope=cc.scope, breaking=cc.breaking, bump=cc.bump.value)
        return cc.bump
    if BREAKING_CHANGE_MARKER in message:
        return BumpType.MAJOR

    for pattern, bump in (
        (patterns.major, BumpType.MAJOR),
        (patterns.minor, BumpType.MINOR),
        (patterns.patch, BumpType.PATCH),
    ):
        if pattern is not None and pattern.search(message):
            return bump
    return BumpType.NONE


def aggregate_bump(messages: Iterable[str], patterns: BumpPatterns) -> BumpType:
    """Return the strongest bump over a set of commit messages.

    Stops early once ``MAJOR`` is reached.
    """
    result = BumpType.NONE
    for message in messages:
        result = max_bump(result, classify(message, patterns))
        if result is BumpType.MAJOR:
            break
    return result


__all__ = [
    'BumpPatterns',
    'aggregate_bump',
    'classify',
]
