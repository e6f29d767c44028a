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

"""Semantic version helpers built on the ``semver`` package.

Key Concepts::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ Meaning here                                   │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Cleaned tag name    │ Tag name with the ``tag-prefix`` regex removed │
    │                     │ from its start: ``v1.2.0`` → ``1.2.0``.        │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Precedence weight   │ Integer per pre-release label. With weights   │
    │                     │ ``alpha=10, beta=5`` an ``alpha`` build ranks │
    │                     │ above a ``beta`` build of the same version.   │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Patch increment     │ Drops a pre-release without bumping:          │
    │                     │ ``1.0.1-rc.2`` → ``1.0.1``.                    │
    └─────────────────────┴────────────────────────────────────────────────┘
"""

from __future__ import annotations

import functools
import re
from collections.abc import Callable, Mapping
from typing import Any

from semver import Version

from gitsemver.commit_parsing import BumpType

__all__ = [
    'Version',
    'compare_precedence',
    'format_version',
    'increment_version',
    'parse_tag_version',
    'parse_version',
    'precedence_key',
]


def parse_version(text: str) -> Version | None:
    """Parse a version string leniently.

    Missing minor or patch parts default to zero (``1.2`` → ``1.2.0``).

    Returns:
        The parsed version, or ``None`` if ``text`` is not a version.
    """
    try:
        return Version.parse(text.strip(), optional_minor_and_patch=True)
    except (ValueError, TypeError):
        return None


@functools.lru_cache(maxsize=64)
def _prefix_pattern(tag_prefix: str) -> re.Pattern[str]:
    return re.compile(f'^(?:{tag_prefix})')


def parse_tag_version(tag_name: str, tag_prefix: str) -> Version | None:
    """Strip ``tag_prefix`` from the start of a tag name and parse the rest.

    >>> str(parse_tag_version('v1.2.0', '[vV]'))
    '1.2.0'
    >>> parse_tag_version('latest', '[vV]') is None
    True
    """
    cleaned = _prefix_pattern(tag_prefix).sub('', tag_name, count=1) if tag_prefix else tag_name
    return parse_version(cleaned)


def format_version(version: Version) -> str:
    """Render ``major.minor.patch[-prerelease]``, without build metadata."""
    return str(version.replace(build=None))


def _first_label(prerelease: str) -> str:
    return prerelease.split('.', 1)[0]


def compare_precedence(a: Version, b: Version, weights: Mapping[str, int] | None = None) -> int:
    """Compare two versions, honouring pre-release label weights.

    Numeric parts compare first. With equal numbers a release outranks
    any pre-release. Between two pre-releases whose first labels both
    have a weight, the higher weight wins; in every other case (labels
    unweighted, or equal weights) plain semver precedence applies.

    Returns:
        A negative number, zero or a positive number, like ``cmp``.
    """
    numeric_a = (a.major, a.minor, a.patch)
    numeric_b = (b.major, b.minor, b.patch)
    if numeric_a != numeric_b:
        return -1 if numeric_a < numeric_b else 1

    if not a.prerelease or not b.prerelease:
        if a.prerelease == b.prerelease:
            return 0
        return 1 if not a.prerelease else -1

    if weights:
        weight_a = weights.get(_first_label(a.prerelease))
        weight_b = weights.get(_first_label(b.prerelease))
        if weight_a is not None and weight_b is not None and weight_a != weight_b:
            return 1 if weight_a > weight_b else -1

    # Build metadata never affects precedence.
    return a.replace(build=None).compare(b.replace(build=None))


def precedence_key(weights: Mapping[str, int] | None = None) -> Callable[[Version], Any]:
    """Return a sort key for :func:`compare_precedence` (for ``max``/``sorted``)."""
    return functools.cmp_to_key(lambda a, b: compare_precedence(a, b, weights))


def increment_version(version: Version, bump: BumpType) -> Version:
    """Apply a bump class to a version.

    Major and minor bumps always move the number and reset the lower
    parts. A patch bump of a pre-release only drops the pre-release,
    since ``1.0.1-rc.1`` already precedes ``1.0.1``. Build metadata is
    always dropped.
    """
    if bump is BumpType.MAJOR:
        return Version(version.major + 1, 0, 0)
    if bump is BumpType.MINOR:
        return Version(version.major, version.minor + 1, 0)
    if bump is BumpType.PATCH:
        if version.prerelease:
            return Version(version.major, version.minor, version.patch)
        return Version(version.major, version.minor, version.patch + 1)
    return version
