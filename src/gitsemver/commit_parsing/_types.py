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

"""Value types shared by the commit message parsers.

``BumpType`` is the vocabulary every classifier speaks. It is ordered so
that aggregating a range of commits is a fold with :func:`max_bump`::

    NONE  <  PATCH  <  MINOR  <  MAJOR
"""

from __future__ import annotations

import dataclasses
import enum


class BumpType(enum.Enum):
    """How far a change moves the version."""

    MAJOR = 'major'
    MINOR = 'minor'
    PATCH = 'patch'
    NONE = 'none'

    @property
    def rank(self) -> int:
        """Position in :data:`BUMP_PRECEDENCE`; 0 is the strongest bump."""
        return BUMP_PRECEDENCE.index(self)


# Strongest first.
BUMP_PRECEDENCE: tuple[BumpType, ...] = tuple(BumpType)


def max_bump(a: BumpType, b: BumpType) -> BumpType:
    """Pick whichever of ``a`` and ``b`` moves the version further.

    >>> max_bump(BumpType.PATCH, BumpType.MINOR).value
    'minor'
    """
    return a if a.rank <= b.rank else b


@dataclasses.dataclass(frozen=True)
class ParsedCommit:
    """One commit message split into its conventional-commit parts.

    ``breaking`` is set by a ``!`` in the header or by a ``BREAKING
    CHANGE:`` line anywhere in the message.
    """

    type: str
    description: str
    scope: str = ''
    breaking: bool = False
    bump: BumpType = BumpType.NONE


__all__ = [
    'BUMP_PRECEDENCE',
    'BumpType',
    'ParsedCommit',
    'max_bump',
]
