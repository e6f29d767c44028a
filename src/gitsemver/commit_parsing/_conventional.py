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

r"""Conventional-commit header parser.

Recognises the header form::

    type(scope)!: description

where ``type`` is one of a fixed allowlist (:data:`CONVENTIONAL_TYPES`).
Unlike a permissive Conventional Commits parser, unknown types such as
``release:`` or ``wip:`` are rejected so that they fall through to the
configured custom bump patterns.

Bump mapping:

.. list-table::
   :header-rows: 1

   * - Header
     - Bump
   * - ``!`` after type/scope, or ``BREAKING CHANGE:`` in the message
     - MAJOR
   * - ``feat``
     - MINOR
   * - ``fix``
     - PATCH
   * - any other allowed type
     - NONE

Types are matched case-sensitively. ``BREAKING CHANGE:`` is detected
anywhere in the message, not only in a trailer.

Pure implementation: depends only on ``re`` and :mod:`._types`.
"""

from __future__ import annotations

import re

from gitsemver.commit_parsing._types import BumpType, ParsedCommit

CONVENTIONAL_TYPES: tuple[str, ...] = (
    'feat',
    'fix',
    'build',
    'chore',
    'ci',
    'docs',
    'perf',
    'refactor',
    'revert',
    'style',
    'test',
)

# Types not listed here parse fine but do not bump on their own.
TYPE_BUMPS: dict[str, BumpType] = {
    'feat': BumpType.MINOR,
    'fix': BumpType.PATCH,
}

BREAKING_CHANGE_MARKER = 'BREAKING CHANGE:'

# The scope group is greedy so "feat(a)(b): x" keeps "a)(b" as the scope.
HEADER_PATTERN: re.Pattern[str] = re.compile(
    r'^(?P<type>' + '|'.join(CONVENTIONAL_TYPES) + r')'
    r'(?:\((?P<scope>.*)\))?'
    r'(?P<breaking>!)?'
    r':(?P<description>.*)$',
)


def _bump_for(cc_type: str, *, breaking: bool) -> BumpType:
    if breaking:
        return BumpType.MAJOR
    return TYPE_BUMPS.get(cc_type, BumpType.NONE)


class ConventionalCommitParser:
    """Parser for conventional-commit headers with a fixed type allowlist.

    Example::

        parser = ConventionalCommitParser()
        parser.parse('fix(api): handle 404').bump  # BumpType.PATCH
        parser.parse('docs: x\\n\\nBREAKING CHANGE: y').bump  # BumpType.MAJOR
        parser.parse('wip: later')  # None
    """

    def parse(self, message: str) -> ParsedCommit | None:
        """Parse ``message``, or return ``None`` when its subject line
        does not follow the convention.
        """
        subject = message.partition('\n')[0]
        header = HEADER_PATTERN.match(subject)
        if header is None:
            return None

        breaking = header.group('breaking') is not None or BREAKING_CHANGE_MARKER in message
        return ParsedCommit(
            type=header.group('type'),
            description=header.group('description').strip(),
            scope=header.group('scope') or '',
            breaking=breaking,
            bump=_bump_for(header.group('type'), breaking=breaking),
        )


__all__ = [
    'BREAKING_CHANGE_MARKER',
    'CONVENTIONAL_TYPES',
    'HEADER_PATTERN',
    'TYPE_BUMPS',
    'ConventionalCommitParser',
]
