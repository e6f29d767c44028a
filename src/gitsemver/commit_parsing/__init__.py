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

"""Commit message parsing.

:func:`parse_conventional_commit` is the entry point the classifier
uses; it returns ``None`` for anything that is not a conventional
commit so callers can fall back to their own patterns::

    >>> parse_conventional_commit('feat(auth): add OAuth2').bump
    <BumpType.MINOR: 'minor'>
    >>> parse_conventional_commit('Merge branch main') is None
    True
"""

from gitsemver.commit_parsing._conventional import (
    BREAKING_CHANGE_MARKER,
    CONVENTIONAL_TYPES,
    TYPE_BUMPS,
    ConventionalCommitParser,
)
from gitsemver.commit_parsing._types import BUMP_PRECEDENCE, BumpType, ParsedCommit, max_bump

_parser = ConventionalCommitParser()


def parse_conventional_commit(message: str) -> ParsedCommit | None:
    """Module-level shortcut for :meth:`ConventionalCommitParser.parse`."""
    return _parser.parse(message)


__all__ = [
    'BREAKING_CHANGE_MARKER',
    'BUMP_PRECEDENCE',
    'CONVENTIONAL_TYPES',
    'TYPE_BUMPS',
    'BumpType',
    'ConventionalCommitParser',
    'ParsedCommit',
    'max_bump',
    'parse_conventional_commit',
]
