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

"""Tests for gitsemver.branches."""

from __future__ import annotations

from gitsemver.branches import match_branch
from gitsemver.config import BranchPolicy

MAIN = BranchPolicy(tag='')
FEATURE = BranchPolicy(tag='use-branch-name')
ALPHA = BranchPolicy(tag='alpha')
BETA = BranchPolicy(tag='beta')


class TestMatchBranch:
    """Tests for match_branch()."""

    def test_no_branches(self) -> None:
        """An empty policy table never matches."""
        assert match_branch('main', {}) is None

    def test_no_match(self) -> None:
        """A branch matching no pattern gets no policy."""
        assert match_branch('develop', {'^main$': MAIN}) is None

    def test_single_match(self) -> None:
        """The matching pattern and its policy are returned."""
        match = match_branch('main', {'^main$': MAIN, '^feature/': FEATURE})
        assert match is not None
        assert match.pattern == '^main$'
        assert match.policy is MAIN

    def test_search_is_unanchored(self) -> None:
        """Patterns match anywhere in the branch name."""
        match = match_branch('users/jo/feature/x', {'feature/': FEATURE})
        assert match is not None
        assert match.policy is FEATURE

    def test_longest_pattern_wins(self) -> None:
        """The longest matching pattern is the most specific one."""
        match = match_branch('feature/login', {'feature': ALPHA, '^feat.+/': FEATURE})
        assert match is not None
        assert match.pattern == '^feat.+/'

    def test_equal_length_tie_is_lexicographic(self) -> None:
        """Equal-length matches go to the smallest pattern string."""
        forward = match_branch('release/1.0', {'rel': BETA, 'ele': ALPHA})
        backward = match_branch('release/1.0', {'ele': ALPHA, 'rel': BETA})
        assert forward is not None
        assert backward is not None
        assert forward.pattern == backward.pattern == 'ele'

    def test_invalid_pattern_is_skipped(self) -> None:
        """A pattern that does not compile is ignored."""
        match = match_branch('main', {'(main': ALPHA, 'main': MAIN})
        assert match is not None
        assert match.pattern == 'main'
