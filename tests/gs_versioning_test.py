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

"""Tests for gitsemver.versioning."""

from __future__ import annotations

import itertools

import pytest
from gitsemver.commit_parsing import BumpType
from gitsemver.versioning import (
    Version,
    compare_precedence,
    format_version,
    increment_version,
    parse_tag_version,
    parse_version,
    precedence_key,
)

WEIGHTS = {'alpha': 10, 'beta': 5, 'rc': 20}


class TestParseVersion:
    """Tests for parse_version() and parse_tag_version()."""

    def test_full(self) -> None:
        """A full version parses."""
        assert parse_version('1.2.3-rc.1') == Version(1, 2, 3, prerelease='rc.1')

    def test_partial(self) -> None:
        """Missing minor and patch default to zero."""
        assert parse_version('1.2') == Version(1, 2, 0)
        assert parse_version('3') == Version(3, 0, 0)

    @pytest.mark.parametrize('text', ['', 'latest', 'v1.0.0', '1.0.0.0', '1.0.0-'])
    def test_invalid(self, text: str) -> None:
        """Non-versions give None."""
        assert parse_version(text) is None

    def test_default_prefix(self) -> None:
        """The default prefix strips a leading v or V."""
        assert parse_tag_version('v1.2.0', '[vV]') == Version(1, 2, 0)
        assert parse_tag_version('V2.0.0', '[vV]') == Version(2, 0, 0)
        assert parse_tag_version('1.0.0', '[vV]') == Version(1, 0, 0)

    def test_prefix_only_at_start(self) -> None:
        """The prefix is only stripped from the start of the name."""
        assert parse_tag_version('release-1.0.0', 'release-') == Version(1, 0, 0)
        assert parse_tag_version('1.0.0release-', 'release-') is None

    def test_non_version_tag(self) -> None:
        """A tag that is not a version gives None."""
        assert parse_tag_version('latest', '[vV]') is None


class TestFormatVersion:
    """Tests for format_version()."""

    def test_drops_build_metadata(self) -> None:
        """Build metadata is not part of the rendered version."""
        assert format_version(Version(1, 0, 0, prerelease='beta.1', build='abc')) == '1.0.0-beta.1'


class TestComparePrecedence:
    """Tests for compare_precedence()."""

    def test_numeric_first(self) -> None:
        """Numeric parts decide before pre-release labels."""
        assert compare_precedence(Version(1, 0, 1, prerelease='alpha'), Version(1, 0, 0), WEIGHTS) > 0

    def test_release_beats_prerelease(self) -> None:
        """With equal numbers a release outranks a pre-release."""
        assert compare_precedence(Version(1, 0, 0), Version(1, 0, 0, prerelease='rc.1'), WEIGHTS) > 0

    def test_weights_override_lexical_order(self) -> None:
        """The higher weight wins between weighted labels."""
        alpha = Version(1, 0, 0, prerelease='alpha.1')
        beta = Version(1, 0, 0, prerelease='beta.1')
        assert compare_precedence(alpha, beta) < 0
        assert compare_precedence(alpha, beta, WEIGHTS) > 0

    def test_unweighted_label_uses_semver(self) -> None:
        """If either label has no weight, plain semver order applies."""
        alpha = Version(1, 0, 0, prerelease='alpha.1')
        dev = Version(1, 0, 0, prerelease='dev.1')
        assert compare_precedence(alpha, dev, WEIGHTS) < 0

    def test_equal_weights_use_semver(self) -> None:
        """Equal labels fall back to comparing the remaining identifiers."""
        assert compare_precedence(
            Version(1, 0, 0, prerelease='beta.2'), Version(1, 0, 0, prerelease='beta.10'), WEIGHTS
        ) < 0

    def test_build_metadata_ignored(self) -> None:
        """Build metadata never affects precedence."""
        assert compare_precedence(Version(1, 0, 0, build='a'), Version(1, 0, 0, build='b')) == 0

    def test_antisymmetric(self) -> None:
        """compare(a, b) is always the negation of compare(b, a)."""
        labels = ['alpha.1', 'alpha.2', 'beta.1', 'rc.1', 'dev.3', None]
        versions = [Version(1, 0, 0, prerelease=label) for label in labels] + [Version(1, 0, 1)]
        for a, b in itertools.product(versions, repeat=2):
            forward = compare_precedence(a, b, WEIGHTS)
            backward = compare_precedence(b, a, WEIGHTS)
            assert (forward > 0) == (backward < 0)
            assert (forward == 0) == (backward == 0)

    def test_precedence_key_sorts(self) -> None:
        """precedence_key orders versions for sorted() and max()."""
        versions = [
            Version(1, 0, 0),
            Version(1, 0, 0, prerelease='beta.1'),
            Version(1, 0, 0, prerelease='rc.1'),
            Version(1, 0, 0, prerelease='alpha.1'),
        ]
        ordered = sorted(versions, key=precedence_key(WEIGHTS))
        assert [format_version(v) for v in ordered] == ['1.0.0-beta.1', '1.0.0-alpha.1', '1.0.0-rc.1', '1.0.0']


class TestIncrementVersion:
    """Tests for increment_version()."""

    @pytest.mark.parametrize(
        ('version', 'bump', 'expected'),
        [
            ('1.2.3', BumpType.MAJOR, '2.0.0'),
            ('1.2.3', BumpType.MINOR, '1.3.0'),
            ('1.2.3', BumpType.PATCH, '1.2.4'),
            ('1.2.3', BumpType.NONE, '1.2.3'),
            ('1.0.1-rc.2', BumpType.PATCH, '1.0.1'),
            ('1.0.1-rc.2', BumpType.MINOR, '1.1.0'),
            ('1.0.0-beta.1', BumpType.MAJOR, '2.0.0'),
            ('1.2.3+build.5', BumpType.PATCH, '1.2.4'),
        ],
    )
    def test_increment(self, version: str, bump: BumpType, expected: str) -> None:
        """Bumps move the right part and reset the lower ones."""
        parsed = parse_version(version)
        assert parsed is not None
        assert format_version(increment_version(parsed, bump)) == expected
