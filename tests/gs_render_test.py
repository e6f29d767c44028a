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

"""Tests for gitsemver.render."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from gitsemver._types import Commit
from gitsemver.branches import BranchMatch
from gitsemver.config import BranchPolicy
from gitsemver.errors import VersionError
from gitsemver.render import (
    VersionVariables,
    apply_prerelease,
    escape_branch_name,
    render,
    resolve_prerelease_label,
)
from gitsemver.versioning import Version, parse_version


def _match(tag: str, weight: int = 0) -> BranchMatch:
    return BranchMatch(pattern='.*', policy=BranchPolicy(tag=tag, pre_release_weight=weight))


class TestEscapeBranchName:
    """Tests for escape_branch_name() and resolve_prerelease_label()."""

    @pytest.mark.parametrize(
        ('branch', 'expected'),
        [
            ('feature/login', 'feature-login'),
            ('feature/login_page', 'feature-login-page'),
            ('users/jo/fix#12', 'users-jo-fix-12'),
            ('main', 'main'),
        ],
    )
    def test_escape(self, branch: str, expected: str) -> None:
        """Characters outside [0-9A-Za-z.-] become dashes."""
        assert escape_branch_name(branch) == expected

    def test_sentinel(self) -> None:
        """use-branch-name resolves to the escaped branch name."""
        assert resolve_prerelease_label('use-branch-name', 'feature/x') == 'feature-x'

    def test_literal_tag(self) -> None:
        """Other tags are returned unchanged."""
        assert resolve_prerelease_label('beta', 'feature/x') == 'beta'


class TestApplyPrerelease:
    """Tests for apply_prerelease()."""

    def test_no_policy(self) -> None:
        """Without a policy the version is unchanged."""
        assert apply_prerelease(Version(1, 2, 0), 'main', 3, None) == Version(1, 2, 0)

    def test_empty_tag(self) -> None:
        """An empty policy tag adds no suffix."""
        assert apply_prerelease(Version(1, 2, 0), 'main', 3, _match('')) == Version(1, 2, 0)

    def test_tag_and_count(self) -> None:
        """The suffix is <tag>.<count>."""
        assert str(apply_prerelease(Version(1, 2, 0), 'develop', 3, _match('beta'))) == '1.2.0-beta.3'

    def test_weight(self) -> None:
        """A positive weight is embedded as <tag>.<weight>.<count>."""
        assert str(apply_prerelease(Version(1, 2, 0), 'develop', 3, _match('beta', 2))) == '1.2.0-beta.2.3'

    def test_branch_name_tag(self) -> None:
        """The sentinel tag uses the escaped branch name."""
        rendered = apply_prerelease(Version(1, 2, 0), 'feature/login', 1, _match('use-branch-name'))
        assert str(rendered) == '1.2.0-feature-login.1'

    def test_fresh_branch_gets_zero_count(self) -> None:
        """With no commits a release version still gets <tag>.0."""
        assert str(apply_prerelease(Version(1, 2, 0), 'develop', 0, _match('beta'))) == '1.2.0-beta.0'

    def test_existing_prerelease_without_commits_is_kept(self) -> None:
        """A pre-release with no new commits is left alone."""
        version = Version(1, 2, 0, prerelease='rc.4')
        assert apply_prerelease(version, 'release/1.2.0', 0, _match('beta')) == version

    def test_existing_prerelease_is_replaced(self) -> None:
        """With new commits the policy suffix replaces the old pre-release."""
        version = Version(1, 2, 0, prerelease='beta.1')
        assert str(apply_prerelease(version, 'release/1.2.0', 2, _match('beta'))) == '1.2.0-beta.2'

    def test_invalid_tag_raises(self) -> None:
        """A tag that cannot form a pre-release is a VersionError."""
        with pytest.raises(VersionError, match='not a valid semantic version'):
            apply_prerelease(Version(1, 0, 0), 'main', 1, _match('bad tag!'))


class TestRender:
    """Tests for render() and VersionVariables."""

    def test_variables(self) -> None:
        """All variables are consistent with each other."""
        head = Commit(
            sha='0123456789abcdef0123456789abcdef01234567',
            message='feat: z',
            committed_at=datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc),
        )
        variables = render(
            Version(1, 1, 0),
            'feature/z',
            1,
            _match('alpha'),
            head=head,
            version_source_sha='f' * 40,
            commit_date_format='%Y-%m-%d',
        )
        assert variables.full_semver == '1.1.0-alpha.1'
        assert variables.major_minor_patch == '1.1.0'
        assert variables.pre_release_tag == 'alpha.1'
        assert variables.pre_release_label == 'alpha'
        assert variables.pre_release_number == 1
        assert variables.branch_name == 'feature/z'
        assert variables.escaped_branch_name == 'feature-z'
        assert variables.commits_since_version_source == 1
        assert variables.version_source_sha == 'f' * 40
        assert variables.sha == head.sha
        assert variables.short_sha == '0123456'
        assert variables.commit_date == '2026-03-01'

    def test_release(self) -> None:
        """A release has empty pre-release fields."""
        variables = render(Version(2, 0, 0), 'main', 1, None)
        assert variables.full_semver == '2.0.0'
        assert variables.pre_release_tag == ''
        assert variables.pre_release_label == ''
        assert variables.pre_release_number is None
        assert variables.sha == ''

    def test_json_aliases(self) -> None:
        """JSON output uses PascalCase keys."""
        data = json.loads(render(Version(1, 0, 1), 'main', 2, None).model_dump_json(by_alias=True))
        assert data['Major'] == 1
        assert data['Minor'] == 0
        assert data['Patch'] == 1
        assert data['FullSemVer'] == '1.0.1'
        assert data['PreReleaseTag'] == ''
        assert data['CommitsSinceVersionSource'] == 2

    def test_model_accepts_aliases(self) -> None:
        """The model validates from its own JSON output."""
        variables = render(Version(1, 0, 0), 'develop', 4, _match('beta'))
        restored = VersionVariables.model_validate_json(variables.model_dump_json(by_alias=True))
        assert restored == variables

    @pytest.mark.parametrize(
        ('tag', 'weight', 'branch', 'count'),
        [
            ('beta', 0, 'develop', 1),
            ('rc', 3, 'release/1.0', 7),
            ('use-branch-name', 0, 'feature/a_b', 2),
            ('', 0, 'main', 4),
        ],
    )
    def test_reparse_round_trip(self, tag: str, weight: int, branch: str, count: int) -> None:
        """Re-parsing FullSemVer gives back the rendered parts."""
        variables = render(Version(3, 4, 5), branch, count, _match(tag, weight))
        parsed = parse_version(variables.full_semver)
        assert parsed is not None
        assert (parsed.major, parsed.minor, parsed.patch, parsed.prerelease or '') == (
            variables.major,
            variables.minor,
            variables.patch,
            variables.pre_release_tag,
        )
