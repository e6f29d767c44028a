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

"""Tests for gitsemver.templates."""

from __future__ import annotations

import sys

import pytest
import tomlkit
from gitsemver.config import BranchMode, IncrementMode, parse_config
from gitsemver.errors import ConfigError
from gitsemver.templates import WORKFLOWS, build_template, render_template

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


class TestRenderTemplate:
    """Tests for render_template()."""

    @pytest.mark.parametrize('workflow', sorted(WORKFLOWS))
    def test_parses_back(self, workflow: str) -> None:
        """Every template is a valid configuration."""
        config = parse_config(tomllib.loads(render_template(workflow)))
        assert config.branches

    @pytest.mark.parametrize('workflow', sorted(WORKFLOWS))
    def test_has_header_comment(self, workflow: str) -> None:
        """Templates start with an explanatory comment."""
        assert render_template(workflow).startswith('# ')

    def test_gitflow(self) -> None:
        """GitFlow defines the classic branch set."""
        config = parse_config(tomllib.loads(render_template('GitFlow')))
        assert set(config.branches) == {'^master$', '^develop$', '^release/.*$', '^hotfix/.*$', '^feature/.*$'}
        feature = config.branches['^feature/.*$']
        assert feature.tag == 'use-branch-name'
        assert feature.increment == IncrementMode.MINOR
        assert feature.source_branches == ('develop',)
        assert config.branches['^develop$'].tag == 'beta'
        assert config.branches['^master$'].is_release_branch is True

    def test_githubflow(self) -> None:
        """GitHubFlow only knows main and feature branches."""
        config = parse_config(tomllib.loads(render_template('GitHubFlow')))
        assert set(config.branches) == {'^main$', '^feature/.*$'}
        assert config.branches['^feature/.*$'].source_branches == ('main',)

    def test_default(self) -> None:
        """The default template seeds a version and semver bump messages."""
        config = parse_config(tomllib.loads(render_template('Default')))
        assert config.next_version == '0.1.0'
        assert config.major_version_bump_message == r'\+semver:\s?(breaking|major)'
        assert config.no_bump_message == r'\+semver:\s?(none|skip)'
        assert config.branches['^release/.*$'].mode == BranchMode.SEMVER_FROM_BRANCH

    def test_case_insensitive(self) -> None:
        """Workflow names are matched case-insensitively."""
        assert render_template('githubflow') == render_template('GitHubFlow')

    def test_unknown(self) -> None:
        """Unknown workflows are configuration errors."""
        with pytest.raises(ConfigError, match='Unknown workflow'):
            render_template('TrunkBased')


class TestBuildTemplate:
    """Tests for build_template()."""

    def test_returns_document(self) -> None:
        """Templates are tomlkit documents, not plain dicts."""
        assert isinstance(build_template('GitFlow'), tomlkit.TOMLDocument)

    def test_document_is_editable(self) -> None:
        """The document can be edited before rendering."""
        doc = build_template('Default')
        doc['next-version'] = '2.0.0'
        assert parse_config(tomllib.loads(doc.as_string())).next_version == '2.0.0'
