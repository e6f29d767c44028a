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

"""Starter configurations written by ``gitsemver init``.

Each workflow is built as a ``tomlkit`` document so the generated
``gitsemver.toml`` carries explanatory comments::

    Workflow     Branches
    ──────────   ──────────────────────────────────────────────
    Default      main, develop, release/*, feature/*, hotfix/*
    GitFlow      master, develop, release/*, hotfix/*, feature/*
    GitHubFlow   main, feature/*
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import tomlkit
import tomlkit.items

from gitsemver.config import USE_BRANCH_NAME, BranchMode, IncrementMode
from gitsemver.errors import ConfigError

DEFAULT_WORKFLOW = 'GitFlow'


def _header(doc: tomlkit.TOMLDocument, title: str) -> None:
    doc.add(tomlkit.comment(title))
    doc.add(tomlkit.comment('Branch keys are regular expressions; the longest matching one applies.'))
    doc.add(tomlkit.comment('commit-date-format = "%Y-%m-%dT%H:%M:%S%z"  # optional, strftime format'))
    doc.add(tomlkit.nl())


def _branch(**settings: Any) -> tomlkit.items.Table:  # noqa: ANN401
    table = tomlkit.table()
    for key, value in settings.items():
        toml_key = key.replace('_', '-')
        if isinstance(value, (BranchMode, IncrementMode)):
            value = value.value
        table.add(toml_key, value)
    return table


def _branches(doc: tomlkit.TOMLDocument, policies: dict[str, tomlkit.items.Table]) -> None:
    branches = tomlkit.table(is_super_table=True)
    for pattern, table in policies.items():
        branches.add(pattern, table)
    doc.add('branches', branches)


def _default() -> tomlkit.TOMLDocument:
    doc = tomlkit.document()
    _header(doc, 'Default gitsemver configuration')
    doc.add('next-version', '0.1.0')
    doc.add('major-version-bump-message', tomlkit.string(r'\+semver:\s?(breaking|major)', literal=True))
    doc.add('minor-version-bump-message', tomlkit.string(r'\+semver:\s?(feature|minor)', literal=True))
    doc.add('patch-version-bump-message', tomlkit.string(r'\+semver:\s?(fix|patch)', literal=True))
    doc.add('no-bump-message', tomlkit.string(r'\+semver:\s?(none|skip)', literal=True))
    doc.add(tomlkit.nl())
    _branches(
        doc,
        {
            '^main$': _branch(tag=''),
            '^develop$': _branch(mode=BranchMode.CONTINUOUS_DEPLOYMENT, tag='alpha'),
            '^release/.*$': _branch(mode=BranchMode.SEMVER_FROM_BRANCH, tag='beta', is_release_branch=True),
            '^feature/.*$': _branch(tag=USE_BRANCH_NAME),
            '^hotfix/.*$': _branch(mode=BranchMode.SEMVER_FROM_BRANCH, tag='beta', is_release_branch=True),
        },
    )
    return doc


def _gitflow() -> tomlkit.TOMLDocument:
    doc = tomlkit.document()
    _header(doc, 'GitFlow workflow configuration for gitsemver')
    deployment = BranchMode.CONTINUOUS_DEPLOYMENT
    _branches(
        doc,
        {
            '^master$': _branch(mode=deployment, tag='', increment=IncrementMode.PATCH, is_release_branch=True),
            '^develop$': _branch(mode=deployment, tag='beta', increment=IncrementMode.MINOR),
            '^release/.*$': _branch(mode=deployment, tag='rc', increment=IncrementMode.PATCH, is_release_branch=True),
            '^hotfix/.*$': _branch(
                mode=deployment, tag='hotfix', increment=IncrementMode.PATCH, is_release_branch=True
            ),
            '^feature/.*$': _branch(
                mode=deployment, tag=USE_BRANCH_NAME, increment=IncrementMode.MINOR, source_branches=['develop']
            ),
        },
    )
    return doc


def _githubflow() -> tomlkit.TOMLDocument:
    doc = tomlkit.document()
    _header(doc, 'GitHubFlow workflow configuration for gitsemver')
    deployment = BranchMode.CONTINUOUS_DEPLOYMENT
    _branches(
        doc,
        {
            '^main$': _branch(mode=deployment, tag='', increment=IncrementMode.PATCH, is_release_branch=True),
            '^feature/.*$': _branch(
                mode=deployment, tag=USE_BRANCH_NAME, increment=IncrementMode.MINOR, source_branches=['main']
            ),
        },
    )
    return doc


WORKFLOWS: dict[str, Callable[[], tomlkit.TOMLDocument]] = {
    'Default': _default,
    'GitFlow': _gitflow,
    'GitHubFlow': _githubflow,
}


def build_template(workflow: str) -> tomlkit.TOMLDocument:
    """Build the configuration document of a workflow (case-insensitive).

    Raises:
        ConfigError: If the workflow is unknown.
    """
    for name, builder in WORKFLOWS.items():
        if name.lower() == workflow.lower():
            return builder()
    raise ConfigError(f'Unknown workflow: {workflow}', hint=f'Choose one of: {", ".join(WORKFLOWS)}')


def render_template(workflow: str) -> str:
    """Return the ``gitsemver.toml`` text of a workflow."""
    return tomlkit.dumps(build_template(workflow))


__all__ = [
    'DEFAULT_WORKFLOW',
    'WORKFLOWS',
    'build_template',
    'render_template',
]
