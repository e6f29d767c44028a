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

"""Next-version calculation for one branch.

Wires the branch matcher, the strategy pipeline and the renderer
together::

    branch name ──▶ match_branch ──▶ build_strategies
                                          │
                                          ▼
                    head ──────────▶ run_pipeline ──▶ next version
                                          │               │ (none?)
                                          │               ▼
                                          │      base, else 0.1.0
                                          ▼
                                        render ──▶ VersionVariables
"""

from __future__ import annotations

from dataclasses import dataclass

from gitsemver.branches import BranchMatch, match_branch
from gitsemver.classify import BumpPatterns
from gitsemver.config import Config
from gitsemver.errors import RepositoryError
from gitsemver.logging import get_logger
from gitsemver.render import VersionVariables, render
from gitsemver.repository import Repository
from gitsemver.strategies import VersionContext, build_strategies, run_pipeline
from gitsemver.tags import BaseVersion
from gitsemver.versioning import Version, format_version

logger = get_logger(__name__)

INITIAL_VERSION = Version(0, 1, 0)


@dataclass(frozen=True)
class Calculation:
    """Outcome of the strategy pipeline, before rendering.

    Attributes:
        version: The numeric next version.
        commits_since_base: Commits since the base version's anchor.
        base: The base version, if a tag was found.
        match: The branch policy in effect, if any.
        head: SHA of the commit that was versioned.
    """

    version: Version
    commits_since_base: int
    base: BaseVersion | None
    match: BranchMatch | None
    head: str


def _resolve_head(repo: Repository, branch_name: str, head: str | None) -> str:
    if head is not None:
        return head
    tip = repo.resolve_branch_tip(branch_name)
    if tip is None:
        raise RepositoryError(
            f'Branch not found: {branch_name}',
            hint='Check the branch name, or fetch it from the remote first.',
        )
    return tip


def calculate_next_version(
    repo: Repository,
    config: Config,
    branch_name: str,
    head: str | None = None,
) -> Calculation:
    """Compute the numeric next version of a branch.

    Args:
        repo: Repository to read tags and history from.
        config: The configuration in effect.
        branch_name: The branch being versioned; selects the policy.
        head: Commit to version. Defaults to the branch tip.

    Returns:
        The :class:`Calculation`. When no strategy decides, the base
        version is returned unchanged with zero commits, or ``0.1.0``
        when there is no base either.

    Raises:
        ConfigError: On an unknown strategy or invalid ``next-version``.
        RepositoryError: If the repository cannot be read.
    """
    head_sha = _resolve_head(repo, branch_name, head)
    match = match_branch(branch_name, config.branches)
    strategies = build_strategies(config, match)
    logger.debug(
        'calculation_started',
        branch=branch_name,
        head=head_sha,
        policy=match.pattern if match is not None else None,
        strategies=[s.value for s in strategies],
    )

    ctx = VersionContext(
        branch_name=branch_name,
        config=config,
        repository=repo,
        head=head_sha,
        match=match,
        patterns=BumpPatterns.from_config(config),
    )
    ctx = run_pipeline(ctx, strategies)

    if ctx.next_version is not None:
        return Calculation(ctx.next_version, ctx.commits_since_base, ctx.base, match, head_sha)
    if ctx.base is not None:
        logger.debug('next_version_from_base', version=format_version(ctx.base.version))
        return Calculation(ctx.base.version, 0, ctx.base, match, head_sha)
    logger.debug('next_version_initial', version=format_version(INITIAL_VERSION))
    return Calculation(INITIAL_VERSION, 0, None, match, head_sha)


def calculate_version_variables(
    repo: Repository,
    config: Config,
    branch_name: str,
    head: str | None = None,
) -> VersionVariables:
    """Compute and render the version variables of a branch.

    Raises:
        GitSemverError: From :func:`calculate_next_version`, or
            VersionError if the rendered version is invalid.
    """
    calc = calculate_next_version(repo, config, branch_name, head)
    variables = render(
        calc.version,
        branch_name,
        calc.commits_since_base,
        calc.match,
        head=repo.get_commit(calc.head),
        version_source_sha=calc.base.commit if calc.base is not None else '',
        commit_date_format=config.commit_date_format,
    )
    logger.info('version_calculated', branch=branch_name, version=variables.full_semver)
    return variables


__all__ = [
    'INITIAL_VERSION',
    'Calculation',
    'calculate_next_version',
    'calculate_version_variables',
]
