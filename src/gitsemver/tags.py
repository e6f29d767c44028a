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

"""Base version lookup from repository tags.

The base version is the highest version tag that applies to a branch,
together with the commit it tags (the *anchor*). Commits after the
anchor are what the increment strategy classifies.

Lookup happens in two phases::

    source-branches configured?
        │ yes
        ▼
    walk each source branch, collect tags on reachable commits
        │ found any? ── yes ──▶ highest of those
        │ no
        ▼
    all tags in the repository ──▶ highest (or None)

"Highest" always means :func:`~gitsemver.versioning.compare_precedence`
with the configured pre-release weights. Tags that are not versions,
and tags that do not resolve to a commit, are skipped.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from gitsemver._types import TagRef
from gitsemver.branches import match_branch
from gitsemver.config import Config
from gitsemver.logging import get_logger
from gitsemver.repository import Repository, open_history
from gitsemver.versioning import Version, format_version, parse_tag_version, precedence_key

logger = get_logger(__name__)


@dataclass(frozen=True)
class BaseVersion:
    """A version found on a tag.

    Attributes:
        version: The parsed version (prefix stripped).
        commit: SHA of the tagged commit.
        tag: The original tag name.
    """

    version: Version
    commit: str
    tag: str


def _versioned_tags(tags: Iterable[TagRef], tag_prefix: str) -> list[BaseVersion]:
    found: list[BaseVersion] = []
    for tag in tags:
        version = parse_tag_version(tag.name, tag_prefix)
        if version is None:
            logger.debug('tag_not_a_version', tag=tag.name)
            continue
        if tag.commit is None:
            logger.debug('tag_unresolvable', tag=tag.name)
            continue
        found.append(BaseVersion(version=version, commit=tag.commit, tag=tag.name))
    return found


def highest_version(candidates: Iterable[BaseVersion], weights: Mapping[str, int]) -> BaseVersion | None:
    """Return the candidate with the highest precedence.

    Among equal-precedence candidates the first one wins.
    """
    key = precedence_key(weights)
    # max() keeps the first of several equal maxima.
    return max(candidates, key=lambda candidate: key(candidate.version), default=None)


def _find_on_branches(
    repo: Repository,
    versioned: list[BaseVersion],
    branch_names: Iterable[str],
    weights: Mapping[str, int],
) -> BaseVersion | None:
    by_commit: dict[str, list[BaseVersion]] = defaultdict(list)
    for candidate in versioned:
        by_commit[candidate.commit].append(candidate)

    reachable: list[BaseVersion] = []
    for branch in branch_names:
        tip = repo.resolve_branch_tip(branch)
        if tip is None:
            logger.debug('source_branch_missing', branch=branch)
            continue
        pending = set(by_commit)
        with open_history(repo, tip) as commits:
            for commit in commits:
                if not pending:
                    break
                if commit.sha in pending:
                    pending.discard(commit.sha)
                    reachable.extend(by_commit[commit.sha])
    return highest_version(reachable, weights)


def find_base_version(repo: Repository, config: Config, branch_name: str) -> BaseVersion | None:
    """Find the base version for a branch.

    Args:
        repo: Repository to read tags and history from.
        config: The configuration (tag prefix, weights, branch policies).
        branch_name: The branch being versioned.

    Returns:
        The base version, or ``None`` if no applicable version tag exists.

    Raises:
        RepositoryError: If tags or history cannot be read.
    """
    weights = config.tag_pre_release_weight
    versioned = _versioned_tags(repo.list_tags(), config.tag_prefix)

    match = match_branch(branch_name, config.branches)
    if match is not None and match.policy.source_branches:
        base = _find_on_branches(repo, versioned, match.policy.source_branches, weights)
        if base is not None:
            logger.debug(
                'base_version_found',
                version=format_version(base.version),
                tag=base.tag,
                source='source_branches',
            )
            return base

    base = highest_version(versioned, weights)
    if base is not None:
        logger.debug('base_version_found', version=format_version(base.version), tag=base.tag, source='all_tags')
    return base


__all__ = [
    'BaseVersion',
    'find_base_version',
    'highest_version',
]
