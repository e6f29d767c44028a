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

"""Version strategy pipeline.

Strategies run in order over an immutable :class:`VersionContext`. Each
one returns an updated copy and whether it decided the next version;
the first strategy that decides ends the pipeline::

    ┌─────────────────────────┬──────────────────────────────────────────┐
    │ Strategy                │ Effect                                   │
    ├─────────────────────────┼──────────────────────────────────────────┤
    │ find-latest-tag         │ Sets ``base`` from the tags. Never       │
    │                         │ decides.                                 │
    ├─────────────────────────┼──────────────────────────────────────────┤
    │ increment-from-commits  │ Counts commits since ``base`` and bumps  │
    │                         │ it by their strongest bump class.        │
    ├─────────────────────────┼──────────────────────────────────────────┤
    │ configured-next-version │ Uses ``next-version`` when no tag was    │
    │                         │ found.                                   │
    └─────────────────────────┴──────────────────────────────────────────┘

The set of strategies is closed; configuration only chooses their
order (``strategies = [...]`` globally or per branch).
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from gitsemver.branches import BranchMatch
from gitsemver.classify import BumpPatterns, aggregate_bump
from gitsemver.commit_parsing import BumpType
from gitsemver.config import BranchMode, BranchPolicy, Config, IncrementMode
from gitsemver.errors import ConfigError
from gitsemver.logging import get_logger
from gitsemver.render import resolve_prerelease_label
from gitsemver.repository import Repository, open_history
from gitsemver.tags import BaseVersion, find_base_version
from gitsemver.versioning import Version, format_version, increment_version, parse_version

logger = get_logger(__name__)

_BRANCH_VERSION = re.compile(r'(\d+)\.(\d+)\.(\d+)')


class Strategy(Enum):
    """The known version strategies, by configuration identifier."""

    FIND_LATEST_TAG = 'find-latest-tag'
    INCREMENT_FROM_COMMITS = 'increment-from-commits'
    CONFIGURED_NEXT_VERSION = 'configured-next-version'


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (
    Strategy.FIND_LATEST_TAG,
    Strategy.INCREMENT_FROM_COMMITS,
    Strategy.CONFIGURED_NEXT_VERSION,
)


@dataclass(frozen=True)
class VersionContext:
    """State accumulated by the strategy pipeline for one calculation.

    Attributes:
        branch_name: The branch being versioned.
        config: The configuration in effect.
        repository: Where tags and history come from.
        head: SHA of the commit being versioned.
        match: The branch policy in effect, if any.
        patterns: Compiled bump-message patterns.
        base: The base version, once found.
        commits_since_base: Non-ignored commits after the base anchor.
        bump: The bump class applied to ``base``.
        next_version: The decided version, once a strategy decides.
    """

    branch_name: str
    config: Config
    repository: Repository
    head: str
    match: BranchMatch | None = None
    patterns: BumpPatterns = dataclasses.field(default_factory=BumpPatterns)
    base: BaseVersion | None = None
    commits_since_base: int = 0
    bump: BumpType = BumpType.NONE
    next_version: Version | None = None

    @property
    def policy(self) -> BranchPolicy | None:
        """The matched branch policy, if any."""
        return self.match.policy if self.match is not None else None


@dataclass(frozen=True)
class StrategyResult:
    """What one strategy step produced."""

    context: VersionContext
    done: bool = False


def parse_strategy(name: str) -> Strategy:
    """Look up a strategy by its configuration identifier.

    Raises:
        ConfigError: If ``name`` is not a known strategy.
    """
    for strategy in Strategy:
        if strategy.value == name:
            return strategy
    known = ', '.join(s.value for s in Strategy)
    raise ConfigError(f'Unknown strategy: {name!r}', hint=f'Known strategies: {known}')


def build_strategies(config: Config, match: BranchMatch | None = None) -> list[Strategy]:
    """Return the ordered strategies for a branch.

    The branch policy's list wins over the global list, which wins over
    :data:`DEFAULT_STRATEGIES`.

    Raises:
        ConfigError: If a configured identifier is unknown.
    """
    names: Sequence[str] = ()
    if match is not None and match.policy.strategies:
        names = match.policy.strategies
    elif config.strategies:
        names = config.strategies
    if not names:
        return list(DEFAULT_STRATEGIES)
    return [parse_strategy(name) for name in names]


def effective_increment(config: Config, policy: BranchPolicy | None) -> BumpType:
    """Return the fallback bump for commits that do not ask for one.

    The policy's ``increment`` overrides the global one; with neither
    set the fallback is a patch bump. ``None`` and ``Inherit`` disable
    the fallback.
    """
    mode = config.increment
    if policy is not None and policy.increment is not None:
        mode = policy.increment
    if mode is None:
        return BumpType.PATCH
    if mode is IncrementMode.MAJOR:
        return BumpType.MAJOR
    if mode is IncrementMode.MINOR:
        return BumpType.MINOR
    if mode is IncrementMode.PATCH:
        return BumpType.PATCH
    return BumpType.NONE


def version_from_branch_name(branch_name: str, policy: BranchPolicy) -> Version | None:
    """Return the version embedded in a branch name, e.g. ``release/1.2.0``.

    The version gets the pre-release ``<tag>.1`` when the policy has a
    tag. Returns ``None`` when the name holds no ``X.Y.Z``.
    """
    found = _BRANCH_VERSION.search(branch_name)
    if found is None:
        return None
    # Leading zeros are dropped: release/1.02.0 is 1.2.0.
    major, minor, patch = (int(part) for part in found.groups())
    version = Version(major, minor, patch)
    label = resolve_prerelease_label(policy.tag, branch_name)
    if label:
        version = version.replace(prerelease=f'{label}.1')
    return version


def _find_latest_tag(ctx: VersionContext) -> StrategyResult:
    if ctx.base is not None:
        return StrategyResult(ctx)
    base = find_base_version(ctx.repository, ctx.config, ctx.branch_name)
    return StrategyResult(dataclasses.replace(ctx, base=base))


def _commits_since_base(ctx: VersionContext, anchor: str) -> list[str]:
    messages: list[str] = []
    with open_history(ctx.repository, ctx.head) as commits:
        for commit in commits:
            if commit.sha == anchor:
                break
            if commit.sha in ctx.config.ignore:
                logger.debug('commit_ignored', sha=commit.sha, subject=commit.subject)
                continue
            messages.append(commit.message)
    return messages


def _increment_from_commits(ctx: VersionContext) -> StrategyResult:
    if ctx.base is None or ctx.next_version is not None:
        return StrategyResult(ctx)

    messages = _commits_since_base(ctx, ctx.base.commit)
    ctx = dataclasses.replace(ctx, commits_since_base=len(messages))
    policy = ctx.policy

    if policy is not None and policy.mode is BranchMode.SEMVER_FROM_BRANCH:
        version = version_from_branch_name(ctx.branch_name, policy)
        if version is not None:
            logger.debug('version_from_branch_name', branch=ctx.branch_name, version=format_version(version))
            return StrategyResult(dataclasses.replace(ctx, next_version=version), done=True)

    bump = aggregate_bump(messages, ctx.patterns)
    if bump is BumpType.NONE and messages and not (policy is not None and policy.prevent_increment):
        bump = effective_increment(ctx.config, policy)
    if bump is BumpType.NONE:
        return StrategyResult(ctx)

    next_version = increment_version(ctx.base.version, bump)
    logger.debug(
        'version_incremented',
        base=format_version(ctx.base.version),
        bump=bump.value,
        commits=len(messages),
        version=format_version(next_version),
    )
    return StrategyResult(dataclasses.replace(ctx, bump=bump, next_version=next_version), done=True)


def _configured_next_version(ctx: VersionContext) -> StrategyResult:
    if ctx.base is not None or ctx.next_version is not None:
        return StrategyResult(ctx)
    raw = ctx.config.next_version
    if not raw:
        return StrategyResult(ctx)
    version = parse_version(raw)
    if version is None:
        raise ConfigError(
            f'next-version is not a valid semantic version: {raw!r}',
            hint='Use MAJOR.MINOR.PATCH, e.g. next-version = "1.0.0".',
        )
    return StrategyResult(dataclasses.replace(ctx, next_version=version), done=True)


def run_strategy(strategy: Strategy, ctx: VersionContext) -> StrategyResult:
    """Run a single strategy."""
    if strategy is Strategy.FIND_LATEST_TAG:
        return _find_latest_tag(ctx)
    elif strategy is Strategy.INCREMENT_FROM_COMMITS:
        return _increment_from_commits(ctx)
    elif strategy is Strategy.CONFIGURED_NEXT_VERSION:
        return _configured_next_version(ctx)
    raise ConfigError(f'Unknown strategy: {strategy!r}')


def run_pipeline(ctx: VersionContext, strategies: Sequence[Strategy]) -> VersionContext:
    """Run strategies in order until one decides the next version.

    Returns:
        The final context; ``next_version`` is ``None`` when no
        strategy decided.
    """
    for strategy in strategies:
        result = run_strategy(strategy, ctx)
        ctx = result.context
        logger.debug('strategy_ran', strategy=strategy.value, done=result.done)
        if result.done:
            break
    return ctx


__all__ = [
    'DEFAULT_STRATEGIES',
    'Strategy',
    'StrategyResult',
    'VersionContext',
    'build_strategies',
    'effective_increment',
    'parse_strategy',
    'run_pipeline',
    'run_strategy',
    'version_from_branch_name',
]
