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

"""Configuration model and TOML loader.

The configuration lives in ``gitsemver.toml`` at the repository root,
or under ``[tool.gitsemver]`` in ``pyproject.toml``::

    next-version = "0.1.0"
    tag-prefix = "[vV]"
    increment = "Patch"
    major-version-bump-message = '\\+semver:\\s?(breaking|major)'

    [tag-pre-release-weight]
    alpha = 10
    beta = 20

    [branches."^main$"]
    tag = ""

    [branches."^feature/.*$"]
    tag = "use-branch-name"
    increment = "Minor"
    source-branches = ["main"]

Keys mirror GitVersion's YAML names. Every section is validated by a
``_parse_*`` helper that raises :class:`~gitsemver.errors.ConfigError`
naming the offending key. Unknown keys are rejected so typos do not
silently fall back to defaults.
"""

from __future__ import annotations

import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from gitsemver.errors import ConfigError
from gitsemver.logging import get_logger

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = get_logger(__name__)

CONFIG_FILE_NAME = 'gitsemver.toml'
PYPROJECT_FILE_NAME = 'pyproject.toml'

# Sentinel tag value: derive the pre-release label from the branch name.
USE_BRANCH_NAME = 'use-branch-name'

DEFAULT_TAG_PREFIX = '[vV]'
DEFAULT_COMMIT_DATE_FORMAT = '%Y-%m-%dT%H:%M:%S%z'


class IncrementMode(Enum):
    """Bump applied when commits exist but none of them asks for one."""

    MAJOR = 'Major'
    MINOR = 'Minor'
    PATCH = 'Patch'
    NONE = 'None'
    INHERIT = 'Inherit'


class BranchMode(Enum):
    """Versioning mode of a branch.

    Only ``SEMVER_FROM_BRANCH`` changes the calculation; the other two
    are accepted for GitVersion compatibility.
    """

    CONTINUOUS_DELIVERY = 'ContinuousDelivery'
    CONTINUOUS_DEPLOYMENT = 'ContinuousDeployment'
    SEMVER_FROM_BRANCH = 'semver-from-branch'


@dataclass(frozen=True)
class BranchPolicy:
    """Versioning policy for branches matching one pattern.

    Attributes:
        mode: Versioning mode.
        tag: Pre-release label, :data:`USE_BRANCH_NAME`, or ``''`` for
            no pre-release.
        increment: Overrides :attr:`Config.increment` on this branch.
        pre_release_weight: Embedded in the pre-release string when
            greater than zero (``beta.<weight>.<count>``).
        source_branches: Branches whose tags are searched first for the
            base version.
        strategies: Overrides :attr:`Config.strategies` on this branch.
        is_release_branch: Informational only.
        prevent_increment: Disables the fallback increment applied when
            commits exist but none of them asks for a bump.
    """

    mode: BranchMode = BranchMode.CONTINUOUS_DELIVERY
    tag: str = ''
    increment: IncrementMode | None = None
    pre_release_weight: int = 0
    source_branches: tuple[str, ...] = ()
    strategies: tuple[str, ...] = ()
    is_release_branch: bool = False
    prevent_increment: bool = False


@dataclass(frozen=True)
class Config:
    """Parsed, validated gitsemver configuration.

    Attributes:
        next_version: Seed version used when no version tag exists.
            Validated lazily by the ``configured-next-version`` strategy.
        major_version_bump_message: Regex; a match means a major bump.
        minor_version_bump_message: Regex; a match means a minor bump.
        patch_version_bump_message: Regex; a match means a patch bump.
        no_bump_message: Regex; a match means the commit never bumps.
        tag_prefix: Regex stripped from the start of tag names before
            they are parsed as versions.
        ignore: Commit SHAs excluded from history walking.
        increment: Global fallback increment.
        tag_pre_release_weight: Pre-release label to precedence weight.
        strategies: Ordered strategy identifiers; empty means default.
        commit_date_format: ``strftime`` format of ``CommitDate``.
        branches: Branch-name regex to policy.
    """

    next_version: str | None = None
    major_version_bump_message: str = ''
    minor_version_bump_message: str = ''
    patch_version_bump_message: str = ''
    no_bump_message: str = ''
    tag_prefix: str = DEFAULT_TAG_PREFIX
    ignore: frozenset[str] = frozenset()
    increment: IncrementMode | None = None
    tag_pre_release_weight: Mapping[str, int] = field(default_factory=dict)
    strategies: tuple[str, ...] = ()
    commit_date_format: str = DEFAULT_COMMIT_DATE_FORMAT
    branches: Mapping[str, BranchPolicy] = field(default_factory=dict)


def _expect_str(value: object, key: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f'{key} must be a string, got {type(value).__name__}')
    return value


def _expect_bool(value: object, key: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f'{key} must be a boolean, got {type(value).__name__}')
    return value


def _expect_non_negative_int(value: object, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f'{key} must be an integer, got {type(value).__name__}')
    if value < 0:
        raise ConfigError(f'{key} must be a non-negative integer, got {value}')
    return value


def _expect_str_list(value: object, key: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigError(f'{key} must be a list of strings, got {type(value).__name__}')
    items: list[str] = []
    for i, item in enumerate(value):
        items.append(_expect_str(item, f'{key}[{i}]'))
    return tuple(items)


def _expect_table(value: object, key: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f'{key} must be a table, got {type(value).__name__}')
    return value


def _reject_unknown_keys(raw: Mapping[str, Any], allowed: frozenset[str], section: str) -> None:
    unknown = sorted(set(raw) - allowed)
    if unknown:
        where = f' in {section}' if section else ''
        raise ConfigError(
            f'Unknown key(s){where}: {", ".join(unknown)}',
            hint=f'Allowed keys: {", ".join(sorted(allowed))}',
        )


def _parse_enum(value: object, key: str, enum_cls: type[Enum]) -> Any:  # noqa: ANN401
    """Case-insensitive lookup of an enum member by value."""
    text = _expect_str(value, key)
    for member in enum_cls:
        if member.value.lower() == text.lower():
            return member
    choices = ', '.join(str(m.value) for m in enum_cls)
    raise ConfigError(f'{key} must be one of {choices}, got {text!r}')


def _parse_next_version(value: object) -> str | None:
    if isinstance(value, bool):
        raise ConfigError('next-version must be a string, got bool')
    # A float has already lost digits: 1.10 reads as 1.1.
    if isinstance(value, float):
        raise ConfigError(
            f'next-version must be a string, got the number {value!r}',
            hint='Quote the version, e.g. next-version = "1.10.0".',
        )
    if isinstance(value, int):
        return str(value)
    text = _expect_str(value, 'next-version').strip()
    return text or None


def _parse_weights(value: object) -> dict[str, int]:
    table = _expect_table(value, 'tag-pre-release-weight')
    weights: dict[str, int] = {}
    for label, weight in table.items():
        key = f'tag-pre-release-weight.{label}'
        if isinstance(weight, bool) or not isinstance(weight, int):
            raise ConfigError(f'{key} must be an integer, got {type(weight).__name__}')
        weights[label] = weight
    return weights


_BRANCH_KEYS: frozenset[str] = frozenset({
    'mode',
    'tag',
    'increment',
    'pre-release-weight',
    'source-branches',
    'strategies',
    'is-release-branch',
    'prevent-increment',
})


def _parse_branch(pattern: str, raw: object) -> BranchPolicy:
    """Validate one ``[branches."<pattern>"]`` table."""
    section = f'branches."{pattern}"'
    table = _expect_table(raw, section)
    _reject_unknown_keys(table, _BRANCH_KEYS, section)

    kwargs: dict[str, Any] = {}
    if 'mode' in table:
        kwargs['mode'] = _parse_enum(table['mode'], f'{section}.mode', BranchMode)
    if 'tag' in table:
        kwargs['tag'] = _expect_str(table['tag'], f'{section}.tag').strip()
    if 'increment' in table:
        kwargs['increment'] = _parse_enum(table['increment'], f'{section}.increment', IncrementMode)
    if 'pre-release-weight' in table:
        kwargs['pre_release_weight'] = _expect_non_negative_int(
            table['pre-release-weight'], f'{section}.pre-release-weight'
        )
    if 'source-branches' in table:
        kwargs['source_branches'] = _expect_str_list(table['source-branches'], f'{section}.source-branches')
    if 'strategies' in table:
        kwargs['strategies'] = _expect_str_list(table['strategies'], f'{section}.strategies')
    if 'is-release-branch' in table:
        kwargs['is_release_branch'] = _expect_bool(table['is-release-branch'], f'{section}.is-release-branch')
    if 'prevent-increment' in table:
        kwargs['prevent_increment'] = _expect_bool(table['prevent-increment'], f'{section}.prevent-increment')
    return BranchPolicy(**kwargs)


_TOP_LEVEL_KEYS: frozenset[str] = frozenset({
    'next-version',
    'major-version-bump-message',
    'minor-version-bump-message',
    'patch-version-bump-message',
    'no-bump-message',
    'tag-prefix',
    'ignore',
    'increment',
    'tag-pre-release-weight',
    'strategies',
    'commit-date-format',
    'branches',
})

_MESSAGE_KEYS: dict[str, str] = {
    'major-version-bump-message': 'major_version_bump_message',
    'minor-version-bump-message': 'minor_version_bump_message',
    'patch-version-bump-message': 'patch_version_bump_message',
    'no-bump-message': 'no_bump_message',
}


def parse_config(raw: Mapping[str, Any]) -> Config:
    """Validate a raw mapping (e.g. a parsed TOML document) into a :class:`Config`.

    Args:
        raw: The top-level configuration table.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: On unknown keys, wrong value types, invalid enum
            values or an invalid ``tag-prefix`` regex.
    """
    _reject_unknown_keys(raw, _TOP_LEVEL_KEYS, '')

    kwargs: dict[str, Any] = {}
    if 'next-version' in raw:
        kwargs['next_version'] = _parse_next_version(raw['next-version'])
    for toml_key, attr in _MESSAGE_KEYS.items():
        if toml_key in raw:
            kwargs[attr] = _expect_str(raw[toml_key], toml_key)
    if 'tag-prefix' in raw:
        prefix = _expect_str(raw['tag-prefix'], 'tag-prefix')
        try:
            re.compile(prefix)
        except re.error as exc:
            raise ConfigError(
                f'tag-prefix is not a valid regular expression: {exc}',
                hint='Use e.g. "[vV]" to strip a leading v from tag names.',
            ) from exc
        kwargs['tag_prefix'] = prefix
    if 'ignore' in raw:
        kwargs['ignore'] = frozenset(_expect_str_list(raw['ignore'], 'ignore'))
    if 'increment' in raw:
        kwargs['increment'] = _parse_enum(raw['increment'], 'increment', IncrementMode)
    if 'tag-pre-release-weight' in raw:
        kwargs['tag_pre_release_weight'] = _parse_weights(raw['tag-pre-release-weight'])
    if 'strategies' in raw:
        kwargs['strategies'] = _expect_str_list(raw['strategies'], 'strategies')
    if 'commit-date-format' in raw:
        kwargs['commit_date_format'] = _expect_str(raw['commit-date-format'], 'commit-date-format')
    if 'branches' in raw:
        branches = _expect_table(raw['branches'], 'branches')
        kwargs['branches'] = {pattern: _parse_branch(pattern, table) for pattern, table in branches.items()}
    return Config(**kwargs)


def load_config(path: Path) -> Config:
    """Load and validate a configuration file.

    ``pyproject.toml`` files are read from their ``[tool.gitsemver]``
    table; any other file is read as a whole.

    Raises:
        ConfigError: If the file cannot be read or parsed, or fails
            validation.
    """
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as exc:
        raise ConfigError(f'Failed to read {path}: {exc}') from exc
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f'Failed to parse {path}: {exc}') from exc

    if path.name == PYPROJECT_FILE_NAME:
        data = data.get('tool', {}).get('gitsemver', {})
    logger.debug('config_loaded', path=str(path))
    return parse_config(data)


def find_config_file(root: Path) -> Path | None:
    """Locate the configuration file for a repository root.

    ``gitsemver.toml`` wins; otherwise a ``pyproject.toml`` with a
    ``[tool.gitsemver]`` table is used.
    """
    candidate = root / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate
    pyproject = root / PYPROJECT_FILE_NAME
    if pyproject.is_file():
        try:
            data = tomllib.loads(pyproject.read_text(encoding='utf-8'))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            logger.warning('pyproject_unreadable', path=str(pyproject), error=str(exc))
            return None
        if 'gitsemver' in data.get('tool', {}):
            return pyproject
    return None


def load_repo_config(root: Path, explicit: Path | None = None) -> Config:
    """Load the configuration for a repository.

    Args:
        root: Repository root directory.
        explicit: A config file given on the command line; must exist.

    Returns:
        The parsed configuration, or the defaults when no file exists.
    """
    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f'Config file not found: {explicit}')
        return load_config(explicit)
    path = find_config_file(root)
    if path is None:
        logger.debug('config_not_found', root=str(root))
        return Config()
    return load_config(path)


__all__ = [
    'CONFIG_FILE_NAME',
    'USE_BRANCH_NAME',
    'BranchMode',
    'BranchPolicy',
    'Config',
    'IncrementMode',
    'find_config_file',
    'load_config',
    'load_repo_config',
    'parse_config',
]
