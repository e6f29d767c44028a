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

"""Final version rendering.

Turns the numeric version chosen by the strategy pipeline into the
output variables, adding the branch's pre-release suffix::

    branch policy tag     weight   commits   result
    ───────────────────   ──────   ───────   ───────────────────────────
    (no policy)           -        3         1.2.0
    "beta"                0        3         1.2.0-beta.3
    "beta"                2        3         1.2.0-beta.2.3
    "use-branch-name"     0        1         1.2.0-feature-login.1
    "beta"                0        0         1.2.0-beta.0 (fresh branch)
    ""                    -        3         1.2.0

The suffix is only added when commits exist since the base version, or
when the version is not a pre-release yet (a branch cut with no commits
of its own).
"""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from gitsemver._types import Commit
from gitsemver.branches import BranchMatch
from gitsemver.config import DEFAULT_COMMIT_DATE_FORMAT, USE_BRANCH_NAME
from gitsemver.errors import VersionError
from gitsemver.versioning import Version, format_version, parse_version

_INVALID_LABEL_CHARS = re.compile(r'[^0-9A-Za-z.-]')


class VersionVariables(BaseModel):
    """The computed version and its components.

    Serialised with GitVersion-style PascalCase keys
    (``model_dump(by_alias=True)``). ``full_semver`` always equals
    ``major.minor.patch`` followed by ``-pre_release_tag`` when the
    latter is non-empty.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    major: int = Field(alias='Major')
    minor: int = Field(alias='Minor')
    patch: int = Field(alias='Patch')
    pre_release_tag: str = Field(default='', alias='PreReleaseTag')
    pre_release_label: str = Field(default='', alias='PreReleaseLabel')
    pre_release_number: int | None = Field(default=None, alias='PreReleaseNumber')
    major_minor_patch: str = Field(alias='MajorMinorPatch')
    full_semver: str = Field(alias='FullSemVer')
    branch_name: str = Field(default='', alias='BranchName')
    escaped_branch_name: str = Field(default='', alias='EscapedBranchName')
    commits_since_version_source: int = Field(default=0, alias='CommitsSinceVersionSource')
    version_source_sha: str = Field(default='', alias='VersionSourceSha')
    sha: str = Field(default='', alias='Sha')
    short_sha: str = Field(default='', alias='ShortSha')
    commit_date: str = Field(default='', alias='CommitDate')


def escape_branch_name(branch_name: str) -> str:
    """Make a branch name usable as a pre-release identifier.

    ``/`` and any other character outside ``[0-9A-Za-z.-]`` become
    ``-``: ``feature/login_page`` → ``feature-login-page``.
    """
    return _INVALID_LABEL_CHARS.sub('-', branch_name.replace('/', '-'))


def resolve_prerelease_label(tag: str, branch_name: str) -> str:
    """Return the pre-release label for a policy tag.

    The ``use-branch-name`` sentinel is replaced by the escaped branch
    name; any other tag is returned unchanged.
    """
    if tag == USE_BRANCH_NAME:
        return escape_branch_name(branch_name)
    return tag


def _prerelease_number(prerelease: str) -> int | None:
    last = prerelease.rsplit('.', 1)[-1]
    return int(last) if last.isdigit() else None


def apply_prerelease(
    version: Version,
    branch_name: str,
    commits_since_base: int,
    match: BranchMatch | None,
) -> Version:
    """Return ``version`` with the branch policy's pre-release suffix applied.

    Raises:
        VersionError: If the assembled version is not valid semver,
            which means the policy's tag is not a valid identifier.
    """
    if match is None:
        return version
    if commits_since_base <= 0 and version.prerelease:
        return version

    label = resolve_prerelease_label(match.policy.tag, branch_name)
    if not label:
        return version

    count = max(commits_since_base, 0)
    weight = match.policy.pre_release_weight
    prerelease = f'{label}.{weight}.{count}' if weight > 0 else f'{label}.{count}'
    text = f'{version.major}.{version.minor}.{version.patch}-{prerelease}'
    rendered = parse_version(text)
    if rendered is None or format_version(rendered) != text:
        raise VersionError(
            f'Rendered version {text!r} is not a valid semantic version',
            hint=f'Check the tag of branches."{match.pattern}": pre-release identifiers may only use [0-9A-Za-z-].',
        )
    return rendered


def render(
    version: Version,
    branch_name: str,
    commits_since_base: int,
    match: BranchMatch | None,
    *,
    head: Commit | None = None,
    version_source_sha: str = '',
    commit_date_format: str = DEFAULT_COMMIT_DATE_FORMAT,
) -> VersionVariables:
    """Build the output variables for a computed version.

    Args:
        version: Numeric version chosen by the strategy pipeline.
        branch_name: The branch being versioned.
        commits_since_base: Commits since the base version's anchor.
        match: The branch policy in effect, if any.
        head: The commit being versioned, for ``Sha``/``CommitDate``.
        version_source_sha: Anchor commit of the base version.
        commit_date_format: ``strftime`` format of ``CommitDate``.

    Returns:
        The internally consistent :class:`VersionVariables`.
    """
    final = apply_prerelease(version, branch_name, commits_since_base, match)
    prerelease = final.prerelease or ''
    committed_at: datetime | None = head.committed_at if head is not None else None

    return VersionVariables(
        major=final.major,
        minor=final.minor,
        patch=final.patch,
        pre_release_tag=prerelease,
        pre_release_label=prerelease.split('.', 1)[0] if prerelease else '',
        pre_release_number=_prerelease_number(prerelease) if prerelease else None,
        major_minor_patch=f'{final.major}.{final.minor}.{final.patch}',
        full_semver=format_version(final),
        branch_name=branch_name,
        escaped_branch_name=escape_branch_name(branch_name),
        commits_since_version_source=commits_since_base,
        version_source_sha=version_source_sha,
        sha=head.sha if head is not None else '',
        short_sha=head.sha[:7] if head is not None else '',
        commit_date=committed_at.strftime(commit_date_format) if committed_at is not None else '',
    )


__all__ = [
    'VersionVariables',
    'apply_prerelease',
    'escape_branch_name',
    'render',
    'resolve_prerelease_label',
]
