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

"""Exception hierarchy for gitsemver.

Every error carries an optional ``hint`` telling the user how to fix
the problem. The CLI logs both and exits with status 1.

.. list-table::
   :header-rows: 1

   * - Exception
     - Raised for
   * - :class:`ConfigError`
     - Malformed config files, unknown keys or strategies, invalid
       ``next-version``
   * - :class:`RepositoryError`
     - git missing, not a repository, HEAD or history unreadable
   * - :class:`VersionError`
     - A rendered version string that is not valid semver
"""

from __future__ import annotations

__all__ = [
    'ConfigError',
    'GitSemverError',
    'RepositoryError',
    'VersionError',
]


class GitSemverError(Exception):
    """Base class for all gitsemver errors.

    Attributes:
        hint: Optional remediation advice shown next to the message.
    """

    def __init__(self, message: str, *, hint: str = '') -> None:
        """Initialize with a message and an optional hint."""
        super().__init__(message)
        self.hint = hint


class ConfigError(GitSemverError):
    """The configuration is invalid."""


class RepositoryError(GitSemverError):
    """The git repository could not be read."""


class VersionError(GitSemverError):
    """A version string could not be built or parsed."""
