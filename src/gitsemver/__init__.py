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

"""gitsemver: next semantic version from git history.

Usage::

    from pathlib import Path

    from gitsemver import GitRepository, calculate_version_variables, load_repo_config

    repo = GitRepository(Path('.'))
    config = load_repo_config(repo.root)
    variables = calculate_version_variables(repo, config, repo.current_branch(), head=repo.head())
    print(variables.full_semver)
"""

from gitsemver.calculator import Calculation, calculate_next_version, calculate_version_variables
from gitsemver.config import (
    BranchMode,
    BranchPolicy,
    Config,
    IncrementMode,
    load_config,
    load_repo_config,
    parse_config,
)
from gitsemver.errors import ConfigError, GitSemverError, RepositoryError, VersionError
from gitsemver.render import VersionVariables
from gitsemver.repository import GitRepository, Repository

__all__ = [
    'BranchMode',
    'BranchPolicy',
    'Calculation',
    'Config',
    'ConfigError',
    'GitRepository',
    'GitSemverError',
    'IncrementMode',
    'Repository',
    'RepositoryError',
    'VersionError',
    'VersionVariables',
    'calculate_next_version',
    'calculate_version_variables',
    'load_config',
    'load_repo_config',
    'parse_config',
]
