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

"""Repository value objects.

Commits and tags as the version engine sees them, independent of how
the repository is read. Nothing else in ``gitsemver`` is imported here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

__all__ = [
    'Commit',
    'TagRef',
]


@dataclass(frozen=True)
class Commit:
    """A commit as seen by the version engine.

    Attributes:
        sha: Full commit SHA.
        message: Full commit message (subject, body and footers).
        committed_at: Committer timestamp (timezone-aware).
    """

    sha: str
    message: str
    committed_at: datetime

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.split('\n', 1)[0]


@dataclass(frozen=True)
class TagRef:
    """A tag reference and the commit it ultimately points at.

    Attributes:
        name: Short tag name (e.g. ``"v1.2.0"``).
        commit: SHA of the tagged commit, after peeling annotated
            tags. ``None`` if the tag does not resolve to a commit.
    """

    name: str
    commit: str | None
