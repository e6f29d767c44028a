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

"""Read-only repository access.

The version engine only needs four operations, captured by the
:class:`Repository` protocol. :class:`GitRepository` implements them by
shelling out to the ``git`` executable; tests use an in-memory fake.

History is streamed: :meth:`GitRepository.walk_commits` reads
``git log`` output incrementally and kills the process as soon as the
caller stops iterating, so stopping at an old tag does not pay for the
rest of the history.
"""

from __future__ import annotations

import shutil
import subprocess  # noqa: S404 - git is the repository backend
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol, runtime_checkable

from gitsemver._types import Commit, TagRef
from gitsemver.errors import RepositoryError
from gitsemver.logging import get_logger

logger = get_logger(__name__)

# ``git log -z`` ends every record with NUL, the one byte a commit
# message cannot hold. The field separator only splits the SHA and the
# timestamp off the front, so it may also occur in the message.
_FIELD_SEP = '\x1f'
_RECORD_SEP = '\x00'
_LOG_ARGS = ('-z', '--format=%H%x1f%ct%x1f%B')

DEFAULT_REMOTE = 'origin'


@runtime_checkable
class Repository(Protocol):
    """What the version engine needs from a repository."""

    def list_tags(self) -> list[TagRef]:
        """Return every tag with the commit it points at."""
        ...

    def resolve_branch_tip(self, name: str) -> str | None:
        """Return the tip SHA of a branch, or ``None`` if it does not exist."""
        ...

    def walk_commits(self, from_sha: str) -> Iterator[Commit]:
        """Yield commits reachable from ``from_sha``, newest first."""
        ...

    def get_commit(self, sha: str) -> Commit:
        """Return a single commit."""
        ...


@contextmanager
def open_history(repo: Repository, from_sha: str) -> Iterator[Iterator[Commit]]:
    """Iterate a repository's history and release it when the block exits.

    Use this instead of calling :meth:`Repository.walk_commits`
    directly when the loop may stop early::

        with open_history(repo, head) as commits:
            for commit in commits:
                if commit.sha == anchor:
                    break
    """
    commits = iter(repo.walk_commits(from_sha))
    try:
        yield commits
    finally:
        close = getattr(commits, 'close', None)
        if close is not None:
            close()


def _parse_commit_record(record: str) -> Commit:
    fields = record.lstrip('\n').split(_FIELD_SEP, 2)
    if len(fields) != 3 or not fields[1].isdigit():
        raise RepositoryError(f'Unexpected git log record: {record[:80]!r}')
    sha, timestamp, message = fields
    return Commit(
        sha=sha,
        message=message.rstrip('\n'),
        committed_at=datetime.fromtimestamp(int(timestamp), tz=timezone.utc),
    )


class GitRepository:
    """:class:`Repository` backed by the ``git`` command-line tool.

    Args:
        path: Any directory inside the working tree.
        remote: Remote consulted when a branch has no local ref.

    Raises:
        RepositoryError: If git is not installed or ``path`` is not
            inside a git repository.
    """

    def __init__(self, path: Path, *, remote: str = DEFAULT_REMOTE) -> None:
        """Open the repository containing ``path``."""
        if shutil.which('git') is None:
            raise RepositoryError('git executable not found', hint='Install git and make sure it is on PATH.')
        self.path = path
        self.remote = remote
        proc = self._run('rev-parse', '--show-toplevel', check=False)
        if proc.returncode != 0:
            raise RepositoryError(
                f'Not a git repository: {path}',
                hint='Pass --path pointing at a directory inside a git work tree.',
            )
        self.root = Path(proc.stdout.strip())

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        proc = subprocess.run(  # noqa: S603
            ['git', '-C', str(self.path), *args],  # noqa: S607
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='replace',
            check=False,
        )
        if check and proc.returncode != 0:
            raise RepositoryError(f'git {" ".join(args)} failed: {proc.stderr.strip()}')
        return proc

    def _peel_to_commit(self, ref: str) -> str | None:
        proc = self._run('rev-parse', '--verify', '--quiet', f'{ref}^{{commit}}', check=False)
        if proc.returncode != 0:
            return None
        return proc.stdout.strip()

    def head(self) -> str:
        """Return the SHA of ``HEAD``."""
        proc = self._run('rev-parse', '--verify', '--quiet', 'HEAD^{commit}', check=False)
        if proc.returncode != 0:
            raise RepositoryError('Failed to resolve HEAD', hint='The repository needs at least one commit.')
        return proc.stdout.strip()

    def current_branch(self) -> str:
        """Return the short name of the checked-out branch.

        Raises:
            RepositoryError: When ``HEAD`` is detached.
        """
        proc = self._run('symbolic-ref', '--quiet', '--short', 'HEAD', check=False)
        if proc.returncode != 0:
            raise RepositoryError(
                'HEAD is detached; cannot determine the current branch',
                hint='Pass --branch with the branch being built (CI checkouts are usually detached).',
            )
        return proc.stdout.strip()

    def list_tags(self) -> list[TagRef]:
        """Return all tags, peeling annotated tags to their commit."""
        proc = self._run(
            'for-each-ref',
            '--format=%(refname:strip=2)%09%(objecttype)%09%(objectname)%09%(*objecttype)%09%(*objectname)',
            'refs/tags',
        )
        tags: list[TagRef] = []
        for line in proc.stdout.splitlines():
            if not line:
                continue
            name, obj_type, obj_name, peeled_type, peeled_name = line.split('\t')
            if obj_type == 'commit':
                commit: str | None = obj_name
            elif obj_type == 'tag' and peeled_type == 'commit':
                commit = peeled_name
            elif obj_type == 'tag':
                # Tag of a tag; let git follow the whole chain.
                commit = self._peel_to_commit(f'refs/tags/{name}')
            else:
                commit = None
            tags.append(TagRef(name=name, commit=commit))
        return tags

    def resolve_branch_tip(self, name: str) -> str | None:
        """Return the tip of ``refs/heads/<name>``, else of the remote-tracking branch."""
        for ref in (f'refs/heads/{name}', f'refs/remotes/{self.remote}/{name}'):
            sha = self._peel_to_commit(ref)
            if sha is not None:
                return sha
        logger.debug('branch_not_found', branch=name)
        return None

    def get_commit(self, sha: str) -> Commit:
        """Return one commit by SHA."""
        proc = self._run('log', '-1', *_LOG_ARGS, sha, check=False)
        record = proc.stdout.split(_RECORD_SEP, 1)[0]
        if proc.returncode != 0 or not record.strip():
            raise RepositoryError(f'Commit not found: {sha}')
        return _parse_commit_record(record)

    def walk_commits(self, from_sha: str) -> Iterator[Commit]:
        """Stream commits reachable from ``from_sha``, newest first.

        Closing the generator early terminates the ``git log`` process.

        Raises:
            RepositoryError: If ``git log`` fails.
        """
        # stderr goes to a file so a chatty git never blocks on a full pipe.
        with tempfile.TemporaryFile() as errors:
            try:
                proc = subprocess.Popen(  # noqa: S603
                    ['git', '-C', str(self.path), 'log', *_LOG_ARGS, from_sha],  # noqa: S607
                    stdout=subprocess.PIPE,
                    stderr=errors,
                    text=True,
                    encoding='utf-8',
                    errors='replace',
                )
            except OSError as exc:
                raise RepositoryError(f'Failed to start git log: {exc}') from exc

            assert proc.stdout is not None  # noqa: S101 - stdout=PIPE
            finished = False
            try:
                buffer = ''
                for chunk in proc.stdout:
                    buffer += chunk
                    while _RECORD_SEP in buffer:
                        record, buffer = buffer.split(_RECORD_SEP, 1)
                        yield _parse_commit_record(record)
                if buffer.strip():
                    yield _parse_commit_record(buffer)
                finished = True
            finally:
                if not finished:
                    proc.kill()
                proc.stdout.close()
                returncode = proc.wait()
            if returncode != 0:
                errors.seek(0)
                detail = errors.read().decode('utf-8', errors='replace').strip()
                raise RepositoryError(f'git log {from_sha} failed: {detail}')


__all__ = [
    'GitRepository',
    'Repository',
    'open_history',
]
