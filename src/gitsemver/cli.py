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

"""Command-line interface.

Usage::

    gitsemver calculate                      # Calculated next version: 1.3.0
    gitsemver calculate --output json        # variables as JSON on stdout
    gitsemver calculate --branch release/1.3.0 --output table
    gitsemver init --workflow GitHubFlow     # writes gitsemver.toml

Logs go to stderr; stdout only carries the requested output.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.table import Table

from gitsemver.calculator import calculate_version_variables
from gitsemver.config import CONFIG_FILE_NAME, load_repo_config
from gitsemver.errors import GitSemverError
from gitsemver.logging import configure_logging, get_logger
from gitsemver.render import VersionVariables
from gitsemver.repository import GitRepository
from gitsemver.templates import DEFAULT_WORKFLOW, WORKFLOWS, render_template

logger = get_logger(__name__)

OUTPUT_FORMATS = ('text', 'json', 'table')


def print_version_table(variables: VersionVariables, console: Console | None = None) -> None:
    """Print the version variables as a two-column Rich table."""
    if console is None:
        console = Console()
    table = Table(show_header=True, header_style='bold', show_edge=False, pad_edge=False)
    table.add_column('Variable', style='bold')
    table.add_column('Value')
    for name, value in variables.model_dump(by_alias=True).items():
        table.add_row(name, '' if value is None else str(value))
    console.print(table)


def _cmd_calculate(args: argparse.Namespace) -> int:
    repo = GitRepository(Path(args.path))
    config = load_repo_config(repo.root, Path(args.config) if args.config else None)
    branch = args.branch or repo.current_branch()
    variables = calculate_version_variables(repo, config, branch, head=repo.head())

    if args.output == 'json':
        sys.stdout.write(variables.model_dump_json(by_alias=True, indent=2) + '\n')
    elif args.output == 'table':
        print_version_table(variables)
    else:
        sys.stdout.write(f'Calculated next version: {variables.full_semver}\n')
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    target = Path(args.path) / CONFIG_FILE_NAME
    if target.exists():
        logger.info('config_exists', path=str(target), hint='Delete it first to regenerate.')
        return 0
    text = render_template(args.workflow)
    try:
        target.write_text(text, encoding='utf-8')
    except OSError as exc:
        raise GitSemverError(f'Failed to write {target}: {exc}') from exc
    logger.info('config_created', path=str(target), workflow=args.workflow)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the ``gitsemver`` argument parser."""
    parser = argparse.ArgumentParser(
        prog='gitsemver',
        description='Calculate the next semantic version from git history.',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Show debug logs.')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only show warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Emit logs as JSON lines on stderr.')
    sub = parser.add_subparsers(dest='command', required=True)

    calc = sub.add_parser('calculate', help='Calculate the next version of a branch.')
    calc.add_argument('--path', default='.', help='Directory inside the repository (default: .).')
    calc.add_argument('--branch', default=None, help='Branch to version (default: the checked-out branch).')
    calc.add_argument('--config', default=None, help='Config file (default: gitsemver.toml or pyproject.toml).')
    calc.add_argument('--output', choices=OUTPUT_FORMATS, default='text', help='Output format (default: text).')
    calc.set_defaults(handler=_cmd_calculate)

    init = sub.add_parser('init', help=f'Write a starter {CONFIG_FILE_NAME}.')
    init.add_argument('--path', default='.', help='Directory to write the file to (default: .).')
    init.add_argument(
        '--workflow',
        default=DEFAULT_WORKFLOW,
        help=f'Workflow template: {", ".join(WORKFLOWS)} (default: {DEFAULT_WORKFLOW}).',
    )
    init.set_defaults(handler=_cmd_init)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)
    try:
        return args.handler(args)
    except GitSemverError as exc:
        logger.error('command_failed', command=args.command, error=str(exc), hint=exc.hint or None)
        return 1


__all__ = [
    'build_parser',
    'main',
    'print_version_table',
]
