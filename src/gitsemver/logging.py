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

"""Structured logging for gitsemver.

Every module logs through ``structlog`` bound loggers; the stdlib
``logging`` root handler does the actual writing, always to stderr, so
stdout carries nothing but the computed version::

    gitsemver calculate --output json | jq -r .FullSemVer

Two renderers are available:

┌───────────┬──────────────────────────────┬──────────────────────────────┐
│ Renderer  │ Selected by                  │ Output                       │
├───────────┼──────────────────────────────┼──────────────────────────────┤
│ console   │ default                      │ key=value, colored on a TTY  │
│ json      │ --json-log or                │ one object per line with an  │
│           │ GITSEMVER_LOG_FORMAT=json    │ ISO timestamp                │
└───────────┴──────────────────────────────┴──────────────────────────────┘
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

LOG_FORMAT_ENV = 'GITSEMVER_LOG_FORMAT'


def _level(*, verbose: bool, quiet: bool) -> int:
    # quiet beats verbose
    if quiet:
        return logging.WARNING
    return logging.DEBUG if verbose else logging.INFO


def _pre_chain(*, json_log: bool) -> list[structlog.types.Processor]:
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_log:
        chain.append(structlog.processors.TimeStamper(fmt='iso', utc=True))
    return chain


def _renderer(*, json_log: bool) -> structlog.types.Processor:
    if json_log:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, quiet: bool = False, json_log: bool = False) -> None:
    """Route structlog events through a single stderr handler.

    Calling it again replaces the previous setup, which is what the CLI
    and the tests rely on.

    Args:
        verbose: Also emit debug events such as strategy decisions and
            skipped tags.
        quiet: Emit warnings and errors only. Wins over ``verbose``.
        json_log: Use the JSON renderer. The ``GITSEMVER_LOG_FORMAT``
            environment variable set to ``json`` has the same effect.
    """
    json_log = json_log or os.environ.get(LOG_FORMAT_ENV, '').strip().lower() == 'json'

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer(json_log=json_log)],
        )
    )
    logging.basicConfig(handlers=[handler], level=_level(verbose=verbose, quiet=quiet), force=True)

    structlog.configure(
        processors=[*_pre_chain(json_log=json_log), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = 'gitsemver') -> structlog.stdlib.BoundLogger:
    """Logger for ``name``, normally the caller's ``__name__``."""
    return structlog.get_logger(name)


__all__ = [
    'LOG_FORMAT_ENV',
    'configure_logging',
    'get_logger',
]
