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

"""Structured logging for licexpr.

Configures `structlog <https://www.structlog.org/>`_ with two output modes:

- **Console** (default when TTY): colored, human-readable output.
- **JSON** (``json_log=True``): one JSON object per line.

Both modes write to stderr. Library code only calls :func:`get_logger`;
applications embedding licexpr decide whether to call
:func:`configure_logging` at all. Until something configures structlog,
only warnings and errors reach stderr.

Usage::

    from licexpr.logging import configure_logging, get_logger

    configure_logging(verbose=True)
    log = get_logger('licexpr.parser')
    log.debug('expression_parsed', expression='MIT OR Apache-2.0')
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

#: Longest expression string kept verbatim in a log event.
MAX_LOGGED_EXPRESSION: int = 200


def _install_library_defaults() -> None:
    """Keep licexpr quiet until the application configures logging.

    structlog's stock setup prints every event, debug included, to
    stdout. Unless something already configured structlog, only warnings
    and errors are written, to stderr.
    """
    if structlog.is_configured():
        return
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
) -> None:
    """Configure structlog for licexpr.

    Should be called once at startup, before any logging calls.

    Args:
        verbose: Enable debug-level output.
        quiet: Suppress info-level output (only warnings and errors).
        json_log: Use JSON output instead of colored console output.
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        format='%(message)s',
        stream=sys.stderr,
        level=level,
        force=True,
    )

    shared_processors: list[structlog.types.Processor] = [  # type: ignore[assignment]
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        truncate_expressions,
    ]

    if json_log:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str = 'licexpr') -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger.

    Args:
        name: Logger name, used for filtering and identification.

    Returns:
        A :class:`structlog.stdlib.BoundLogger` instance.
    """
    return structlog.get_logger(name)


def _shorten(value: object) -> object:
    """Cut an over-long string down to :data:`MAX_LOGGED_EXPRESSION` chars."""
    if not isinstance(value, str) or len(value) <= MAX_LOGGED_EXPRESSION:
        return value
    return value[:MAX_LOGGED_EXPRESSION] + f'... [{len(value) - MAX_LOGGED_EXPRESSION} more chars]'


def truncate_expressions(
    logger: Any,  # noqa: ANN401
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor: shorten ``expression`` fields.

    License expressions from scanned metadata can be arbitrarily long
    (some packages put whole license texts in their license field), so
    the ``expression`` and ``token`` fields of every event are capped.
    """
    for key in ('expression', 'token'):
        if key in event_dict:
            event_dict[key] = _shorten(event_dict[key])
    return event_dict


__all__ = [
    'MAX_LOGGED_EXPRESSION',
    'configure_logging',
    'get_logger',
    'truncate_expressions',
]

_install_library_defaults()
