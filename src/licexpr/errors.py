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

"""Error types raised by licexpr.

Every parse failure surfaces as a single :class:`LicenseExpressionError`
whose :attr:`~LicenseExpressionError.kind` tells callers what went wrong::

    ┌───────────────────────────┬──────────────────────────────────────────┐
    │ ErrorKind                 │ Typical input                            │
    ├───────────────────────────┼──────────────────────────────────────────┤
    │ EMPTY_EXPRESSION          │ ``""`` or ``"   "``                      │
    │ UNMATCHED_PARENTHESIS     │ ``"(MIT OR Apache-2.0"``                 │
    │ MISSING_OPERAND           │ ``"MIT AND"``                            │
    │ MISSING_EXCEPTION_CLAUSE  │ ``"MIT WITH"``                           │
    │ INVALID_WITH_SUBJECT      │ ``"(MIT AND BSD-3-Clause) WITH X"``      │
    │ INVALID_OR_LATER_SUBJECT  │ ``"(MIT AND BSD-3-Clause)+"``            │
    │ UNKNOWN_EXTERNAL_PREFIX   │ ``"nosuchdoc:LicenseRef-1"``             │
    │ MALFORMED_EXPRESSION      │ ``"MIT Apache-2.0"``                     │
    │ RESOLUTION_FAILED         │ registry lookup raised                   │
    │ INVARIANT_VIOLATED        │ illegal node built by hand               │
    └───────────────────────────┴──────────────────────────────────────────┘
"""

from __future__ import annotations

import enum

__all__ = [
    'ConfigError',
    'ErrorKind',
    'LicenseExpressionError',
    'LicenseListError',
    'LicexprError',
]


class LicexprError(Exception):
    """Base class for all licexpr errors."""


class ErrorKind(enum.Enum):
    """Failure categories for :class:`LicenseExpressionError`."""

    EMPTY_EXPRESSION = 'empty-expression'
    UNMATCHED_PARENTHESIS = 'unmatched-parenthesis'
    MISSING_OPERAND = 'missing-operand'
    MISSING_EXCEPTION_CLAUSE = 'missing-exception-clause'
    INVALID_WITH_SUBJECT = 'invalid-with-subject'
    INVALID_OR_LATER_SUBJECT = 'invalid-or-later-subject'
    UNKNOWN_EXTERNAL_PREFIX = 'unknown-external-prefix'
    MALFORMED_EXPRESSION = 'malformed-expression'
    RESOLUTION_FAILED = 'resolution-failed'
    INVARIANT_VIOLATED = 'invariant-violated'


class LicenseExpressionError(LicexprError, ValueError):
    """Raised when a license expression cannot be parsed or built.

    Attributes:
        kind: The failure category.
        detail: Human-readable description of the problem.
        expression: The full expression being parsed, or ``""`` when the
            error was raised outside of a parse.
        sub_expression: The offending token or token range, if known.
    """

    def __init__(
        self,
        kind: ErrorKind,
        detail: str,
        *,
        expression: str = '',
        sub_expression: str = '',
    ) -> None:
        """Initialize with the failure kind, detail and optional context."""
        self.kind = kind
        self.detail = detail
        self.expression = expression
        self.sub_expression = sub_expression
        message = detail
        if sub_expression:
            message += f' (at {sub_expression!r})'
        if expression:
            message += f" License expression: '{expression}'"
        super().__init__(message)

    def with_expression(self, expression: str) -> LicenseExpressionError:
        """Return a copy of this error that names the full *expression*."""
        err = LicenseExpressionError(
            self.kind,
            self.detail,
            expression=expression,
            sub_expression=self.sub_expression,
        )
        err.__cause__ = self.__cause__
        return err


class LicenseListError(LicexprError):
    """Raised when the listed-license data cannot be loaded or is invalid.

    Attributes:
        errors: List of human-readable error strings.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        bullet_list = '\n'.join(f'  - {e}' for e in errors)
        super().__init__(f'License list has {len(errors)} error(s):\n{bullet_list}')


class ConfigError(LicexprError):
    """Raised for invalid ``licexpr.toml`` / ``[tool.licexpr]`` settings."""
