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

"""Tests for licexpr.errors."""

from __future__ import annotations

from licexpr.errors import (
    ConfigError,
    ErrorKind,
    LicenseExpressionError,
    LicenseListError,
    LicexprError,
)


class TestLicenseExpressionError:
    """Tests for LicenseExpressionError."""

    def test_message_parts(self) -> None:
        """The message carries detail, sub-expression and expression."""
        err = LicenseExpressionError(
            ErrorKind.MISSING_OPERAND,
            'Missing operand for AND',
            expression='MIT AND',
            sub_expression='MIT',
        )
        assert str(err) == "Missing operand for AND (at 'MIT') License expression: 'MIT AND'"
        assert isinstance(err, ValueError)
        assert isinstance(err, LicexprError)

    def test_detail_only(self) -> None:
        """Without context the message is just the detail."""
        assert str(LicenseExpressionError(ErrorKind.EMPTY_EXPRESSION, 'Empty')) == 'Empty'

    def test_with_expression(self) -> None:
        """with_expression keeps kind, detail, sub-expression and cause."""
        cause = RuntimeError('boom')
        err = LicenseExpressionError(ErrorKind.RESOLUTION_FAILED, 'failed', sub_expression='MIT')
        err.__cause__ = cause
        named = err.with_expression('MIT OR 0BSD')
        assert named is not err
        assert named.kind is ErrorKind.RESOLUTION_FAILED
        assert named.sub_expression == 'MIT'
        assert named.expression == 'MIT OR 0BSD'
        assert named.__cause__ is cause


class TestOtherErrors:
    """Tests for LicenseListError and ConfigError."""

    def test_license_list_error_bullets(self) -> None:
        """All collected errors appear in the message."""
        err = LicenseListError(['first problem', 'second problem'])
        assert err.errors == ['first problem', 'second problem']
        assert '2 error(s)' in str(err)
        assert '  - first problem' in str(err)
        assert '  - second problem' in str(err)

    def test_common_base(self) -> None:
        """Every licexpr error shares one base class."""
        assert issubclass(ConfigError, LicexprError)
        assert issubclass(LicenseListError, LicexprError)
