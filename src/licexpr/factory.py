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

"""Convenience entry points over the parser and the listed-license registry.

Most callers only need these::

    from licexpr.factory import parse_spdx_license_string, is_listed_license_id

    parse_spdx_license_string('MIT OR Apache-2.0')
    is_listed_license_id('apache-2.0')  # True
"""

from __future__ import annotations

from collections.abc import Mapping

from licexpr.config import LicexprConfig
from licexpr.copy import ModelCopyManager
from licexpr.errors import LicenseExpressionError
from licexpr.logging import get_logger
from licexpr.model import InvalidLicenseExpression, LicenseExpression
from licexpr.parser import parse_license_expression
from licexpr.registry import get_listed_licenses
from licexpr.store import ModelStore, StoredObject

__all__ = [
    'get_license_list_version',
    'get_listed_exception',
    'get_listed_license',
    'is_listed_exception_id',
    'is_listed_license_id',
    'listed_exception_id_case_sensitive',
    'listed_exception_ids',
    'listed_license_id_case_sensitive',
    'listed_license_ids',
    'parse_spdx_license_string',
    'parse_with_config',
]

log = get_logger('licexpr.factory')


def parse_spdx_license_string(
    expression: str,
    store: ModelStore | None = None,
    *,
    custom_license_uri_prefix: str | None = None,
    copy_manager: ModelCopyManager | None = None,
    namespace_map: Mapping[str, str] | None = None,
    strict: bool = True,
) -> LicenseExpression | InvalidLicenseExpression:
    """Parse *expression* with the process defaults.

    Args:
        expression: The license expression text.
        store: Target store; defaults to the process default store.
        custom_license_uri_prefix: Prefix for custom license URIs.
        copy_manager: Copy manager for listed licenses.
        namespace_map: External-reference prefix → namespace URI.
        strict: When ``False``, a parse failure returns an
            :class:`~licexpr.model.InvalidLicenseExpression` holding the
            message instead of raising.

    Raises:
        LicenseExpressionError: On a parse failure when *strict* is set.
    """
    try:
        return parse_license_expression(
            expression,
            store,
            custom_license_uri_prefix=custom_license_uri_prefix,
            copy_manager=copy_manager,
            namespace_map=namespace_map,
        )
    except LicenseExpressionError as exc:
        if strict:
            raise
        log.warning('invalid_license_expression', expression=expression, kind=exc.kind.value)
        return InvalidLicenseExpression(expression=expression or '', message=str(exc))


def parse_with_config(
    expression: str,
    config: LicexprConfig,
    store: ModelStore | None = None,
    *,
    copy_manager: ModelCopyManager | None = None,
) -> LicenseExpression:
    """Parse *expression* using the document URI and namespaces in *config*.

    Raises:
        LicenseExpressionError: On a parse failure.
    """
    return parse_license_expression(
        expression,
        store,
        custom_license_uri_prefix=config.effective_custom_license_uri_prefix,
        copy_manager=copy_manager,
        namespace_map=config.namespaces,
        registry=get_listed_licenses(config),
    )


def is_listed_license_id(license_id: str) -> bool:
    """Return ``True`` if *license_id* is on the SPDX license list."""
    return get_listed_licenses().is_listed_license_id(license_id)


def is_listed_exception_id(exception_id: str) -> bool:
    """Return ``True`` if *exception_id* is on the SPDX exception list."""
    return get_listed_licenses().is_listed_exception_id(exception_id)


def listed_license_id_case_sensitive(license_id: str) -> str | None:
    return get_listed_licenses().listed_license_id_case_sensitive(license_id)


def listed_exception_id_case_sensitive(exception_id: str) -> str | None:
    return get_listed_licenses().listed_exception_id_case_sensitive(exception_id)


def get_listed_license(license_id: str) -> StoredObject | None:
    """Return the registry object of a listed license, or ``None``."""
    return get_listed_licenses().get_listed_license(license_id)


def get_listed_exception(exception_id: str) -> StoredObject | None:
    """Return the registry object of a listed exception, or ``None``."""
    return get_listed_licenses().get_listed_exception(exception_id)


def listed_license_ids() -> list[str]:
    return get_listed_licenses().license_ids()


def listed_exception_ids() -> list[str]:
    return get_listed_licenses().exception_ids()


def get_license_list_version() -> str:
    """Return the version of the loaded SPDX license list."""
    return get_listed_licenses().version
