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

r"""SPDX license expression parsing.

Turns expression strings into a license-algebra tree whose leaves are
handles to license objects held in a model store.

Usage::

    from licexpr import InMemoryModelStore, parse_license_expression

    store = InMemoryModelStore()
    tree = parse_license_expression(
        'GPL-2.0-only+ WITH Classpath-exception-2.0 OR LicenseRef-mine',
        store,
        custom_license_uri_prefix='https://example.com/sbom#',
    )
    str(tree)
    # 'GPL-2.0-only+ WITH Classpath-exception-2.0 OR LicenseRef-mine'

    # LicenseRef-mine now exists in the store as a placeholder:
    store.get('https://example.com/sbom#LicenseRef-mine')
"""

from licexpr.copy import ModelCopyManager
from licexpr.errors import (
    ConfigError,
    ErrorKind,
    LicenseExpressionError,
    LicenseListError,
    LicexprError,
)
from licexpr.factory import (
    get_license_list_version,
    is_listed_exception_id,
    is_listed_license_id,
    listed_exception_id_case_sensitive,
    listed_license_id_case_sensitive,
    parse_spdx_license_string,
)
from licexpr.model import (
    AdditionRef,
    ConjunctiveSet,
    DisjunctiveSet,
    InvalidLicenseExpression,
    LicenseExpression,
    LicenseRef,
    OrLater,
    SimpleLicense,
    WithException,
    addition_ids,
    license_ids,
)
from licexpr.parser import parse_license_expression
from licexpr.registry import ListedLicenses, get_listed_licenses, reset_listed_licenses
from licexpr.store import InMemoryModelStore, ModelStore

__all__ = [
    'AdditionRef',
    'ConfigError',
    'ConjunctiveSet',
    'DisjunctiveSet',
    'ErrorKind',
    'InMemoryModelStore',
    'InvalidLicenseExpression',
    'LicenseExpression',
    'LicenseExpressionError',
    'LicenseListError',
    'LicenseRef',
    'LicexprError',
    'ListedLicenses',
    'ModelCopyManager',
    'ModelStore',
    'OrLater',
    'SimpleLicense',
    'WithException',
    'addition_ids',
    'get_license_list_version',
    'get_listed_licenses',
    'is_listed_exception_id',
    'is_listed_license_id',
    'license_ids',
    'listed_exception_id_case_sensitive',
    'listed_license_id_case_sensitive',
    'parse_license_expression',
    'parse_spdx_license_string',
    'reset_listed_licenses',
]
