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

"""Shared leaf-level types and constants used across licexpr.

This module must have **zero** imports from other ``licexpr``
modules to avoid circular-import chains.  It is safe to import
from any module in the project.
"""

from __future__ import annotations

import enum
from typing import Final

__all__ = [
    'AdditionKind',
    'DEFAULT_DOCUMENT_URI',
    'LISTED_LICENSE_NAMESPACE',
    'LicenseKind',
    'NOASSERTION_LICENSE_URI',
    'NOASSERTION_VALUE',
    'NONE_LICENSE_URI',
    'NONE_VALUE',
    'ObjectType',
    'PROP_ADDITION_TEXT',
    'PROP_DEPRECATED',
    'PROP_LICENSE_ID',
    'PROP_LICENSE_TEXT',
    'PROP_NAME',
    'PROP_OSI_APPROVED',
    'UNINITIALIZED_LICENSE_TEXT',
]

#: Namespace of every SPDX listed license and exception object URI.
LISTED_LICENSE_NAMESPACE: Final[str] = 'http://spdx.org/licenses/'

#: Document URI used when the caller configures none.
DEFAULT_DOCUMENT_URI: Final[str] = 'https://spdx.org/documents/licexpr-default'

NOASSERTION_VALUE: Final[str] = 'NOASSERTION'
NONE_VALUE: Final[str] = 'NONE'

#: Well-known individual URIs of the two sentinel licenses.
NOASSERTION_LICENSE_URI: Final[str] = 'https://spdx.org/rdf/3.0.1/terms/ExpandedLicensing/NoAssertionLicense'
NONE_LICENSE_URI: Final[str] = 'https://spdx.org/rdf/3.0.1/terms/ExpandedLicensing/NoneLicense'

#: Text stored on placeholder custom licenses/additions created by the parser.
UNINITIALIZED_LICENSE_TEXT: Final[str] = (
    '[Initialized with license Parser.  The actual license text is not available]'
)

# Property names used on stored objects.
PROP_LICENSE_ID: Final[str] = 'licenseId'
PROP_NAME: Final[str] = 'name'
PROP_LICENSE_TEXT: Final[str] = 'licenseText'
PROP_ADDITION_TEXT: Final[str] = 'additionText'
PROP_OSI_APPROVED: Final[str] = 'isOsiApproved'
PROP_DEPRECATED: Final[str] = 'isDeprecatedLicenseId'


class ObjectType(enum.Enum):
    """Type tag of an object held in a model store."""

    LISTED_LICENSE = 'ExpandedLicensing.ListedLicense'
    LISTED_LICENSE_EXCEPTION = 'ExpandedLicensing.ListedLicenseException'
    CUSTOM_LICENSE = 'ExpandedLicensing.CustomLicense'
    CUSTOM_LICENSE_ADDITION = 'ExpandedLicensing.CustomLicenseAddition'


class LicenseKind(enum.Enum):
    """What a :class:`~licexpr.model.LicenseRef` leaf points at."""

    LISTED = 'listed'
    CUSTOM = 'custom'
    EXTERNAL_CUSTOM = 'external-custom'
    NO_ASSERTION = 'no-assertion'
    NONE = 'none'

    @property
    def is_sentinel(self) -> bool:
        """``True`` for the ``NOASSERTION`` / ``NONE`` singletons."""
        return self in (LicenseKind.NO_ASSERTION, LicenseKind.NONE)


class AdditionKind(enum.Enum):
    """What an :class:`~licexpr.model.AdditionRef` points at."""

    LISTED_EXCEPTION = 'listed-exception'
    CUSTOM_ADDITION = 'custom-addition'
    EXTERNAL_CUSTOM_ADDITION = 'external-custom-addition'
