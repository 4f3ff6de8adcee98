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

r"""Turns bare expression tokens into license / addition leaves.

Resolution order for one token::

    token
      │
      ├─ contains ":" ──────────→ external reference
      │                           prefix → namespace map → namespace#suffix
      │
      ├─ listed ID (any case) ──→ listed license / exception
      │                           copied into the target store once
      │
      ├─ NOASSERTION / NONE ────→ sentinel (license tokens only)
      │
      └─ anything else ─────────→ custom license / addition at
                                  custom_license_uri_prefix + token,
                                  created as a placeholder if absent

The resolver trusts the store's :meth:`~licexpr.store.ModelStore.get_or_create`
to be atomic, so concurrent parses against one store never create two
objects for the same ID, and a placeholder carries its marker text from
the moment it becomes visible.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from licexpr._types import (
    NOASSERTION_VALUE,
    NONE_VALUE,
    PROP_ADDITION_TEXT,
    PROP_LICENSE_ID,
    PROP_LICENSE_TEXT,
    UNINITIALIZED_LICENSE_TEXT,
    AdditionKind,
    LicenseKind,
    ObjectType,
)
from licexpr.copy import ModelCopyManager
from licexpr.errors import ErrorKind, LicenseExpressionError
from licexpr.logging import get_logger
from licexpr.model import NOASSERTION_LICENSE, NONE_LICENSE, AdditionRef, LicenseRef
from licexpr.registry import ListedLicenses, listed_object_uri
from licexpr.store import ModelStore

__all__ = [
    'LicenseResolver',
    'external_object_uri',
]

log = get_logger('licexpr.resolver')

_NAMESPACE_SEPARATORS = ('#', '/')

_T = TypeVar('_T')


def external_object_uri(token: str, namespace_map: Mapping[str, str] | None) -> str:
    """Map a ``prefix:suffix`` token to the external object URI.

    Args:
        token: The external reference, e.g. ``"upstream:LicenseRef-1"``.
        namespace_map: Prefix → namespace URI.

    Returns:
        ``namespace + suffix`` when the namespace already ends in ``#``
        or ``/``, otherwise ``namespace#suffix``.

    Raises:
        LicenseExpressionError: ``MALFORMED_EXPRESSION`` for anything but
            exactly two non-empty parts, ``UNKNOWN_EXTERNAL_PREFIX`` when
            the prefix is not mapped.
    """
    parts = token.split(':')
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise LicenseExpressionError(
            ErrorKind.MALFORMED_EXPRESSION,
            'Invalid external ID',
            sub_expression=token,
        )
    prefix, suffix = parts
    namespace = (namespace_map or {}).get(prefix)
    if namespace is None:
        raise LicenseExpressionError(
            ErrorKind.UNKNOWN_EXTERNAL_PREFIX,
            f'Prefix {prefix!r} is not mapped to a namespace',
            sub_expression=token,
        )
    if namespace.endswith(_NAMESPACE_SEPARATORS):
        return namespace + suffix
    return f'{namespace}#{suffix}'


class LicenseResolver:
    """Resolves license and addition tokens against a store and registry.

    Args:
        store: Target store that receives listed-license copies and
            custom-license placeholders.
        registry: The listed license/exception registry.
        copy_manager: Copies listed objects into *store*. When ``None``,
            listed leaves point at their canonical URI without copying.
        custom_license_uri_prefix: Prefix of object URIs for custom
            licenses and additions (usually ``document_uri#``).
        namespace_map: External-reference prefix → namespace URI.
    """

    def __init__(
        self,
        store: ModelStore,
        registry: ListedLicenses,
        *,
        copy_manager: ModelCopyManager | None = None,
        custom_license_uri_prefix: str,
        namespace_map: Mapping[str, str] | None = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._copy_manager = copy_manager
        self._prefix = custom_license_uri_prefix
        self._namespace_map = dict(namespace_map or {})

    # ── Public API ───────────────────────────────────────────────────

    def resolve_license_token(self, token: str) -> LicenseRef:
        """Resolve *token* in license position.

        Raises:
            LicenseExpressionError: For bad external references, or
                ``RESOLUTION_FAILED`` when the registry or store raises.
        """
        if ':' in token:
            return LicenseRef(
                LicenseKind.EXTERNAL_CUSTOM,
                external_object_uri(token, self._namespace_map),
                token,
                self._store,
            )
        listed_id = self._guard(token, self._registry.listed_license_id_case_sensitive, token)
        if listed_id is not None:
            uri = self._ensure_listed(token, listed_id, ObjectType.LISTED_LICENSE)
            return LicenseRef(LicenseKind.LISTED, uri, listed_id, self._store)
        if token == NOASSERTION_VALUE:
            return NOASSERTION_LICENSE
        if token == NONE_VALUE:
            return NONE_LICENSE
        uri = self._ensure_custom(token, ObjectType.CUSTOM_LICENSE, PROP_LICENSE_TEXT)
        return LicenseRef(LicenseKind.CUSTOM, uri, token, self._store)

    def resolve_exception_token(self, token: str) -> AdditionRef:
        """Resolve *token* in the position after ``WITH``.

        Raises:
            LicenseExpressionError: As for :meth:`resolve_license_token`.
        """
        if ':' in token:
            return AdditionRef(
                AdditionKind.EXTERNAL_CUSTOM_ADDITION,
                external_object_uri(token, self._namespace_map),
                token,
                self._store,
            )
        listed_id = self._guard(token, self._registry.listed_exception_id_case_sensitive, token)
        if listed_id is not None:
            uri = self._ensure_listed(token, listed_id, ObjectType.LISTED_LICENSE_EXCEPTION)
            return AdditionRef(AdditionKind.LISTED_EXCEPTION, uri, listed_id, self._store)
        uri = self._ensure_custom(token, ObjectType.CUSTOM_LICENSE_ADDITION, PROP_ADDITION_TEXT)
        return AdditionRef(AdditionKind.CUSTOM_ADDITION, uri, token, self._store)

    # ── Internals ────────────────────────────────────────────────────

    @staticmethod
    def _guard(token: str, fn: Callable[..., _T], *args: Any) -> _T:  # noqa: ANN401
        """Call a collaborator, wrapping its failures with the token."""
        try:
            return fn(*args)
        except LicenseExpressionError:
            raise
        except Exception as exc:
            raise LicenseExpressionError(
                ErrorKind.RESOLUTION_FAILED,
                f'Unable to resolve license token: {exc}',
                sub_expression=token,
            ) from exc

    def _ensure_listed(self, token: str, listed_id: str, object_type: ObjectType) -> str:
        """Make sure the target store holds the listed object; return its URI."""
        uri = listed_object_uri(listed_id)
        if self._copy_manager is None or self._guard(token, self._store.exists, uri):
            return uri
        self._guard(
            token,
            self._copy_manager.copy,
            self._store,
            uri,
            self._registry.store,
            uri,
            object_type,
        )
        log.debug('listed_object_copied', token=token, listed_id=listed_id, object_type=object_type.value)
        return uri

    def _ensure_custom(self, token: str, object_type: ObjectType, text_property: str) -> str:
        """Return the custom object URI, creating a placeholder if absent."""
        uri = self._prefix + token
        initial = {PROP_LICENSE_ID: token, text_property: UNINITIALIZED_LICENSE_TEXT}
        _, created = self._guard(token, self._store.get_or_create, uri, object_type, initial)
        if created:
            log.debug('placeholder_created', token=token, object_uri=uri, object_type=object_type.value)
        return uri
