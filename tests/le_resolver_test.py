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

"""Tests for licexpr.resolver."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from unittest.mock import MagicMock

import pytest
from licexpr._types import (
    PROP_ADDITION_TEXT,
    PROP_LICENSE_ID,
    UNINITIALIZED_LICENSE_TEXT,
    AdditionKind,
    LicenseKind,
    ObjectType,
)
from licexpr.copy import ModelCopyManager
from licexpr.errors import ErrorKind, LicenseExpressionError
from licexpr.model import NOASSERTION_LICENSE, NONE_LICENSE
from licexpr.registry import ListedLicenses
from licexpr.resolver import LicenseResolver, external_object_uri
from licexpr.store import InMemoryModelStore, StoredObject

PREFIX = 'https://example.com/doc#'


@pytest.fixture(scope='module')
def registry() -> ListedLicenses:
    """Load the bundled license list once per module."""
    return ListedLicenses.from_toml()


@pytest.fixture()
def store() -> InMemoryModelStore:
    """Return an empty store."""
    return InMemoryModelStore()


class _PausingStore(InMemoryModelStore):
    """Holds the creating caller until the test releases it."""

    def __init__(self) -> None:
        super().__init__()
        self.created = threading.Event()
        self.release = threading.Event()

    def get_or_create(
        self,
        object_uri: str,
        object_type: ObjectType,
        initial: Mapping[str, object] | None = None,
    ) -> tuple[StoredObject, bool]:
        obj, created = super().get_or_create(object_uri, object_type, initial)
        if created:
            self.created.set()
            self.release.wait(timeout=5)
        return obj, created


def _resolver(store: InMemoryModelStore, registry: ListedLicenses, **kwargs: object) -> LicenseResolver:
    return LicenseResolver(store, registry, custom_license_uri_prefix=PREFIX, **kwargs)  # type: ignore[arg-type]


class TestExternalObjectUri:
    """Tests for external_object_uri()."""

    def test_hash_inserted(self) -> None:
        """A namespace without a trailing separator gets '#'."""
        uri = external_object_uri('doc:LicenseRef-1', {'doc': 'https://x.org/sbom'})
        assert uri == 'https://x.org/sbom#LicenseRef-1'

    def test_trailing_hash_kept(self) -> None:
        """A namespace ending in '#' is concatenated directly."""
        uri = external_object_uri('doc:LicenseRef-1', {'doc': 'https://x.org/sbom#'})
        assert uri == 'https://x.org/sbom#LicenseRef-1'

    def test_trailing_slash_kept(self) -> None:
        """A namespace ending in '/' is concatenated directly."""
        assert external_object_uri('doc:LicenseRef-1', {'doc': 'https://x.org/ns/'}) == 'https://x.org/ns/LicenseRef-1'

    def test_no_map(self) -> None:
        """Without a namespace map every prefix is unknown."""
        with pytest.raises(LicenseExpressionError) as exc_info:
            external_object_uri('doc:LicenseRef-1', None)
        assert exc_info.value.kind is ErrorKind.UNKNOWN_EXTERNAL_PREFIX
        assert exc_info.value.sub_expression == 'doc:LicenseRef-1'

    @pytest.mark.parametrize('token', [':LicenseRef-1', 'doc:', 'a:b:c'])
    def test_malformed(self, token: str) -> None:
        """Tokens that are not exactly prefix:suffix are malformed."""
        with pytest.raises(LicenseExpressionError) as exc_info:
            external_object_uri(token, {'doc': 'https://x.org/sbom#', 'a': 'https://a.org#'})
        assert exc_info.value.kind is ErrorKind.MALFORMED_EXPRESSION


class TestResolveLicenseToken:
    """Tests for LicenseResolver.resolve_license_token()."""

    def test_listed(self, store: InMemoryModelStore, registry: ListedLicenses) -> None:
        """Listed IDs resolve case-insensitively to canonical handles."""
        ref = _resolver(store, registry).resolve_license_token('bsd-3-clause')
        assert ref.kind is LicenseKind.LISTED
        assert ref.license_id == 'BSD-3-Clause'
        assert ref.object_uri == 'http://spdx.org/licenses/BSD-3-Clause'
        assert ref.store is store

    def test_listed_copied(self, store: InMemoryModelStore, registry: ListedLicenses) -> None:
        """With a copy manager the registry object is cloned into the store."""
        manager = ModelCopyManager()
        _resolver(store, registry, copy_manager=manager).resolve_license_token('MIT')
        obj = store.get('http://spdx.org/licenses/MIT')
        assert obj is not None
        assert obj.object_type is ObjectType.LISTED_LICENSE
        assert obj.properties[PROP_LICENSE_ID] == 'MIT'
        mit_uri = 'http://spdx.org/licenses/MIT'
        assert manager.copied_uri(registry.store, mit_uri, store) == mit_uri

    def test_existing_listed_not_copied(self, store: InMemoryModelStore, registry: ListedLicenses) -> None:
        """An object already in the store is not copied again."""
        store.get_or_create('http://spdx.org/licenses/MIT', ObjectType.LISTED_LICENSE)
        manager = MagicMock(spec=ModelCopyManager)
        _resolver(store, registry, copy_manager=manager).resolve_license_token('MIT')
        manager.copy.assert_not_called()

    def test_sentinels(self, store: InMemoryModelStore, registry: ListedLicenses) -> None:
        """NOASSERTION and NONE resolve to the shared sentinels."""
        resolver = _resolver(store, registry)
        assert resolver.resolve_license_token('NOASSERTION') == NOASSERTION_LICENSE
        assert resolver.resolve_license_token('NONE') == NONE_LICENSE
        assert len(store) == 0

    def test_sentinel_case_sensitive(self, store: InMemoryModelStore, registry: ListedLicenses) -> None:
        """Only the upper-case literals are sentinels."""
        ref = _resolver(store, registry).resolve_license_token('none')
        assert ref.kind is LicenseKind.CUSTOM

    def test_custom_placeholder(self, store: InMemoryModelStore, registry: ListedLicenses) -> None:
        """Unknown IDs become placeholders under the custom prefix."""
        ref = _resolver(store, registry).resolve_license_token('LicenseRef-foo')
        assert ref.kind is LicenseKind.CUSTOM
        assert ref.object_uri == PREFIX + 'LicenseRef-foo'
        assert ref.is_placeholder
        assert store.get_value(ref.object_uri, PROP_LICENSE_ID) == 'LicenseRef-foo'

    def test_custom_existing_untouched(self, store: InMemoryModelStore, registry: ListedLicenses) -> None:
        """An existing custom object keeps its properties."""
        obj, _ = store.get_or_create(PREFIX + 'LicenseRef-foo', ObjectType.CUSTOM_LICENSE)
        obj.properties['licenseText'] = 'Real'
        ref = _resolver(store, registry).resolve_license_token('LicenseRef-foo')
        assert ref.text == 'Real'

    def test_concurrent_placeholder_initialized(self, registry: ListedLicenses) -> None:
        """A parse racing the creator already sees the placeholder text."""
        store = _PausingStore()
        resolver = _resolver(store, registry)
        worker = threading.Thread(target=resolver.resolve_license_token, args=('LicenseRef-x',))
        worker.start()
        try:
            assert store.created.wait(timeout=5)
            ref = resolver.resolve_license_token('LicenseRef-x')
            assert ref.is_placeholder
            assert store.get_value(ref.object_uri, PROP_LICENSE_ID) == 'LicenseRef-x'
        finally:
            store.release.set()
            worker.join()
        assert len(store) == 1

    def test_store_failure_wrapped(self, registry: ListedLicenses) -> None:
        """Store errors surface as RESOLUTION_FAILED."""
        store = MagicMock()
        store.get_or_create.side_effect = OSError('disk full')
        resolver = LicenseResolver(store, registry, custom_license_uri_prefix=PREFIX)
        with pytest.raises(LicenseExpressionError) as exc_info:
            resolver.resolve_license_token('LicenseRef-foo')
        assert exc_info.value.kind is ErrorKind.RESOLUTION_FAILED
        assert isinstance(exc_info.value.__cause__, OSError)


class TestResolveExceptionToken:
    """Tests for LicenseResolver.resolve_exception_token()."""

    def test_listed_exception(self, store: InMemoryModelStore, registry: ListedLicenses) -> None:
        """Listed exceptions resolve case-insensitively."""
        ref = _resolver(store, registry).resolve_exception_token('classpath-exception-2.0')
        assert ref.kind is AdditionKind.LISTED_EXCEPTION
        assert ref.addition_id == 'Classpath-exception-2.0'

    def test_license_id_is_not_an_exception(self, store: InMemoryModelStore, registry: ListedLicenses) -> None:
        """A listed license ID after WITH is treated as a custom addition."""
        ref = _resolver(store, registry).resolve_exception_token('MIT')
        assert ref.kind is AdditionKind.CUSTOM_ADDITION

    def test_noassertion_not_special(self, store: InMemoryModelStore, registry: ListedLicenses) -> None:
        """Sentinel literals are not recognised in addition position."""
        ref = _resolver(store, registry).resolve_exception_token('NOASSERTION')
        assert ref.kind is AdditionKind.CUSTOM_ADDITION

    def test_custom_addition_placeholder(self, store: InMemoryModelStore, registry: ListedLicenses) -> None:
        """Custom additions get the placeholder text."""
        ref = _resolver(store, registry).resolve_exception_token('AdditionRef-x')
        obj = store.get(PREFIX + 'AdditionRef-x')
        assert obj is not None
        assert obj.object_type is ObjectType.CUSTOM_LICENSE_ADDITION
        assert obj.properties[PROP_ADDITION_TEXT] == UNINITIALIZED_LICENSE_TEXT
        assert ref.is_placeholder

    def test_external_addition(self, store: InMemoryModelStore, registry: ListedLicenses) -> None:
        """External additions map through the namespace table."""
        resolver = _resolver(store, registry, namespace_map={'ext': 'https://ext.org/doc'})
        ref = resolver.resolve_exception_token('ext:AdditionRef-1')
        assert ref.kind is AdditionKind.EXTERNAL_CUSTOM_ADDITION
        assert ref.object_uri == 'https://ext.org/doc#AdditionRef-1'
