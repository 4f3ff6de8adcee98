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

"""Copy manager that clones objects from one model store into another.

Used by the resolver to pull a listed license (or exception) out of the
registry's store into the caller's target store the first time the
license shows up in an expression.
"""

from __future__ import annotations

import threading
import weakref

from licexpr._types import ObjectType
from licexpr.logging import get_logger
from licexpr.store import ModelStore

__all__ = [
    'ModelCopyManager',
]

log = get_logger('licexpr.copy')


class ModelCopyManager:
    """Clones objects between stores and remembers what it copied.

    Copies are shallow: property values are copied by reference, which
    is sufficient for the scalar properties listed licenses carry.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # from_store -> to_store -> {from_uri: to_uri}; stores are held weakly
        self._copied: weakref.WeakKeyDictionary[ModelStore, weakref.WeakKeyDictionary[ModelStore, dict[str, str]]] = (
            weakref.WeakKeyDictionary()
        )

    def copy(
        self,
        to_store: ModelStore,
        to_uri: str,
        from_store: ModelStore,
        from_uri: str,
        object_type: ObjectType,
    ) -> str:
        """Copy *from_uri* in *from_store* to *to_uri* in *to_store*.

        A no-op if *to_store* already holds *to_uri*.

        Returns:
            The URI of the object in *to_store*.

        Raises:
            KeyError: If *from_store* does not hold *from_uri*.
        """
        source = from_store.get(from_uri)
        if source is None:
            raise KeyError(f'{from_uri!r} not found in source store')
        _, created = to_store.get_or_create(to_uri, object_type, dict(source.properties))
        if created:
            log.debug('object_copied', from_uri=from_uri, to_uri=to_uri, object_type=object_type.value)
        with self._lock:
            targets = self._copied.setdefault(from_store, weakref.WeakKeyDictionary())
            targets.setdefault(to_store, {})[from_uri] = to_uri
        return to_uri

    def copied_uri(self, from_store: ModelStore, from_uri: str, to_store: ModelStore) -> str | None:
        """Return where *from_uri* was copied to in *to_store*, if it was."""
        with self._lock:
            targets = self._copied.get(from_store)
            if targets is None:
                return None
            return targets.get(to_store, {}).get(from_uri)
