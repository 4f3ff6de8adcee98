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

"""Model store holding license and addition objects by URI.

The parser never embeds mutable license data in the expression tree.
Leaves keep a handle (store + object URI) and the store owns the
object's properties (name, text, ...), so a caller can fill in the real
text of a ``LicenseRef-`` placeholder after parsing without touching the
tree.

:class:`ModelStore` is the protocol the parser consumes;
:class:`InMemoryModelStore` is the thread-safe implementation shipped
with licexpr.
"""

from __future__ import annotations

import itertools
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from licexpr._types import ObjectType

__all__ = [
    'ANONYMOUS_ID_PREFIX',
    'InMemoryModelStore',
    'ModelStore',
    'StoredObject',
]

ANONYMOUS_ID_PREFIX = '_:anon-'


@dataclass(eq=False)
class StoredObject:
    """A single object held by a model store.

    Compared by identity: two lookups of the same URI in the same store
    return the very same :class:`StoredObject`.

    Attributes:
        object_uri: Unique URI of the object within its store.
        object_type: Type tag of the object.
        properties: Property name → value.
    """

    object_uri: str
    object_type: ObjectType
    properties: dict[str, object] = field(default_factory=dict)


class ModelStore(Protocol):
    """Operations the parser and copy manager need from a store."""

    def exists(self, object_uri: str) -> bool:
        """Return whether an object with *object_uri* is held."""  # pragma: no cover
        ...

    def get(self, object_uri: str) -> StoredObject | None:
        """Return the object for *object_uri*, or ``None``."""  # pragma: no cover
        ...

    def get_or_create(
        self,
        object_uri: str,
        object_type: ObjectType,
        initial: Mapping[str, object] | None = None,
    ) -> tuple[StoredObject, bool]:
        """Return ``(object, created)`` for *object_uri*, creating it atomically if absent.

        A new object receives *initial* as its properties before any other
        caller can see it.
        """  # pragma: no cover
        ...

    def next_anonymous_id(self) -> str:
        """Allocate a fresh anonymous object ID."""  # pragma: no cover
        ...


class InMemoryModelStore:
    """Dictionary-backed :class:`ModelStore`.

    All operations are guarded by one re-entrant lock so concurrent
    parses against the same store never create two objects for one URI.
    """

    def __init__(self) -> None:
        self._objects: dict[str, StoredObject] = {}
        self._lock = threading.RLock()
        self._anon_counter = itertools.count()

    def __repr__(self) -> str:
        return f'InMemoryModelStore(objects={len(self)})'

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)

    def __contains__(self, object_uri: object) -> bool:
        return isinstance(object_uri, str) and self.exists(object_uri)

    def __iter__(self) -> Iterator[StoredObject]:
        with self._lock:
            return iter(list(self._objects.values()))

    def exists(self, object_uri: str) -> bool:
        """Return whether an object with *object_uri* is held."""
        with self._lock:
            return object_uri in self._objects

    def get(self, object_uri: str) -> StoredObject | None:
        """Return the object for *object_uri*, or ``None``."""
        with self._lock:
            return self._objects.get(object_uri)

    def get_or_create(
        self,
        object_uri: str,
        object_type: ObjectType,
        initial: Mapping[str, object] | None = None,
    ) -> tuple[StoredObject, bool]:
        """Return ``(object, created)``; the flag is ``True`` only for new objects.

        *initial* is ignored when the object already exists.
        """
        with self._lock:
            existing = self._objects.get(object_uri)
            if existing is not None:
                return existing, False
            obj = StoredObject(object_uri=object_uri, object_type=object_type, properties=dict(initial or {}))
            self._objects[object_uri] = obj
            return obj, True

    def get_value(self, object_uri: str, prop: str, default: object = None) -> object:
        """Return property *prop* of *object_uri*, or *default*."""
        with self._lock:
            obj = self._objects.get(object_uri)
            if obj is None:
                return default
            return obj.properties.get(prop, default)

    def set_value(self, object_uri: str, prop: str, value: object) -> None:
        """Set property *prop* on an existing object.

        Raises:
            KeyError: If no object with *object_uri* exists.
        """
        with self._lock:
            self._objects[object_uri].properties[prop] = value

    def delete(self, object_uri: str) -> None:
        """Remove *object_uri* from the store if present."""
        with self._lock:
            self._objects.pop(object_uri, None)

    def next_anonymous_id(self) -> str:
        """Allocate a fresh anonymous object ID (``_:anon-N``)."""
        with self._lock:
            return f'{ANONYMOUS_ID_PREFIX}{next(self._anon_counter)}'

    def object_uris(self, object_type: ObjectType | None = None) -> list[str]:
        """Return held URIs, optionally restricted to one *object_type*."""
        with self._lock:
            return [uri for uri, obj in self._objects.items() if object_type is None or obj.object_type is object_type]
