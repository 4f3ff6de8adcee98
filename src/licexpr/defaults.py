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

"""Process-wide default store, document URI and copy manager.

Used when a caller parses without passing a store. Lifecycle:

- first access lazily creates an :class:`InMemoryModelStore`, a
  :class:`ModelCopyManager` and uses :data:`DEFAULT_DOCUMENT_URI`;
- :func:`initialize_defaults` replaces all three at once.
"""

from __future__ import annotations

import threading

from licexpr._types import DEFAULT_DOCUMENT_URI
from licexpr.copy import ModelCopyManager
from licexpr.store import InMemoryModelStore, ModelStore

__all__ = [
    'get_default_copy_manager',
    'get_default_document_uri',
    'get_default_store',
    'initialize_defaults',
]

_lock = threading.Lock()
_store: ModelStore | None = None
_document_uri: str = DEFAULT_DOCUMENT_URI
_copy_manager: ModelCopyManager | None = None


def initialize_defaults(
    store: ModelStore,
    document_uri: str,
    copy_manager: ModelCopyManager,
) -> None:
    """Replace the default store, document URI and copy manager."""
    global _store, _document_uri, _copy_manager  # noqa: PLW0603
    with _lock:
        _store = store
        _document_uri = document_uri
        _copy_manager = copy_manager


def get_default_store() -> ModelStore:
    """Return the default store, creating an in-memory one on first use."""
    global _store  # noqa: PLW0603
    with _lock:
        if _store is None:
            _store = InMemoryModelStore()
        return _store


def get_default_document_uri() -> str:
    """Return the default document URI."""
    with _lock:
        return _document_uri


def get_default_copy_manager() -> ModelCopyManager:
    """Return the default copy manager, creating one on first use."""
    global _copy_manager  # noqa: PLW0603
    with _lock:
        if _copy_manager is None:
            _copy_manager = ModelCopyManager()
        return _copy_manager
