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

r"""Registry of SPDX listed licenses and exceptions.

The registry answers "is this token a listed license/exception?" with a
case-insensitive match, hands back the canonical case-sensitive ID, and
owns a model store with one object per listed license so the resolver
can copy it into a caller's store.

Data Flow::

    ┌──────────────────────┐  only_use_local_licenses=false  ┌────────────┐
    │ spdx.org/licenses/   │────────────────────────────────→│            │
    │ licenses.json        │        (httpx, on failure ↓)    │  Listed    │
    │ exceptions.json      │                                 │  Licenses  │
    └──────────────────────┘                                 │  (store +  │
    ┌──────────────────────┐                                 │   id maps) │
    │ data/                │────────────────────────────────→│            │
    │ license_list.toml    │      bundled fallback           └────────────┘
    └──────────────────────┘

Process-wide lifecycle::

    get_listed_licenses()    # lazy init under the write lock, then shared
    reset_listed_licenses()  # rebuild under the write lock

Lookups share the read side of a reader/writer lock, so many parses can
consult the registry concurrently while a reset waits for them to drain.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

import httpx

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from licexpr._types import (
    LISTED_LICENSE_NAMESPACE,
    PROP_DEPRECATED,
    PROP_LICENSE_ID,
    PROP_NAME,
    PROP_OSI_APPROVED,
    ObjectType,
)
from licexpr.config import LicexprConfig, load_config
from licexpr.errors import LicenseListError
from licexpr.logging import get_logger
from licexpr.store import InMemoryModelStore, StoredObject

__all__ = [
    'BUNDLED_LICENSE_LIST',
    'ListedEntry',
    'ListedLicenses',
    'fetch_license_list',
    'get_listed_licenses',
    'listed_object_uri',
    'reset_listed_licenses',
]

log = get_logger('licexpr.registry')

_DATA_DIR = Path(__file__).resolve().parent / 'data'

#: Bundled license list shipped with the package.
BUNDLED_LICENSE_LIST: Final[Path] = _DATA_DIR / 'license_list.toml'


def listed_object_uri(listed_id: str) -> str:
    """Return the object URI of a listed license or exception."""
    return LISTED_LICENSE_NAMESPACE + listed_id


class _ReadWriteLock:
    """Many readers or one writer; writers are not starved by new readers."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._waiting_writers += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


@dataclass(frozen=True)
class ListedEntry:
    """One listed license or exception.

    Attributes:
        listed_id: Canonical, case-sensitive SPDX identifier.
        name: Human-readable full name.
        osi_approved: Whether OSI has approved the license
            (always ``False`` for exceptions).
        deprecated: Whether the identifier is deprecated.
    """

    listed_id: str
    name: str
    osi_approved: bool = False
    deprecated: bool = False


class ListedLicenses:
    """An immutable snapshot of the SPDX license list.

    Args:
        licenses: Listed licenses.
        exceptions: Listed exceptions.
        version: License list version string.
        source: Where the list was loaded from (for diagnostics).
    """

    def __init__(
        self,
        licenses: list[ListedEntry],
        exceptions: list[ListedEntry],
        *,
        version: str = '',
        source: str = '',
    ) -> None:
        self.version = version
        self.source = source
        self._license_ids = {e.listed_id.lower(): e.listed_id for e in licenses}
        self._exception_ids = {e.listed_id.lower(): e.listed_id for e in exceptions}
        self._store = InMemoryModelStore()
        for entry in licenses:
            self._add(entry, ObjectType.LISTED_LICENSE)
        for entry in exceptions:
            self._add(entry, ObjectType.LISTED_LICENSE_EXCEPTION)

    def __repr__(self) -> str:
        return (
            f'ListedLicenses(version={self.version!r}, licenses={len(self._license_ids)}, '
            f'exceptions={len(self._exception_ids)}, source={self.source!r})'
        )

    def _add(self, entry: ListedEntry, object_type: ObjectType) -> None:
        obj, _ = self._store.get_or_create(listed_object_uri(entry.listed_id), object_type)
        obj.properties.update({
            PROP_LICENSE_ID: entry.listed_id,
            PROP_NAME: entry.name,
            PROP_OSI_APPROVED: entry.osi_approved,
            PROP_DEPRECATED: entry.deprecated,
        })

    # ── Loading ──────────────────────────────────────────────────────

    @classmethod
    def from_toml(cls, path: Path = BUNDLED_LICENSE_LIST) -> ListedLicenses:
        """Load the list from a TOML file shaped like ``data/license_list.toml``.

        Raises:
            LicenseListError: If the file is missing or fails validation.
        """
        try:
            with path.open('rb') as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise LicenseListError([f'{path}: {exc}']) from exc
        errors: list[str] = []
        licenses = _entries_from_toml(data.get('licenses', {}), 'licenses', errors)
        exceptions = _entries_from_toml(data.get('exceptions', {}), 'exceptions', errors)
        version = data.get('license_list_version', '')
        if not isinstance(version, str):
            errors.append(f'license_list_version: expected string, got {type(version).__name__}')
            version = ''
        if errors:
            raise LicenseListError(errors)
        return cls(licenses, exceptions, version=version, source=str(path))

    @classmethod
    def from_json(
        cls,
        licenses_doc: dict[str, Any],
        exceptions_doc: dict[str, Any],
        *,
        source: str = '',
    ) -> ListedLicenses:
        """Build the list from SPDX ``licenses.json`` / ``exceptions.json`` documents.

        Raises:
            LicenseListError: If either document is not shaped as expected.
        """
        errors: list[str] = []
        licenses = _entries_from_json(licenses_doc, 'licenses', 'licenseId', errors)
        exceptions = _entries_from_json(exceptions_doc, 'exceptions', 'licenseExceptionId', errors)
        if errors:
            raise LicenseListError(errors)
        version = str(licenses_doc.get('licenseListVersion', ''))
        return cls(licenses, exceptions, version=version, source=source)

    @classmethod
    def load(
        cls,
        config: LicexprConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> ListedLicenses:
        """Load the list according to *config*.

        With ``only_use_local_licenses`` unset, the published list is
        fetched first; any HTTP or format error falls back to the bundled
        list with a warning.
        """
        config = config or LicexprConfig()
        if not config.only_use_local_licenses:
            try:
                licenses_doc, exceptions_doc = fetch_license_list(
                    config.license_list_url,
                    timeout=config.timeout,
                    transport=transport,
                )
                listed = cls.from_json(licenses_doc, exceptions_doc, source=config.license_list_url)
                log.info('license_list_fetched', url=config.license_list_url, version=listed.version)
                return listed
            except (httpx.HTTPError, ValueError, LicenseListError) as exc:
                log.warning(
                    'license_list_fetch_failed',
                    url=config.license_list_url,
                    error=str(exc),
                    fallback=str(BUNDLED_LICENSE_LIST),
                )
        return cls.from_toml()

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def store(self) -> InMemoryModelStore:
        """The store holding one object per listed license/exception."""
        return self._store

    def is_listed_license_id(self, license_id: str) -> bool:
        """Return ``True`` if *license_id* is listed (case-insensitive)."""
        return license_id.lower() in self._license_ids

    def is_listed_exception_id(self, exception_id: str) -> bool:
        """Return ``True`` if *exception_id* is a listed exception (case-insensitive)."""
        return exception_id.lower() in self._exception_ids

    def listed_license_id_case_sensitive(self, license_id: str) -> str | None:
        """Return the canonical spelling of *license_id*, or ``None``."""
        return self._license_ids.get(license_id.lower())

    def listed_exception_id_case_sensitive(self, exception_id: str) -> str | None:
        """Return the canonical spelling of *exception_id*, or ``None``."""
        return self._exception_ids.get(exception_id.lower())

    def get_listed_license(self, license_id: str) -> StoredObject | None:
        """Return the registry object for a listed license, or ``None``."""
        canonical = self.listed_license_id_case_sensitive(license_id)
        return None if canonical is None else self._store.get(listed_object_uri(canonical))

    def get_listed_exception(self, exception_id: str) -> StoredObject | None:
        """Return the registry object for a listed exception, or ``None``."""
        canonical = self.listed_exception_id_case_sensitive(exception_id)
        return None if canonical is None else self._store.get(listed_object_uri(canonical))

    def license_ids(self) -> list[str]:
        """Return all listed license IDs, sorted."""
        return sorted(self._license_ids.values())

    def exception_ids(self) -> list[str]:
        """Return all listed exception IDs, sorted."""
        return sorted(self._exception_ids.values())


def _entries_from_toml(table: object, section: str, errors: list[str]) -> list[ListedEntry]:
    if not isinstance(table, dict):
        errors.append(f'[{section}]: expected a table, got {type(table).__name__}')
        return []
    entries: list[ListedEntry] = []
    for listed_id, info in table.items():
        if not isinstance(info, dict):
            errors.append(f'[{section}.{listed_id}]: expected a table, got {type(info).__name__}')
            continue
        name = info.get('name')
        if not isinstance(name, str) or not name:
            errors.append(f'[{section}.{listed_id}]: missing required string field "name"')
            continue
        osi = info.get('osi_approved', False)
        deprecated = info.get('deprecated', False)
        if not isinstance(osi, bool) or not isinstance(deprecated, bool):
            errors.append(f'[{section}.{listed_id}]: osi_approved and deprecated must be booleans')
            continue
        entries.append(ListedEntry(listed_id=listed_id, name=name, osi_approved=osi, deprecated=deprecated))
    return entries


def _entries_from_json(doc: dict[str, Any], section: str, id_key: str, errors: list[str]) -> list[ListedEntry]:
    items = doc.get(section) if isinstance(doc, dict) else None
    if not isinstance(items, list):
        errors.append(f'"{section}" must be a list')
        return []
    entries: list[ListedEntry] = []
    for i, item in enumerate(items):
        if not isinstance(item, dict) or not isinstance(item.get(id_key), str):
            errors.append(f'{section}[{i}]: missing "{id_key}"')
            continue
        entries.append(
            ListedEntry(
                listed_id=item[id_key],
                name=str(item.get('name', item[id_key])),
                osi_approved=bool(item.get('isOsiApproved', False)),
                deprecated=bool(item.get('isDeprecatedLicenseId', False)),
            )
        )
    return entries


def fetch_license_list(
    base_url: str,
    *,
    timeout: float,
    transport: httpx.BaseTransport | None = None,
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Download ``licenses.json`` and ``exceptions.json`` from *base_url*.

    Args:
        base_url: Base URL of the published license list.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (tests pass a
            :class:`httpx.MockTransport`).

    Returns:
        The two decoded JSON documents.

    Raises:
        httpx.HTTPError: On connection errors or non-2xx responses.
        ValueError: If a response body is not JSON.
    """
    base = base_url.rstrip('/')
    with httpx.Client(timeout=timeout, transport=transport, follow_redirects=True) as client:
        licenses_resp = client.get(f'{base}/licenses.json')
        licenses_resp.raise_for_status()
        exceptions_resp = client.get(f'{base}/exceptions.json')
        exceptions_resp.raise_for_status()
        return licenses_resp.json(), exceptions_resp.json()


# ── Process-wide registry ────────────────────────────────────────────

_lock = _ReadWriteLock()
_listed: ListedLicenses | None = None


def get_listed_licenses(config: LicexprConfig | None = None) -> ListedLicenses:
    """Return the process-wide registry, loading it on first use.

    *config* only matters for the call that performs the initial load.
    When it is ``None``, settings come from :func:`~licexpr.config.load_config`
    (``licexpr.toml`` plus ``LICEXPR_*`` environment overrides).
    """
    global _listed  # noqa: PLW0603
    with _lock.read():
        current = _listed
    if current is not None:
        return current
    with _lock.write():
        if _listed is None:
            _listed = ListedLicenses.load(config if config is not None else load_config())
            log.debug('license_list_initialized', source=_listed.source, version=_listed.version)
        return _listed


def reset_listed_licenses(
    config: LicexprConfig | None = None,
    *,
    listed: ListedLicenses | None = None,
) -> ListedLicenses:
    """Rebuild (or replace with *listed*) the process-wide registry.

    Without *listed* or *config*, settings come from
    :func:`~licexpr.config.load_config`.
    """
    global _listed  # noqa: PLW0603
    if listed is None:
        listed = ListedLicenses.load(config if config is not None else load_config())
    with _lock.write():
        _listed = listed
        return _listed
