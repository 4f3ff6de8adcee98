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

"""Configuration for licexpr.

Settings come from, in increasing priority:

1. Built-in defaults (:class:`LicexprConfig`).
2. A ``licexpr.toml`` file, or the ``[tool.licexpr]`` table of a
   ``pyproject.toml``.
3. Environment variables (``LICEXPR_ONLY_USE_LOCAL_LICENSES``,
   ``LICEXPR_LICENSE_LIST_URL``).

Example ``licexpr.toml``::

    document_uri = "https://example.com/sbom/1"
    only_use_local_licenses = false
    timeout = 5.0

    [namespaces]
    upstream = "https://example.com/upstream-sbom#"
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from licexpr._types import DEFAULT_DOCUMENT_URI
from licexpr.errors import ConfigError
from licexpr.logging import get_logger

__all__ = [
    'CONFIG_FILENAME',
    'DEFAULT_LICENSE_LIST_URL',
    'DEFAULT_TIMEOUT',
    'ENV_LICENSE_LIST_URL',
    'ENV_ONLY_USE_LOCAL_LICENSES',
    'LicexprConfig',
    'VALID_KEYS',
    'load_config',
]

log = get_logger('licexpr.config')

CONFIG_FILENAME: Final[str] = 'licexpr.toml'

#: Base URL of the published SPDX license list JSON files.
DEFAULT_LICENSE_LIST_URL: Final[str] = 'https://spdx.org/licenses'

#: Default HTTP timeout in seconds for the remote license list.
DEFAULT_TIMEOUT: Final[float] = 10.0

ENV_ONLY_USE_LOCAL_LICENSES: Final[str] = 'LICEXPR_ONLY_USE_LOCAL_LICENSES'
ENV_LICENSE_LIST_URL: Final[str] = 'LICEXPR_LICENSE_LIST_URL'

_TRUE_VALUES = frozenset({'1', 'true', 'yes', 'on'})
_FALSE_VALUES = frozenset({'0', 'false', 'no', 'off'})


@dataclass(frozen=True)
class LicexprConfig:
    """Resolved licexpr settings.

    Attributes:
        document_uri: URI of the document that owns parsed custom
            licenses.
        custom_license_uri_prefix: Prefix for object URIs of custom
            licenses and additions. Empty means ``document_uri + '#'``.
        only_use_local_licenses: Use the bundled license list only and
            never contact the network.
        license_list_url: Base URL of ``licenses.json`` and
            ``exceptions.json``.
        timeout: HTTP timeout in seconds for the remote license list.
        namespaces: External-reference prefix → namespace URI.
    """

    document_uri: str = DEFAULT_DOCUMENT_URI
    custom_license_uri_prefix: str = ''
    only_use_local_licenses: bool = True
    license_list_url: str = DEFAULT_LICENSE_LIST_URL
    timeout: float = DEFAULT_TIMEOUT
    namespaces: dict[str, str] = field(default_factory=dict)

    @property
    def effective_custom_license_uri_prefix(self) -> str:
        """The custom license prefix, defaulting to ``document_uri#``."""
        return self.custom_license_uri_prefix or f'{self.document_uri}#'


VALID_KEYS: Final[frozenset[str]] = frozenset(LicexprConfig.__dataclass_fields__)


def _parse_bool(key: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ConfigError(f'{key} must be a boolean, got {value!r}')


def _parse_str(key: str, value: object) -> str:
    if not isinstance(value, str):
        raise ConfigError(f'{key} must be a string, got {type(value).__name__}')
    return value


def _parse_timeout(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f'timeout must be a number, got {type(value).__name__}')
    if value <= 0:
        raise ConfigError(f'timeout must be positive, got {value}')
    return float(value)


def _parse_namespaces(value: object) -> dict[str, str]:
    if not isinstance(value, dict):
        raise ConfigError(f'namespaces must be a table, got {type(value).__name__}')
    result: dict[str, str] = {}
    for prefix, namespace in value.items():
        if not prefix or ':' in prefix:
            raise ConfigError(f'namespaces: invalid prefix {prefix!r}')
        if not isinstance(namespace, str) or not namespace:
            raise ConfigError(f'namespaces.{prefix} must be a non-empty string')
        result[prefix] = namespace
    return result


def _parse_config(raw: dict[str, Any]) -> LicexprConfig:
    """Validate a raw TOML table and build a :class:`LicexprConfig`.

    Raises:
        ConfigError: On unknown keys or values of the wrong type.
    """
    unknown = sorted(set(raw) - VALID_KEYS)
    if unknown:
        raise ConfigError(f'Unknown key(s) in licexpr config: {", ".join(unknown)}')
    kwargs: dict[str, Any] = {}
    for key in ('document_uri', 'custom_license_uri_prefix', 'license_list_url'):
        if key in raw:
            kwargs[key] = _parse_str(key, raw[key])
    if 'only_use_local_licenses' in raw:
        kwargs['only_use_local_licenses'] = _parse_bool('only_use_local_licenses', raw['only_use_local_licenses'])
    if 'timeout' in raw:
        kwargs['timeout'] = _parse_timeout(raw['timeout'])
    if 'namespaces' in raw:
        kwargs['namespaces'] = _parse_namespaces(raw['namespaces'])
    return LicexprConfig(**kwargs)


def _read_table(path: Path) -> dict[str, Any]:
    """Read the licexpr table from *path*."""
    try:
        with path.open('rb') as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f'{path}: invalid TOML: {exc}') from exc
    if path.name == 'pyproject.toml':
        table = data.get('tool', {}).get('licexpr', {})
        if not isinstance(table, dict):
            raise ConfigError(f'{path}: [tool.licexpr] must be a table')
        return table
    return data


def _apply_env(raw: dict[str, Any], env: dict[str, str]) -> dict[str, Any]:
    merged = dict(raw)
    if ENV_ONLY_USE_LOCAL_LICENSES in env:
        merged['only_use_local_licenses'] = env[ENV_ONLY_USE_LOCAL_LICENSES]
    if ENV_LICENSE_LIST_URL in env:
        merged['license_list_url'] = env[ENV_LICENSE_LIST_URL]
    return merged


def load_config(path: Path | None = None, *, env: dict[str, str] | None = None) -> LicexprConfig:
    """Load licexpr settings.

    Args:
        path: A ``licexpr.toml`` or ``pyproject.toml``. When ``None``,
            ``./licexpr.toml`` is used if it exists, otherwise defaults.
        env: Environment mapping; defaults to :data:`os.environ`.

    Returns:
        The resolved :class:`LicexprConfig`.

    Raises:
        ConfigError: If the file is unreadable or holds invalid settings.
    """
    if path is None:
        candidate = Path.cwd() / CONFIG_FILENAME
        path = candidate if candidate.is_file() else None
    raw: dict[str, Any] = {}
    if path is not None:
        if not path.is_file():
            raise ConfigError(f'Config file not found: {path}')
        raw = _read_table(path)
        log.debug('config_loaded', path=str(path), keys=sorted(raw))
    return _parse_config(_apply_env(raw, dict(os.environ) if env is None else env))
