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

r"""License-algebra tree produced by the expression parser.

Node types::

    ┌──────────────────┬───────────────────────────────────────────────┐
    │ Node             │ Meaning                                       │
    ├──────────────────┼───────────────────────────────────────────────┤
    │ SimpleLicense    │ Leaf: one listed, custom or external license, │
    │                  │ or the NOASSERTION / NONE sentinel.           │
    ├──────────────────┼───────────────────────────────────────────────┤
    │ OrLater          │ ``ID+``: this version or any later version.   │
    │                  │ Wraps a non-sentinel SimpleLicense only.      │
    ├──────────────────┼───────────────────────────────────────────────┤
    │ WithException    │ ``LICENSE WITH ADDITION``. The subject is an  │
    │                  │ *extendable* license: SimpleLicense or        │
    │                  │ OrLater, never a set.                         │
    ├──────────────────┼───────────────────────────────────────────────┤
    │ ConjunctiveSet   │ ``A AND B AND ...``: comply with all members. │
    ├──────────────────┼───────────────────────────────────────────────┤
    │ DisjunctiveSet   │ ``A OR B OR ...``: choose any member.         │
    └──────────────────┴───────────────────────────────────────────────┘

Leaves hold :class:`LicenseRef` / :class:`AdditionRef` handles (object URI
plus the store that owns the object) instead of license data, so the
name and text of a license are read from the store on demand.

Sets keep their members in insertion order for rendering, but compare
equal regardless of order and after flattening nested sets of the same
type, so ``MIT AND (Apache-2.0 AND BSD-3-Clause)`` equals
``BSD-3-Clause AND MIT AND Apache-2.0``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import ClassVar

from licexpr._types import (
    NOASSERTION_LICENSE_URI,
    NOASSERTION_VALUE,
    NONE_LICENSE_URI,
    NONE_VALUE,
    PROP_ADDITION_TEXT,
    PROP_LICENSE_TEXT,
    PROP_NAME,
    UNINITIALIZED_LICENSE_TEXT,
    AdditionKind,
    LicenseKind,
)
from licexpr.errors import ErrorKind, LicenseExpressionError
from licexpr.store import ModelStore, StoredObject

__all__ = [
    'AdditionRef',
    'ConjunctiveSet',
    'DisjunctiveSet',
    'InvalidLicenseExpression',
    'LicenseExpression',
    'LicenseRef',
    'NOASSERTION_LICENSE',
    'NONE_LICENSE',
    'OrLater',
    'SimpleLicense',
    'WithException',
    'addition_ids',
    'is_extendable',
    'is_or_later_subject',
    'license_ids',
    'no_assertion',
    'none_license',
]


# ---------------------------------------------------------------------------
# Leaf handles
# ---------------------------------------------------------------------------


class _StoredHandle:
    """Property access through the owning store."""

    object_uri: str
    store: ModelStore | None
    _text_property: ClassVar[str] = PROP_LICENSE_TEXT

    def stored_object(self) -> StoredObject | None:
        """Return the store object this handle points at, if any."""
        if self.store is None:
            return None
        return self.store.get(self.object_uri)

    def _prop(self, name: str) -> object:
        obj = self.stored_object()
        return None if obj is None else obj.properties.get(name)

    @property
    def name(self) -> str | None:
        """Full name as currently held by the store."""
        value = self._prop(PROP_NAME)
        return value if isinstance(value, str) else None

    @property
    def text(self) -> str | None:
        """License/addition text as currently held by the store."""
        value = self._prop(self._text_property)
        return value if isinstance(value, str) else None

    @property
    def is_placeholder(self) -> bool:
        """``True`` while the text is still the parser's placeholder marker."""
        return self.text == UNINITIALIZED_LICENSE_TEXT


@dataclass(frozen=True)
class LicenseRef(_StoredHandle):
    """Handle to a license object.

    Attributes:
        kind: What the handle points at.
        object_uri: URI of the object in its store (or the well-known
            sentinel URI).
        license_id: The identifier as written in expressions, e.g.
            ``"MIT"``, ``"LicenseRef-1"`` or ``"doc:LicenseRef-1"``.
        store: Store owning the object; ignored by equality.
    """

    kind: LicenseKind
    object_uri: str
    license_id: str
    store: ModelStore | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        """Return the identifier as written in expressions."""
        return self.license_id

    @property
    def is_sentinel(self) -> bool:
        """``True`` for ``NOASSERTION`` and ``NONE``."""
        return self.kind.is_sentinel


@dataclass(frozen=True)
class AdditionRef(_StoredHandle):
    """Handle to a license exception / addition object.

    Attributes:
        kind: What the handle points at.
        object_uri: URI of the object in its store.
        addition_id: The identifier as written in expressions.
        store: Store owning the object; ignored by equality.
    """

    _text_property: ClassVar[str] = PROP_ADDITION_TEXT

    kind: AdditionKind
    object_uri: str
    addition_id: str
    store: ModelStore | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        """Return the identifier as written in expressions."""
        return self.addition_id


#: The ``NOASSERTION`` sentinel license. Equal to every other instance.
NOASSERTION_LICENSE = LicenseRef(LicenseKind.NO_ASSERTION, NOASSERTION_LICENSE_URI, NOASSERTION_VALUE)

#: The ``NONE`` sentinel license. Equal to every other instance.
NONE_LICENSE = LicenseRef(LicenseKind.NONE, NONE_LICENSE_URI, NONE_VALUE)


# ---------------------------------------------------------------------------
# Expression nodes
# ---------------------------------------------------------------------------


class LicenseExpression:
    """Base class of every node in a parsed license expression."""

    __slots__ = ()

    def leaves(self) -> Iterator[LicenseRef | AdditionRef]:
        """Yield every leaf handle, left to right."""
        raise NotImplementedError  # pragma: no cover


@dataclass(frozen=True)
class SimpleLicense(LicenseExpression):
    """A single license leaf.

    Attributes:
        license: Handle of the license.
    """

    license: LicenseRef

    def __str__(self) -> str:
        """Return the license identifier."""
        return str(self.license)

    def leaves(self) -> Iterator[LicenseRef | AdditionRef]:
        """Yield the single license handle."""
        yield self.license


def is_or_later_subject(node: object) -> bool:
    """Return ``True`` if *node* may be wrapped in :class:`OrLater`."""
    return isinstance(node, SimpleLicense) and not node.license.is_sentinel


def is_extendable(node: object) -> bool:
    """Return ``True`` if *node* may be the subject of ``WITH``."""
    return is_or_later_subject(node) or isinstance(node, OrLater)


@dataclass(frozen=True)
class OrLater(LicenseExpression):
    """``subject+``: this version of the license or any later one.

    Attributes:
        subject: The base license.
    """

    subject: SimpleLicense

    def __post_init__(self) -> None:
        if not is_or_later_subject(self.subject):
            raise LicenseExpressionError(
                ErrorKind.INVALID_OR_LATER_SUBJECT,
                "The '+' or-later operator requires a single license",
                sub_expression=str(self.subject),
            )

    def __str__(self) -> str:
        """Return ``ID+``."""
        return f'{self.subject}+'

    def leaves(self) -> Iterator[LicenseRef | AdditionRef]:
        """Yield the subject's license handle."""
        yield from self.subject.leaves()


@dataclass(frozen=True)
class WithException(LicenseExpression):
    """``subject WITH addition``.

    Attributes:
        subject: The extendable license (:class:`SimpleLicense` or
            :class:`OrLater`).
        addition: The exception or custom addition.
    """

    subject: SimpleLicense | OrLater
    addition: AdditionRef

    def __post_init__(self) -> None:
        if not is_extendable(self.subject):
            raise LicenseExpressionError(
                ErrorKind.INVALID_WITH_SUBJECT,
                'License with exception is not a single license or or-later license',
                sub_expression=str(self.subject),
            )

    def __str__(self) -> str:
        """Return ``SUBJECT WITH ADDITION``."""
        return f'{self.subject} WITH {self.addition}'

    def leaves(self) -> Iterator[LicenseRef | AdditionRef]:
        """Yield the subject's license handle, then the addition."""
        yield from self.subject.leaves()
        yield self.addition


@dataclass(frozen=True, eq=False)
class _LicenseSet(LicenseExpression):
    """Common behaviour of AND / OR sets.

    Members of the same set type are spliced in on construction, so a
    set never directly contains a set of its own type.
    """

    operator: ClassVar[str] = ''

    members: tuple[LicenseExpression, ...]

    def __post_init__(self) -> None:
        flat: list[LicenseExpression] = []
        for member in self.members:
            if not isinstance(member, LicenseExpression):
                raise LicenseExpressionError(
                    ErrorKind.INVARIANT_VIOLATED,
                    f'{type(self).__name__} member is not a license expression: {member!r}',
                )
            if type(member) is type(self):
                flat.extend(member.members)  # type: ignore[attr-defined]
            else:
                flat.append(member)
        if len(flat) < 2:
            raise LicenseExpressionError(
                ErrorKind.INVARIANT_VIOLATED,
                f'{type(self).__name__} needs at least two members, got {len(flat)}',
            )
        object.__setattr__(self, 'members', tuple(flat))

    def __str__(self) -> str:
        """Join members with the operator; nested sets are parenthesized."""
        parts = (f'({m})' if isinstance(m, _LicenseSet) else str(m) for m in self.members)
        return f' {self.operator} '.join(parts)

    def _member_set(self) -> frozenset[LicenseExpression]:
        return frozenset(self.members)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return self._member_set() == other._member_set()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((self.operator, self._member_set()))

    def leaves(self) -> Iterator[LicenseRef | AdditionRef]:
        """Yield leaves of every member, in member order."""
        for member in self.members:
            yield from member.leaves()

    def with_member(self, member: LicenseExpression) -> _LicenseSet:
        """Return a new set of the same type with *member* appended."""
        return type(self)((*self.members, member))


class ConjunctiveSet(_LicenseSet):
    """``A AND B AND ...``: all member licenses apply."""

    operator: ClassVar[str] = 'AND'


class DisjunctiveSet(_LicenseSet):
    """``A OR B OR ...``: any one member license may be chosen."""

    operator: ClassVar[str] = 'OR'


@dataclass(frozen=True)
class InvalidLicenseExpression:
    """Stand-in returned by the lenient factory when parsing fails.

    Not a :class:`LicenseExpression`: it can never appear inside a tree.

    Attributes:
        expression: The text that failed to parse.
        message: Why it failed.
    """

    expression: str
    message: str

    def __str__(self) -> str:
        """Return the original expression text."""
        return self.expression


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def no_assertion() -> SimpleLicense:
    """Return a ``NOASSERTION`` leaf."""
    return SimpleLicense(NOASSERTION_LICENSE)


def none_license() -> SimpleLicense:
    """Return a ``NONE`` leaf."""
    return SimpleLicense(NONE_LICENSE)


def _ids(leaves: Iterable[LicenseRef | AdditionRef], want: type) -> set[str]:
    return {str(leaf) for leaf in leaves if isinstance(leaf, want)}


def license_ids(node: LicenseExpression) -> set[str]:
    """Collect all license identifier strings from a tree.

    Or-later and exceptions are dropped: ``GPL-2.0-only+ WITH
    Classpath-exception-2.0`` yields ``{'GPL-2.0-only'}``.

    Examples::

        >>> sorted(license_ids(parse_license_expression('MIT OR (Apache-2.0 AND 0BSD)')))
        ['0BSD', 'Apache-2.0', 'MIT']
    """
    return _ids(node.leaves(), LicenseRef)


def addition_ids(node: LicenseExpression) -> set[str]:
    """Collect all exception / addition identifier strings from a tree."""
    return _ids(node.leaves(), AdditionRef)
