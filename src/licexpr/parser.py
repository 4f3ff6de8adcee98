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

r"""SPDX license expression parser.

Parses expression strings such as ``MIT OR Apache-2.0`` or
``GPL-2.0-only+ WITH Classpath-exception-2.0`` into the license-algebra
tree defined in :mod:`licexpr.model`.

Grammar (SPDX spec, Annex D)::

    compound   ::= simple
                 | simple 'WITH' addition
                 | compound 'AND' compound
                 | compound 'OR' compound
                 | '(' compound ')'
    simple     ::= license-id | license-id '+' | LicenseRef-... | prefix:id

Operator precedence, tightest first::

    ┌──────────┬─────────────────────────────────────────────┐
    │ Operator │ Binds                                       │
    ├──────────┼─────────────────────────────────────────────┤
    │ +        │ the single license immediately before it    │
    │ WITH     │ an extendable license and one addition      │
    │ AND      │ two compounds                               │
    │ OR       │ two compounds                               │
    └──────────┴─────────────────────────────────────────────┘

Keywords are recognised in upper or lower case (``AND`` / ``and``).

The evaluator is a shunting-yard reduction over an operand stack and an
operator stack. Parenthesized ranges are evaluated recursively as
independent expressions. Chained applications of one operator are
flattened, so ``A AND B AND C`` is a single three-member set.

Usage::

    from licexpr.parser import parse_license_expression

    tree = parse_license_expression('(MIT OR Apache-2.0) AND BSD-3-Clause')
    str(tree)  # '(MIT OR Apache-2.0) AND BSD-3-Clause'
"""

from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence
from typing import Final

from licexpr._types import NOASSERTION_VALUE, NONE_VALUE
from licexpr.copy import ModelCopyManager
from licexpr.defaults import get_default_copy_manager, get_default_document_uri, get_default_store
from licexpr.errors import ErrorKind, LicenseExpressionError
from licexpr.logging import get_logger
from licexpr.model import (
    ConjunctiveSet,
    DisjunctiveSet,
    LicenseExpression,
    OrLater,
    SimpleLicense,
    WithException,
    is_extendable,
    is_or_later_subject,
    no_assertion,
    none_license,
)
from licexpr.registry import ListedLicenses, get_listed_licenses
from licexpr.resolver import LicenseResolver
from licexpr.store import ModelStore
from licexpr.tokenizer import LEFT_PAREN, OR_LATER, RIGHT_PAREN, tokenize

__all__ = [
    'OPERATOR_MAP',
    'ExpressionEvaluator',
    'parse_license_expression',
]

log = get_logger('licexpr.parser')


class _Operator(enum.IntEnum):
    """Operators in binding order: lower values bind tighter."""

    OR_LATER = 0
    WITH = 1
    AND = 2
    OR = 3


#: Keyword / punctuation token → operator.
OPERATOR_MAP: Final[Mapping[str, _Operator]] = {
    OR_LATER: _Operator.OR_LATER,
    'WITH': _Operator.WITH,
    'with': _Operator.WITH,
    'AND': _Operator.AND,
    'and': _Operator.AND,
    'OR': _Operator.OR,
    'or': _Operator.OR,
}

_SET_TYPES: Final = {
    _Operator.AND: ConjunctiveSet,
    _Operator.OR: DisjunctiveSet,
}


class _StackUnderflow(Exception):
    """An operator found no operand to pop."""


def _find_matching_paren(tokens: Sequence[str], start: int) -> int:
    """Return the index of the ``)`` closing the ``(`` at *start*.

    Raises:
        LicenseExpressionError: ``UNMATCHED_PARENTHESIS`` if there is none.
    """
    depth = 0
    for i in range(start, len(tokens)):
        if tokens[i] == LEFT_PAREN:
            depth += 1
        elif tokens[i] == RIGHT_PAREN:
            depth -= 1
            if depth == 0:
                return i
    raise LicenseExpressionError(
        ErrorKind.UNMATCHED_PARENTHESIS,
        'Missing end ")"',
        sub_expression=' '.join(tokens[start:]),
    )


def _follows_operand(tokens: Sequence[str], index: int) -> bool:
    """Return whether the token before *index* closes an operand."""
    if index == 0:
        return False
    previous = tokens[index - 1]
    return previous not in OPERATOR_MAP and previous != LEFT_PAREN


def _pop(operands: list[LicenseExpression]) -> LicenseExpression:
    if not operands:
        raise _StackUnderflow
    return operands.pop()


class ExpressionEvaluator:
    """Shunting-yard evaluator over a token list.

    Args:
        resolver: Turns identifier tokens into leaf handles.
    """

    def __init__(self, resolver: LicenseResolver) -> None:
        self._resolver = resolver

    def evaluate(self, tokens: Sequence[str]) -> LicenseExpression:
        """Evaluate *tokens* into a single tree.

        Raises:
            LicenseExpressionError: On any syntax or resolution failure.
        """
        operands: list[LicenseExpression] = []
        operators: list[_Operator] = []
        i = 0
        while i < len(tokens):
            token = tokens[i]
            i += 1
            if token == LEFT_PAREN:
                end = _find_matching_paren(tokens, i - 1)
                inner = tokens[i:end]
                if not inner:
                    raise LicenseExpressionError(
                        ErrorKind.MALFORMED_EXPRESSION,
                        'Empty parentheses',
                        sub_expression='()',
                    )
                operands.append(self.evaluate(inner))
                i = end + 1
            elif token == RIGHT_PAREN:
                raise LicenseExpressionError(
                    ErrorKind.UNMATCHED_PARENTHESIS,
                    'Unexpected ")" without a matching "("',
                    sub_expression=' '.join(tokens[:i]),
                )
            elif token not in OPERATOR_MAP:
                operands.append(SimpleLicense(self._resolver.resolve_license_token(token)))
            elif OPERATOR_MAP[token] is _Operator.WITH:
                if operators and operators[-1] is _Operator.OR_LATER:
                    self._reduce(operators.pop(), operands)
                i = self._apply_with(tokens, i, operands)
            else:
                op = OPERATOR_MAP[token]
                if op is _Operator.OR_LATER and not _follows_operand(tokens, i - 1):
                    raise LicenseExpressionError(
                        ErrorKind.MISSING_OPERAND,
                        "Missing license before '+'",
                        sub_expression=' '.join(tokens[max(i - 2, 0) : i + 1]),
                    )
                while operators and operators[-1] <= op:
                    self._reduce(operators.pop(), operands)
                operators.append(op)
        while operators:
            self._reduce(operators.pop(), operands)
        if len(operands) != 1:
            raise LicenseExpressionError(
                ErrorKind.MALFORMED_EXPRESSION,
                f'Expected one license expression, found {len(operands)}'
                + (' (missing operator?)' if operands else ''),
                sub_expression=' '.join(tokens),
            )
        return operands[0]

    def _apply_with(self, tokens: Sequence[str], i: int, operands: list[LicenseExpression]) -> int:
        """Attach the addition at ``tokens[i]`` to the top operand.

        Returns:
            The index of the token after the addition.
        """
        if i >= len(tokens) or tokens[i] in OPERATOR_MAP or tokens[i] in (LEFT_PAREN, RIGHT_PAREN):
            raise LicenseExpressionError(
                ErrorKind.MISSING_EXCEPTION_CLAUSE,
                'Missing exception clause after WITH',
                sub_expression=' '.join(tokens[max(i - 2, 0) : i + 1]),
            )
        if not operands:
            raise LicenseExpressionError(
                ErrorKind.MISSING_OPERAND,
                'Missing license before WITH',
                sub_expression=f'WITH {tokens[i]}',
            )
        subject = operands.pop()
        if not is_extendable(subject):
            raise LicenseExpressionError(
                ErrorKind.INVALID_WITH_SUBJECT,
                'License with exception is not a single license or or-later license',
                sub_expression=f'{subject} WITH {tokens[i]}',
            )
        addition = self._resolver.resolve_exception_token(tokens[i])
        operands.append(WithException(subject, addition))  # type: ignore[arg-type]
        return i + 1

    @staticmethod
    def _reduce(op: _Operator, operands: list[LicenseExpression]) -> None:
        """Pop the operands of *op*, combine them and push the result."""
        if op is _Operator.OR_LATER:
            subject = _pop(operands)
            if not is_or_later_subject(subject):
                raise LicenseExpressionError(
                    ErrorKind.INVALID_OR_LATER_SUBJECT,
                    "The '+' or-later operator requires a single license",
                    sub_expression=f'{subject}+',
                )
            operands.append(OrLater(subject))  # type: ignore[arg-type]
            return
        set_type = _SET_TYPES[op]
        if len(operands) < 2:
            raise LicenseExpressionError(
                ErrorKind.MISSING_OPERAND,
                f'Missing operand for {op.name}',
                sub_expression=' '.join(str(o) for o in operands),
            )
        right = operands.pop()
        left = operands.pop()
        if type(left) is set_type:
            operands.append(left.with_member(right))  # type: ignore[attr-defined]
        else:
            operands.append(set_type((left, right)))


def parse_license_expression(
    expression: str,
    store: ModelStore | None = None,
    *,
    custom_license_uri_prefix: str | None = None,
    copy_manager: ModelCopyManager | None = None,
    namespace_map: Mapping[str, str] | None = None,
    registry: ListedLicenses | None = None,
) -> LicenseExpression:
    """Parse an SPDX license expression string.

    Args:
        expression: The expression text.
        store: Store that receives listed-license copies and custom
            license placeholders. Defaults to the process default store,
            together with the default copy manager.
        custom_license_uri_prefix: Prefix of custom license object URIs.
            Defaults to the default document URI followed by ``#``.
        copy_manager: Copies listed objects from the registry into
            *store*.
        namespace_map: External-reference prefix → namespace URI.
        registry: Listed license registry. Defaults to the process-wide
            registry.

    Returns:
        The root node of the parsed tree.

    Raises:
        LicenseExpressionError: If the expression is empty, malformed or
            references something that cannot be resolved. The error names
            the full expression.
    """
    if expression is None or not expression.strip():
        raise LicenseExpressionError(
            ErrorKind.EMPTY_EXPRESSION,
            'Empty license expression',
            expression=expression or '',
        )
    trimmed = expression.strip()
    # Whole-expression sentinels never reach the resolver.
    if trimmed == NOASSERTION_VALUE:
        return no_assertion()
    if trimmed == NONE_VALUE:
        return none_license()

    if store is None:
        store = get_default_store()
        if copy_manager is None:
            copy_manager = get_default_copy_manager()
    if custom_license_uri_prefix is None:
        custom_license_uri_prefix = f'{get_default_document_uri()}#'
    resolver = LicenseResolver(
        store,
        registry if registry is not None else get_listed_licenses(),
        copy_manager=copy_manager,
        custom_license_uri_prefix=custom_license_uri_prefix,
        namespace_map=namespace_map,
    )
    tokens = tokenize(trimmed)
    try:
        tree = ExpressionEvaluator(resolver).evaluate(tokens)
    except LicenseExpressionError as exc:
        log.debug('expression_rejected', expression=expression, kind=exc.kind.value, detail=exc.detail)
        raise exc.with_expression(expression) from exc.__cause__
    except _StackUnderflow as exc:
        log.debug('expression_rejected', expression=expression, kind=ErrorKind.MALFORMED_EXPRESSION.value)
        raise LicenseExpressionError(
            ErrorKind.MALFORMED_EXPRESSION,
            'Syntax error in license expression',
            expression=expression,
        ) from exc
    log.debug('expression_parsed', expression=expression, tokens=len(tokens))
    return tree
