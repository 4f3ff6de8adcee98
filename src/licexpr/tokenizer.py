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

"""Tokenizer for SPDX license expressions.

SPDX writes ``(``, ``)`` and ``+`` without surrounding whitespace
(``(MIT OR GPL-2.0-only+)``), so splitting on whitespace alone is not
enough. Each whitespace-separated chunk is peeled recursively: a leading
``(`` and a trailing ``)`` or ``+`` each become their own token::

    >>> tokenize('(MIT OR GPL-2.0-only+)')
    ['(', 'MIT', 'OR', 'GPL-2.0-only', '+', ')']
"""

from __future__ import annotations

__all__ = [
    'LEFT_PAREN',
    'OR_LATER',
    'RIGHT_PAREN',
    'tokenize',
]

LEFT_PAREN = '('
RIGHT_PAREN = ')'
OR_LATER = '+'


def _peel(chunk: str, tokens: list[str]) -> None:
    """Append the tokens of one whitespace-free *chunk* to *tokens*."""
    if not chunk:
        return
    if chunk.startswith(LEFT_PAREN):
        tokens.append(LEFT_PAREN)
        _peel(chunk[1:], tokens)
    elif chunk.endswith(RIGHT_PAREN):
        _peel(chunk[:-1], tokens)
        tokens.append(RIGHT_PAREN)
    elif chunk.endswith(OR_LATER):
        _peel(chunk[:-1], tokens)
        tokens.append(OR_LATER)
    else:
        tokens.append(chunk)


def tokenize(expression: str) -> list[str]:
    """Split *expression* into tokens.

    Args:
        expression: A license expression string.

    Returns:
        The tokens in order. Empty or whitespace-only input yields ``[]``.
    """
    tokens: list[str] = []
    for chunk in expression.split():
        _peel(chunk, tokens)
    return tokens
