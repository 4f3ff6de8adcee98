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

"""Tests for licexpr.tokenizer."""

from __future__ import annotations

from licexpr.tokenizer import tokenize


class TestTokenize:
    """Tests for tokenize()."""

    def test_single_id(self) -> None:
        """A bare identifier is one token."""
        assert tokenize('MIT') == ['MIT']

    def test_whitespace_split(self) -> None:
        """Runs of whitespace of any kind separate tokens."""
        assert tokenize('  MIT \t OR\nApache-2.0  ') == ['MIT', 'OR', 'Apache-2.0']

    def test_empty(self) -> None:
        """Empty input yields no tokens."""
        assert tokenize('') == []

    def test_whitespace_only(self) -> None:
        """Whitespace-only input yields no tokens."""
        assert tokenize(' \t\n ') == []

    def test_attached_parens(self) -> None:
        """Parentheses glued to identifiers are peeled off."""
        assert tokenize('(MIT OR Apache-2.0)') == ['(', 'MIT', 'OR', 'Apache-2.0', ')']

    def test_or_later_suffix(self) -> None:
        """A trailing + becomes its own token."""
        assert tokenize('GPL-2.0-only+') == ['GPL-2.0-only', '+']

    def test_or_later_inside_parens(self) -> None:
        """Suffix and closing paren are both peeled, in order."""
        assert tokenize('(MIT OR GPL-2.0-only+)') == ['(', 'MIT', 'OR', 'GPL-2.0-only', '+', ')']

    def test_nested_parens(self) -> None:
        """Several leading and trailing parens are peeled one by one."""
        assert tokenize('((MIT))') == ['(', '(', 'MIT', ')', ')']

    def test_detached_punctuation(self) -> None:
        """Free-standing punctuation stays as is."""
        assert tokenize('( MIT ) +') == ['(', 'MIT', ')', '+']

    def test_external_reference_kept_whole(self) -> None:
        """A prefix:id token is not split by the tokenizer."""
        assert tokenize('DocumentRef-x:LicenseRef-1') == ['DocumentRef-x:LicenseRef-1']

    def test_returns_fresh_list(self) -> None:
        """Each call returns an independent list."""
        first = tokenize('MIT')
        first.append('junk')
        assert tokenize('MIT') == ['MIT']
