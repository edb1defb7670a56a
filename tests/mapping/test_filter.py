# Copyright 2026 Firefly Software Solutions Inc.
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
"""Tests for PropertyFilter."""

import pytest

from impex.mapping.filter import EMPTY_FILTER, PropertyFilter


class TestPropertyFilterOf:
    def test_none_is_empty(self):
        assert PropertyFilter.of(None) is EMPTY_FILTER
        assert not EMPTY_FILTER

    def test_single_name(self):
        selection = PropertyFilter.of("id")

        assert list(selection) == ["id"]
        assert selection.single_name() == "id"

    def test_names_and_nested_mappings(self):
        selection = PropertyFilter.of(["id", "name", {"lines": ["sku", "quantity"]}])

        assert list(selection) == ["id", "name", "lines"]
        assert selection.nested("lines") == PropertyFilter.of(["sku", "quantity"])
        assert selection.nested("id") is EMPTY_FILTER

    def test_mapping_spec(self):
        selection = PropertyFilter.of({"customer": {"address": None}, "total": None})

        assert "total" in selection
        assert selection.nested("customer") == PropertyFilter.single("address")

    def test_nested_filter_wins_over_bare_name(self):
        selection = PropertyFilter.of(["lines", {"lines": ["sku"]}, "lines"])

        assert len(selection) == 1
        assert selection.nested("lines") == PropertyFilter.single("sku")

    def test_existing_filter_is_returned(self):
        selection = PropertyFilter.single("id")

        assert PropertyFilter.of(selection) is selection

    def test_invalid_entry(self):
        with pytest.raises(TypeError, match="Invalid property filter entry"):
            PropertyFilter.of(["id", 3])

    def test_single_name_of_larger_filter(self):
        assert PropertyFilter.of(["a", "b"]).single_name() is None
        assert EMPTY_FILTER.single_name() is None


class TestPropertyFilterSkips:
    @pytest.mark.parametrize("exclude", [False, True])
    def test_empty_filter_selects_everything(self, exclude: bool):
        assert not EMPTY_FILTER.skips("anything", exclude)

    def test_include_mode(self):
        selection = PropertyFilter.of(["id", {"lines": ["sku"]}])

        assert not selection.skips("id", exclude=False)
        assert not selection.skips("lines", exclude=False)
        assert selection.skips("name", exclude=False)

    def test_exclude_mode(self):
        selection = PropertyFilter.of(["id", {"lines": ["sku"]}])

        assert selection.skips("id", exclude=True)
        assert not selection.skips("lines", exclude=True)
        assert not selection.skips("name", exclude=True)


class TestPropertyFilterValue:
    def test_equality_and_hash(self):
        first = PropertyFilter.of(["a", {"b": ["c"]}])
        second = PropertyFilter.of({"a": None, "b": "c"})

        assert first == second
        assert hash(first) == hash(second)
        assert first != PropertyFilter.of(["a", "b"])

    def test_repr(self):
        assert repr(PropertyFilter.single("id")) == "PropertyFilter({'id': None})"
