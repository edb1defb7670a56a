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
"""Tests for PropertyAccessor."""

import pytest

from impex.kernel.exceptions import PropertyAccessException, SchemaException
from impex.mapping.accessor import PropertyAccessor


class Account:
    def __init__(self) -> None:
        self.number = "A-1"
        self._owner = "alice"
        self._active = True
        self._balance = 10
        self.assigned: list[str] = []

    def get_owner(self) -> str:
        return self._owner.upper()

    def set_owner(self, value: str) -> None:
        self._owner = value.strip()

    def is_active(self) -> bool:
        return self._active

    def has_overdraft(self) -> bool:
        return False

    @property
    def balance(self) -> int:
        return self._balance

    @balance.setter
    def balance(self, value: int) -> None:
        self._balance = value * 100


@pytest.fixture
def accessor() -> PropertyAccessor:
    return PropertyAccessor()


class TestGetValue:
    def test_plain_attribute(self, accessor: PropertyAccessor):
        assert accessor.get_value(Account(), "number") == "A-1"

    def test_getter(self, accessor: PropertyAccessor):
        assert accessor.get_value(Account(), "owner") == "ALICE"

    def test_boolean_getters(self, accessor: PropertyAccessor):
        assert accessor.get_value(Account(), "active") is True
        assert accessor.get_value(Account(), "overdraft") is False

    def test_property(self, accessor: PropertyAccessor):
        assert accessor.get_value(Account(), "balance") == 10

    def test_missing_property(self, accessor: PropertyAccessor):
        with pytest.raises(PropertyAccessException, match=r"Account\.missing") as exc_info:
            accessor.get_value(Account(), "missing")

        assert isinstance(exc_info.value, SchemaException)
        assert exc_info.value.context["property"] == "missing"


class TestSetValue:
    def test_plain_attribute(self, accessor: PropertyAccessor):
        account = Account()

        accessor.set_value(account, "number", "B-2")

        assert account.number == "B-2"

    def test_setter(self, accessor: PropertyAccessor):
        account = Account()

        accessor.set_value(account, "owner", "  bob ")

        assert account.get_owner() == "BOB"

    def test_property_setter(self, accessor: PropertyAccessor):
        account = Account()

        accessor.set_value(account, "balance", 3)

        assert account.balance == 300

    def test_new_attribute(self, accessor: PropertyAccessor):
        account = Account()

        accessor.set_value(account, "note", "created")

        assert account.note == "created"  # type: ignore[attr-defined]
