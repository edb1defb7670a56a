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
"""In-memory implementation of :class:`ObjectStorePort`.

Entities live in a plain ``dict`` keyed by identifier, then by concrete class.
Identifiers are assigned on flush from a single sequence starting at 1,
which mirrors an autoincrement key. **All state is lost with the instance.**
"""

from __future__ import annotations

import itertools
from typing import Any, TypeVar

from impex.mapping.identity import is_subtype

T = TypeVar("T")


class InMemoryObjectStore:
    """Dictionary-backed object store for tests and scripts."""

    def __init__(self, identity_field: str = "id") -> None:
        self._identity_field = identity_field
        self._records: dict[Any, dict[type, object]] = {}
        self._pending: list[object] = []
        self._sequence = itertools.count(1)

    # -- ObjectStorePort ----------------------------------------------------

    def find(self, entity_class: type[T], id: Any) -> T | None:
        """Find a flushed entity of *entity_class* or one of its subclasses."""
        if id is None or isinstance(id, bool):
            return None
        for cls, entity in self._records.get(id, {}).items():
            if is_subtype(cls, entity_class):
                return entity  # type: ignore[return-value]
        return None

    def persist(self, entity: object) -> None:
        if not any(pending is entity for pending in self._pending):
            self._pending.append(entity)

    def flush(self) -> None:
        """Assign identifiers to new entities and make them findable."""
        for entity in self._pending:
            identifier = getattr(entity, self._identity_field, None)
            if identifier is None:
                identifier = next(self._sequence)
                setattr(entity, self._identity_field, identifier)
            self._records.setdefault(identifier, {})[type(entity)] = entity
        self._pending.clear()

    # -- inspection ---------------------------------------------------------

    def add(self, entity: object) -> object:
        """Persist and flush *entity* in one step."""
        self.persist(entity)
        self.flush()
        return entity

    def all(self) -> list[object]:
        return [entity for by_class in self._records.values() for entity in by_class.values()]

    def __len__(self) -> int:
        return sum(len(by_class) for by_class in self._records.values())
