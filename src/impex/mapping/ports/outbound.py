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
"""Outbound ports: the collaborators the mapper consumes."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from impex.mapping.metadata import DeclaredProperty

T = TypeVar("T")


@runtime_checkable
class ObjectStorePort(Protocol):
    """Persistence contract used for reference resolution and identity mapping."""

    def find(self, entity_class: type[T], id: Any) -> T | None: ...

    def persist(self, entity: object) -> None: ...

    def flush(self) -> None: ...


@runtime_checkable
class PropertyAccessorPort(Protocol):
    """Reads and writes named properties, honouring accessor methods."""

    def get_value(self, obj: object, name: str) -> Any: ...

    def set_value(self, obj: object, name: str, value: Any) -> None: ...


@runtime_checkable
class MetadataProviderPort(Protocol):
    """Supplies the declared properties of a class with their directives."""

    def declared_properties(self, cls: type) -> list[DeclaredProperty]: ...
