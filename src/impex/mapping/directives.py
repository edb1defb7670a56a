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
"""Export/import directives and entity class markers.

Directives are attached to class annotations with :data:`typing.Annotated`::

    @exportable_entity
    @importable_entity
    class Invoice:
        id: Annotated[int | None, Exportable()]
        lines: Annotated[MutableSequence[Line], Exportable(), Importable()]
        customer: Annotated[Customer | None, Exportable(reference_by_identifier="id"), Importable()]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from impex.mapping.registry import EntityRegistry, entity_registry

_EXPORTABLE_MARKER = "__impex_exportable__"
_IMPORTABLE_MARKER = "__impex_importable__"


@dataclass(frozen=True)
class Exportable:
    """Marks a property as part of the exported representation.

    Attributes:
        as_list: Export the value element by element even if it is a plain list.
        reference_by_identifier: Name of the identifier property; when set, a
            nested object (or each element of a list) is exported as the value
            of that property only.
    """

    as_list: bool = False
    reference_by_identifier: str = ""


@dataclass(frozen=True)
class Importable:
    """Marks a property as populated on import.

    Attributes:
        list_of: Element class for list-valued properties. A class,
            ``typing.Self`` (the class whose body declares the property) or
            the name of a class visible from the owning module.
    """

    list_of: Any = None


def _marker(attr: str, cls: type | None, registry: EntityRegistry | None) -> Any:
    def decorator(target: type) -> type:
        setattr(target, attr, True)
        (registry if registry is not None else entity_registry).register(target)
        return target

    if cls is not None:
        return decorator(cls)
    return decorator


def exportable_entity(cls: type | None = None, *, registry: EntityRegistry | None = None) -> Any:
    """Mark a class (or Protocol) as an exportable entity and register it.

    Usable bare (``@exportable_entity``) or with a custom registry
    (``@exportable_entity(registry=my_registry)``).
    """
    return _marker(_EXPORTABLE_MARKER, cls, registry)


def importable_entity(cls: type | None = None, *, registry: EntityRegistry | None = None) -> Any:
    """Mark a class (or Protocol) as an importable entity and register it."""
    return _marker(_IMPORTABLE_MARKER, cls, registry)


def is_exportable_entity(cls: type) -> bool:
    """Check the exportable marker on *cls* or its nearest marked ancestor."""
    return getattr(cls, _EXPORTABLE_MARKER, False) is True


def is_importable_entity(cls: type) -> bool:
    """Check the importable marker on *cls* or its nearest marked ancestor."""
    return getattr(cls, _IMPORTABLE_MARKER, False) is True
