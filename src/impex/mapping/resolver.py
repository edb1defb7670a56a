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
"""Metadata resolver: memoized export/import metadata per class.

One resolver is meant to be shared by the exporter and the importer of an
application. Its tables only grow; properties of a class are assumed not to
change while the process runs.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Self

import structlog

from impex.kernel.exceptions import SchemaException
from impex.mapping.directives import Exportable, Importable
from impex.mapping.metadata import AnnotatedMetadataProvider, DeclaredProperty
from impex.mapping.plain import entity_name
from impex.mapping.ports.outbound import MetadataProviderPort
from impex.mapping.registry import EntityRegistry, entity_registry
from impex.mapping.type_details import TypeDetails, derive_type_details

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ImportableProperty:
    """An importable property with its directive and resolved element class."""

    name: str
    directive: Importable
    annotation: Any
    list_of: type | None = None


class MetadataResolver:
    """Computes and caches which properties of a class are exported or imported.

    Args:
        provider: Source of declared properties. Defaults to reading
            ``typing.Annotated`` metadata.
        registry: Registry used to resolve ``list_of`` names.
    """

    def __init__(
        self,
        provider: MetadataProviderPort | None = None,
        registry: EntityRegistry | None = None,
    ) -> None:
        self._provider = provider or AnnotatedMetadataProvider()
        self._registry = registry if registry is not None else entity_registry
        self._declared: dict[type, dict[str, DeclaredProperty]] = {}
        self._exportable: dict[type, Mapping[str, Exportable]] = {}
        self._importable: dict[type, Mapping[str, ImportableProperty]] = {}
        self._type_details: dict[tuple[type, str], TypeDetails] = {}

    @property
    def registry(self) -> EntityRegistry:
        return self._registry

    def get_exportable_properties(self, cls: type) -> Mapping[str, Exportable]:
        """Exportable properties of *cls* in declaration order."""
        cached = self._exportable.get(cls)
        if cached is None:
            found: dict[str, Exportable] = {}
            for name, prop in self._declared_properties(cls).items():
                directives = prop.directives_of(Exportable)
                if directives:
                    found[name] = directives[0]
            if found:
                self._registry.register(cls)
            cached = self._exportable[cls] = MappingProxyType(found)
            logger.debug("exportable_properties_resolved", entity=entity_name(cls), properties=list(found))
        return cached

    def get_importable_properties(self, cls: type) -> Mapping[str, ImportableProperty]:
        """Importable properties of *cls* in declaration order."""
        cached = self._importable.get(cls)
        if cached is None:
            found: dict[str, ImportableProperty] = {}
            for name, prop in self._declared_properties(cls).items():
                directives = prop.directives_of(Importable)
                if directives:
                    directive = directives[0]
                    list_of = self._resolve_list_of(cls, name, directive.list_of, prop.owner)
                    found[name] = ImportableProperty(name, directive, prop.annotation, list_of)
            if found:
                self._registry.register(cls)
            cached = self._importable[cls] = MappingProxyType(found)
            logger.debug("importable_properties_resolved", entity=entity_name(cls), properties=list(found))
        return cached

    def get_type_details(self, cls: type, name: str) -> TypeDetails:
        """Type facts of property *name* of *cls*, derived on first use.

        Raises:
            AmbiguousTypeException: the property is a union of several classes.
            SchemaException: *cls* declares no property *name*.
        """
        key = (cls, name)
        details = self._type_details.get(key)
        if details is None:
            prop = self._declared_properties(cls).get(name)
            if prop is None:
                raise SchemaException(
                    f"{entity_name(cls)} declares no property '{name}'",
                    context={"entity": entity_name(cls), "property": name},
                )
            details = self._type_details[key] = derive_type_details(cls, name, prop.annotation, self_type=prop.owner)
        return details

    def is_exportable(self, cls: type) -> bool:
        """A class is exportable iff at least one property carries ``Exportable``."""
        return bool(self.get_exportable_properties(cls))

    def is_importable(self, cls: type) -> bool:
        """A class is importable iff at least one property carries ``Importable``."""
        return bool(self.get_importable_properties(cls))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _declared_properties(self, cls: type) -> dict[str, DeclaredProperty]:
        declared = self._declared.get(cls)
        if declared is None:
            declared = self._declared[cls] = {p.name: p for p in self._provider.declared_properties(cls)}
        return declared

    def _resolve_list_of(self, owner: type, name: str, list_of: Any, declared_by: type | None = None) -> type | None:
        if list_of is None:
            return None
        if list_of is Self:
            return declared_by if declared_by is not None else owner
        if isinstance(list_of, type):
            return list_of
        if isinstance(list_of, str):
            resolved = self._registry.resolve(list_of)
            if resolved is None:
                module = sys.modules.get(owner.__module__)
                candidate = getattr(module, list_of, None)
                resolved = candidate if isinstance(candidate, type) else None
            if resolved is not None:
                return resolved
        raise SchemaException(
            f"Cannot resolve list_of {list_of!r} of {entity_name(owner)}.{name}",
            context={"entity": entity_name(owner), "property": name, "value": repr(list_of)},
        )
