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
"""Mapper: one resolver shared by an exporter and an importer.

Example::

    mapper = Mapper.from_config(Config.from_file("impex.yaml"), object_store=store)
    data = mapper.export(invoice, ["id", {"lines": ["sku"]}])
    copy = mapper.import_object(data, Invoice)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from impex.config.properties import MapperProperties
from impex.core.config import Config
from impex.mapping.accessor import PropertyAccessor
from impex.mapping.exporter import Exporter
from impex.mapping.filter import FilterSpec
from impex.mapping.importer import Importer
from impex.mapping.ports.outbound import ObjectStorePort, PropertyAccessorPort
from impex.mapping.registry import EntityRegistry
from impex.mapping.resolver import MetadataResolver


class Mapper:
    """Facade over :class:`Exporter` and :class:`Importer`.

    Metadata is resolved once per class and shared by both directions. The
    identity map and the object store belong to the importer of this mapper.
    """

    def __init__(
        self,
        object_store: ObjectStorePort | None = None,
        *,
        resolver: MetadataResolver | None = None,
        accessor: PropertyAccessorPort | None = None,
        registry: EntityRegistry | None = None,
        properties: MapperProperties | None = None,
    ) -> None:
        self.properties = properties or MapperProperties()
        self.resolver = resolver or MetadataResolver(registry=registry)
        accessor = accessor or PropertyAccessor()
        self.exporter = Exporter(self.resolver, accessor)
        self.importer = Importer(
            self.resolver,
            accessor,
            registry=registry,
            object_store=object_store,
            identity_field=self.properties.identity_field,
        )

    @classmethod
    def from_config(cls, config: Config, object_store: ObjectStorePort | None = None) -> Mapper:
        """Build a mapper from the ``impex.mapper`` section of *config*."""
        return cls(object_store, properties=config.bind(MapperProperties))

    # -- export -------------------------------------------------------------

    def export(self, obj: object, property_filter: FilterSpec = None, exclude: bool = False) -> dict[str, Any]:
        return self.exporter.export(obj, property_filter, exclude)

    def export_collection(
        self,
        collection: Iterable[Any] | Mapping[Any, Any],
        property_filter: FilterSpec = None,
        exclude: bool = False,
    ) -> list[Any]:
        return self.exporter.export_collection(collection, property_filter, exclude)

    # -- import -------------------------------------------------------------

    def import_object(
        self,
        data: Mapping[str, Any],
        target_class: type | str | None = None,
        property_filter: FilterSpec = None,
        exclude: bool = False,
    ) -> Any:
        return self.importer.import_object(data, target_class, property_filter, exclude)

    def import_collection(
        self,
        data: Iterable[Any],
        element_class: type | str | None = None,
        property_filter: FilterSpec = None,
        exclude: bool = False,
    ) -> list[Any]:
        return self.importer.import_collection(data, element_class, property_filter, exclude)

    def import_entity_collection(
        self,
        data: Iterable[Any],
        element_class: type | str | None = None,
        property_filter: FilterSpec = None,
        exclude: bool = False,
    ) -> list[Any]:
        return self.importer.import_entity_collection(data, element_class, property_filter, exclude)

    def set_object_store(self, object_store: ObjectStorePort) -> None:
        self.importer.set_object_store(object_store)

    def set_identity_mapping_classes(self, classes: Iterable[type]) -> None:
        self.importer.set_identity_mapping_classes(classes)

    @property
    def identity_map(self) -> dict[type, dict[Any, Any]]:
        return self.importer.identity_map
