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
"""Exporter: object graphs to the plain representation.

Example::

    exporter = Exporter()
    data = exporter.export(invoice)
    data = exporter.export(invoice, ["id", {"lines": ["sku"]}])
    data = exporter.export(invoice, ["notes"], exclude=True)
    rows = exporter.export_collection(invoices)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, time
from typing import Any
from uuid import UUID

import structlog

from impex.kernel.exceptions import SchemaException, ShapeException, UnknownShapeException
from impex.mapping.accessor import PropertyAccessor
from impex.mapping.directives import Exportable
from impex.mapping.filter import FilterSpec, PropertyFilter
from impex.mapping.plain import (
    ENTITY_CLASS_KEY,
    PLAIN_TYPES,
    describe,
    entity_name,
    format_temporal,
    is_collection,
    is_object,
)
from impex.mapping.ports.outbound import PropertyAccessorPort
from impex.mapping.resolver import MetadataResolver

logger = structlog.get_logger(__name__)


class Exporter:
    """Walks exportable properties and encodes their values.

    Args:
        resolver: Shared metadata resolver. A private one is created if omitted.
        accessor: Property accessor. Defaults to :class:`PropertyAccessor`.
    """

    def __init__(
        self,
        resolver: MetadataResolver | None = None,
        accessor: PropertyAccessorPort | None = None,
    ) -> None:
        self._resolver = resolver or MetadataResolver()
        self._accessor = accessor or PropertyAccessor()

    def export(
        self,
        obj: object,
        property_filter: FilterSpec = None,
        exclude: bool = False,
    ) -> dict[str, Any]:
        """Export the exportable properties of *obj*, in declaration order.

        Nested objects and collection elements are exported recursively and
        tagged with ``_entityClass``; the top-level mapping is not tagged.

        Raises:
            SchemaException: the class of *obj* has no exportable properties.
            UnknownShapeException: a property value cannot be represented.
        """
        cls = type(obj)
        properties = self._resolver.get_exportable_properties(cls)
        if not properties:
            raise SchemaException(
                f"Don't know how to export instance of {entity_name(cls)}, it has no exportable properties!",
                context={"entity": entity_name(cls)},
            )

        selection = PropertyFilter.of(property_filter)
        data: dict[str, Any] = {}
        for name, directive in properties.items():
            if selection.skips(name, exclude):
                continue
            value = self._accessor.get_value(obj, name)
            data[name] = self._export_value(cls, name, directive, value, selection.nested(name), exclude)
        logger.debug("object_exported", entity=entity_name(cls), properties=list(data))
        return data

    def export_collection(
        self,
        collection: Iterable[Any] | Mapping[Any, Any],
        property_filter: FilterSpec = None,
        exclude: bool = False,
    ) -> list[Any]:
        """Export each element of *collection*.

        Plain elements are copied. Objects are exported with ``_entityClass``,
        unless the filter is a single name in include mode: then each object
        collapses to the value of that property.
        """
        selection = PropertyFilter.of(property_filter)
        identifier = None if exclude else selection.single_name()

        values: list[Any] = []
        for element in _elements(collection):
            if not is_object(element):
                values.append(element)
            elif identifier is not None:
                values.append(self._export_identifier(element, identifier))
            else:
                values.append(self._export_tagged(element, selection, exclude))
        return values

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _export_value(
        self,
        owner: type,
        name: str,
        directive: Exportable,
        value: Any,
        nested: PropertyFilter,
        exclude: bool,
    ) -> Any:
        if value is None:
            return None

        if isinstance(value, (date, time)):
            return format_temporal(value)

        if isinstance(value, UUID):
            return str(value)

        reference = directive.reference_by_identifier
        if directive.as_list or is_collection(value):
            if not isinstance(value, Iterable) or isinstance(value, (str, bytes, bytearray)):
                raise ShapeException(
                    f"Property {entity_name(owner)}.{name} is exported as list but holds {describe(value)}",
                    context={"entity": entity_name(owner), "property": name, "value": value},
                )
            if reference:
                return self.export_collection(value, PropertyFilter.single(reference))
            return self.export_collection(value, nested, exclude)

        if isinstance(value, PLAIN_TYPES):
            return value

        if self._resolver.is_exportable(type(value)):
            if reference:
                return self._export_identifier(value, reference)
            return self._export_tagged(value, nested, exclude)

        raise UnknownShapeException(
            f"Don't know how to export {entity_name(owner)}.{name}, "
            f"it is an object without exportable properties!",
            context={"entity": entity_name(owner), "property": name, "value": entity_name(type(value))},
        )

    def _export_tagged(self, obj: object, selection: PropertyFilter, exclude: bool) -> dict[str, Any]:
        data = self.export(obj, selection, exclude)
        data[ENTITY_CLASS_KEY] = entity_name(type(obj))
        return data

    def _export_identifier(self, obj: object, identifier: str) -> Any:
        data = self.export(obj, PropertyFilter.single(identifier))
        if identifier not in data:
            raise SchemaException(
                f"Cannot reference {entity_name(type(obj))} by '{identifier}', the property is not exportable",
                context={"entity": entity_name(type(obj)), "property": identifier},
            )
        return data[identifier]


def _elements(collection: Iterable[Any] | Mapping[Any, Any]) -> Iterable[Any]:
    if isinstance(collection, Mapping):
        return collection.values()
    return collection
