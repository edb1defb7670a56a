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
"""Importer: the plain representation back to object graphs.

Example::

    importer = Importer(object_store=SqlAlchemyObjectStore(session))
    invoice = importer.import_object(data, Invoice)
    lines = importer.import_collection(rows, InvoiceLine)

    # Records whose keys are reassigned by the store
    importer.set_identity_mapping_classes([Customer])
    importer.import_entity_collection(customer_rows, Customer)
"""

from __future__ import annotations

import inspect
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from typing import Any
from uuid import UUID

import structlog

from impex.kernel.exceptions import (
    ConfigurationException,
    NullPolicyException,
    SchemaException,
    ShapeException,
    UnknownShapeException,
    UnresolvedReferenceException,
)
from impex.mapping.accessor import PropertyAccessor
from impex.mapping.filter import FilterSpec, PropertyFilter
from impex.mapping.identity import IdentityMapper, is_subtype
from impex.mapping.plain import ENTITY_CLASS_KEY, describe, entity_name, is_object, is_reference, is_tagged
from impex.mapping.ports.outbound import ObjectStorePort, PropertyAccessorPort
from impex.mapping.registry import EntityRegistry
from impex.mapping.resolver import ImportableProperty, MetadataResolver

logger = structlog.get_logger(__name__)

_TEMPORAL_TYPES = (datetime, date, time)


def is_interface(cls: type) -> bool:
    """Protocol classes are interfaces and cannot be instantiated."""
    return bool(cls.__dict__.get("_is_protocol", False))


def is_abstract(cls: type) -> bool:
    """ABCs with abstract methods and classes declaring ``__abstract__ = True``."""
    return inspect.isabstract(cls) or cls.__dict__.get("__abstract__", False) is True


class Importer:
    """Instantiates and populates objects from plain data.

    Args:
        resolver: Shared metadata resolver. A private one is created if omitted.
        accessor: Property accessor. Defaults to :class:`PropertyAccessor`.
        registry: Entity registry for ``_entityClass`` tags. Defaults to the
            resolver's registry.
        object_store: Store used to resolve references and to persist
            identity-mapped records.
        identity_field: Identifier property read by identity mapping.
    """

    def __init__(
        self,
        resolver: MetadataResolver | None = None,
        accessor: PropertyAccessorPort | None = None,
        registry: EntityRegistry | None = None,
        object_store: ObjectStorePort | None = None,
        identity_field: str = "id",
    ) -> None:
        self._resolver = resolver or MetadataResolver(registry=registry)
        self._accessor = accessor or PropertyAccessor()
        self._registry = registry if registry is not None else self._resolver.registry
        self._object_store = object_store
        self._identity = IdentityMapper(self._accessor, identity_field)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def object_store(self) -> ObjectStorePort | None:
        return self._object_store

    def set_object_store(self, object_store: ObjectStorePort) -> None:
        self._object_store = object_store

    def set_identity_mapping_classes(self, classes: Iterable[type]) -> None:
        """Opt classes (or interfaces) into identity mapping.

        Raises:
            ConfigurationException: no object store is set.
        """
        if self._object_store is None:
            raise ConfigurationException("Object store must be set to use identity mapping!")
        self._identity.configure(classes)

    @property
    def identity_map(self) -> dict[type, dict[Any, Any]]:
        """Copy of ``mapping class -> old id -> new id``."""
        return self._identity.snapshot()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def import_object(
        self,
        data: Mapping[str, Any],
        target_class: type | str | None = None,
        property_filter: FilterSpec = None,
        exclude: bool = False,
    ) -> Any:
        """Create an instance from *data* and populate its importable properties.

        The class is taken from ``data["_entityClass"]`` if present, else from
        *target_class*; a tagged class must be *target_class* or a subtype.
        Properties missing from *data* keep their defaults.
        """
        if not isinstance(data, Mapping):
            raise ShapeException(
                f"Cannot import {describe(data)}, a mapping is required",
                context={"value": data},
            )

        cls = self._resolve_class(data, target_class)
        instance = self._instantiate(cls)
        selection = PropertyFilter.of(property_filter)

        for name, prop in self._resolver.get_importable_properties(cls).items():
            if selection.skips(name, exclude) or name not in data:
                continue
            value = self._import_value(cls, prop, data[name], selection.nested(name), exclude)
            self._accessor.set_value(instance, name, value)

        self._identity.process(data, instance, self._object_store)
        logger.debug("object_imported", entity=entity_name(cls))
        return instance

    def import_collection(
        self,
        data: Iterable[Any],
        element_class: type | str | None = None,
        property_filter: FilterSpec = None,
        exclude: bool = False,
    ) -> list[Any]:
        """Import each element of *data*.

        Identifiers resolve as references (requires *element_class*), objects
        pass through, mappings are imported.
        """
        cls = self._target(element_class)
        return self._collection_from_list(data, cls, PropertyFilter.of(property_filter), exclude)

    def import_entity_collection(
        self,
        data: Iterable[Any],
        element_class: type | str | None = None,
        property_filter: FilterSpec = None,
        exclude: bool = False,
    ) -> list[Any]:
        """Import each mapping of *data*, persisting and flushing it right away.

        Returns the persisted entities, in payload order.
        """
        store = self._require_store()
        cls = self._target(element_class)
        selection = PropertyFilter.of(property_filter)

        entities: list[Any] = []
        for element in data:
            if not isinstance(element, Mapping):
                expected = entity_name(cls) if cls is not None else "an entity"
                raise ShapeException(
                    f"Collection element must be the mapping representation of {expected}, "
                    f"found {describe(element)}!",
                    context={"entity": expected, "value": element},
                )
            entity = self.import_object(element, cls, selection, exclude)
            store.persist(entity)
            store.flush()
            entities.append(entity)

        logger.info("entity_collection_imported", entity=entity_name(cls) if cls else None, count=len(entities))
        return entities

    # ------------------------------------------------------------------
    # Class resolution
    # ------------------------------------------------------------------

    def _target(self, target_class: type | str | None) -> type | None:
        if target_class is None or isinstance(target_class, type):
            return target_class
        resolved = self._registry.resolve(target_class)
        if resolved is None:
            raise SchemaException(f"Class {target_class} does not exist!", context={"entity": target_class})
        return resolved

    def _resolve_class(self, data: Mapping[str, Any], target_class: type | str | None) -> type:
        target = self._target(target_class)
        tag = data.get(ENTITY_CLASS_KEY)

        if tag is None:
            if target is None:
                raise SchemaException(
                    f"No entity class given to instantiate the data: {describe(data)}",
                    context={"value": dict(data)},
                )
            cls = target
        elif not isinstance(tag, str):
            raise ShapeException(
                f"'{ENTITY_CLASS_KEY}' must be a class name, found {describe(tag)}",
                context={"value": tag},
            )
        else:
            found = self._registry.resolve(tag, within=target)
            if found is None:
                raise SchemaException(f"Class {tag} does not exist!", context={"entity": tag})
            cls = found

        if is_interface(cls):
            raise SchemaException(
                f"Cannot create instance of the interface {entity_name(cls)}, concrete class needed!",
                context={"entity": entity_name(cls)},
            )

        if target is not None and tag is not None and not is_subtype(cls, target):
            raise ShapeException(
                f"Given '{ENTITY_CLASS_KEY}' {tag} is not a subclass/implementation of {entity_name(target)}!",
                context={"entity": entity_name(target), "value": tag},
            )

        if is_abstract(cls):
            raise SchemaException(
                f"Cannot create instance of the abstract class {entity_name(cls)}, concrete class needed!",
                context={"entity": entity_name(cls)},
            )

        return cls

    @staticmethod
    def _instantiate(cls: type) -> Any:
        try:
            return cls()
        except TypeError as exc:
            raise SchemaException(
                f"Cannot create instance of {entity_name(cls)} without arguments: {exc}",
                context={"entity": entity_name(cls)},
            ) from exc

    # ------------------------------------------------------------------
    # Property values
    # ------------------------------------------------------------------

    def _import_value(
        self,
        owner: type,
        prop: ImportableProperty,
        value: Any,
        nested: PropertyFilter,
        exclude: bool,
    ) -> Any:
        name = prop.name
        details = self._resolver.get_type_details(owner, name)

        if value is None:
            if not details.allows_null:
                raise NullPolicyException(
                    f"Found None for {entity_name(owner)}.{name}, but property is not nullable!",
                    context={"entity": entity_name(owner), "property": name, "value": None},
                )
            return None

        if details.is_builtin:
            if prop.list_of is not None:
                return self._process_list(owner, name, value, prop.list_of, nested, exclude)
            return value

        if is_object(value):
            return value

        target = details.target
        if target is None:
            if is_tagged(value):
                return self.import_object(value, None, nested, exclude)
            return value

        if self._resolver.is_importable(target) or is_tagged(value):
            if is_reference(value):
                return self._resolve_reference(target, value, owner, name)
            if not isinstance(value, Mapping):
                raise ShapeException(
                    f"Property {entity_name(owner)}.{name} expects the mapping representation "
                    f"of {entity_name(target)} or an identifier, found {describe(value)}!",
                    context={"entity": entity_name(owner), "property": name, "value": value},
                )
            return self.import_object(value, target, nested, exclude)

        if details.is_collection:
            if not isinstance(value, (list, tuple)):
                raise ShapeException(
                    f"Property {entity_name(owner)}.{name} is a collection but the value is no list: "
                    f"{describe(value)}!",
                    context={"entity": entity_name(owner), "property": name, "value": value},
                )
            element_class = prop.list_of or details.item_class
            return self._collection_from_list(value, element_class, nested, exclude, owner, name)

        if issubclass(target, _TEMPORAL_TYPES):
            return self._parse(owner, name, target, value)

        if issubclass(target, UUID):
            return self._parse(owner, name, target, value)

        raise UnknownShapeException(
            f"Don't know how to import {entity_name(owner)}.{name}!",
            context={"entity": entity_name(owner), "property": name, "value": value},
        )

    @staticmethod
    def _parse(owner: type, name: str, target: type, value: Any) -> Any:
        if not isinstance(value, str):
            raise ShapeException(
                f"Property {entity_name(owner)}.{name} expects a string for {target.__name__}, "
                f"found {describe(value)}!",
                context={"entity": entity_name(owner), "property": name, "value": value},
            )
        try:
            if issubclass(target, UUID):
                return target(value)
            return target.fromisoformat(value)  # type: ignore[attr-defined]
        except ValueError as exc:
            raise ShapeException(
                f"Cannot parse {describe(value)} as {target.__name__} for {entity_name(owner)}.{name}!",
                context={"entity": entity_name(owner), "property": name, "value": value},
            ) from exc

    def _process_list(
        self,
        owner: type,
        name: str,
        value: Any,
        list_of: type,
        nested: PropertyFilter,
        exclude: bool,
    ) -> list[Any]:
        if not isinstance(value, (list, tuple)):
            raise ShapeException(
                f"Property {entity_name(owner)}.{name} is marked as list of '{entity_name(list_of)}' "
                f"but it is no list: {describe(value)}!",
                context={"entity": entity_name(owner), "property": name, "value": value},
            )

        entries: list[Any] = []
        for entry in value:
            if is_object(entry):
                if not is_subtype(type(entry), list_of):
                    raise ShapeException(
                        f"Property {entity_name(owner)}.{name} is marked as list of "
                        f"'{entity_name(list_of)}' but found an instance of {entity_name(type(entry))}!",
                        context={"entity": entity_name(owner), "property": name, "value": entity_name(type(entry))},
                    )
                entries.append(entry)
            elif isinstance(entry, Mapping):
                entries.append(self.import_object(entry, list_of, nested, exclude))
            else:
                entries.append(entry)
        return entries

    def _collection_from_list(
        self,
        data: Iterable[Any],
        element_class: type | None,
        selection: PropertyFilter,
        exclude: bool,
        owner: type | None = None,
        name: str | None = None,
    ) -> list[Any]:
        collection: list[Any] = []
        for element in data:
            if element_class is not None and is_reference(element):
                collection.append(self._resolve_reference(element_class, element, owner, name))
            elif is_object(element):
                if element_class is not None and not is_subtype(type(element), element_class):
                    raise ShapeException(
                        f"Collection should be instances of {entity_name(element_class)} "
                        f"but found {entity_name(type(element))}!",
                        context={"entity": entity_name(element_class), "value": entity_name(type(element))},
                    )
                collection.append(element)
            elif isinstance(element, Mapping):
                collection.append(self.import_object(element, element_class, selection, exclude))
            else:
                raise ShapeException(
                    f"Don't know how to import collection element {describe(element)}, either no "
                    f"element class given or no mapping/object!",
                    context={"value": element},
                )
        return collection

    # ------------------------------------------------------------------
    # References
    # ------------------------------------------------------------------

    def _require_store(self) -> ObjectStorePort:
        if self._object_store is None:
            raise ConfigurationException("Object store must be set first!")
        return self._object_store

    def _resolve_reference(self, target: type, identifier: Any, owner: type | None, name: str | None) -> Any:
        store = self._object_store
        if store is None:
            raise ConfigurationException(
                f"Found ID for {entity_name(target)}, but object store is not set to find object!",
                context={"entity": entity_name(target), "value": identifier},
            )

        mapped = self._identity.translate(target, identifier)
        record = store.find(target, mapped)
        if record is None:
            where = f" (referenced by {entity_name(owner)}.{name})" if owner is not None else ""
            raise UnresolvedReferenceException(
                f"Could not find referenced & mapped record {entity_name(target)}#{mapped}{where}!",
                context={"entity": entity_name(target), "property": name, "value": identifier},
            )
        logger.debug("reference_resolved", entity=entity_name(target), id=identifier, mapped_id=mapped)
        return record
