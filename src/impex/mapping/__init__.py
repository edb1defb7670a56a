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
"""impex mapping: object graphs to plain data and back."""

from impex.mapping.accessor import PropertyAccessor
from impex.mapping.directives import (
    Exportable,
    Importable,
    exportable_entity,
    importable_entity,
    is_exportable_entity,
    is_importable_entity,
)
from impex.mapping.exporter import Exporter
from impex.mapping.filter import EMPTY_FILTER, FilterSpec, PropertyFilter
from impex.mapping.identity import IdentityMapper
from impex.mapping.importer import Importer
from impex.mapping.mapper import Mapper
from impex.mapping.metadata import AnnotatedMetadataProvider, DeclaredProperty
from impex.mapping.plain import ENTITY_CLASS_KEY, entity_name
from impex.mapping.registry import EntityRegistry, entity_registry
from impex.mapping.resolver import ImportableProperty, MetadataResolver
from impex.mapping.type_details import TypeDetails

__all__ = [
    "ENTITY_CLASS_KEY",
    "EMPTY_FILTER",
    "AnnotatedMetadataProvider",
    "DeclaredProperty",
    "EntityRegistry",
    "Exportable",
    "Exporter",
    "FilterSpec",
    "IdentityMapper",
    "Importable",
    "ImportableProperty",
    "Importer",
    "Mapper",
    "MetadataResolver",
    "PropertyAccessor",
    "PropertyFilter",
    "TypeDetails",
    "entity_name",
    "entity_registry",
    "exportable_entity",
    "importable_entity",
    "is_exportable_entity",
    "is_importable_entity",
]
