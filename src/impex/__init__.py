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
"""impex: export annotated object graphs to plain data and import them back."""

from impex.core.config import Config, config_properties
from impex.kernel.exceptions import ImpexException
from impex.mapping import (
    ENTITY_CLASS_KEY,
    Exportable,
    Exporter,
    Importable,
    Importer,
    Mapper,
    MetadataResolver,
    PropertyFilter,
    exportable_entity,
    importable_entity,
)

__version__ = "0.1.0"

__all__ = [
    "ENTITY_CLASS_KEY",
    "Config",
    "Exportable",
    "Exporter",
    "ImpexException",
    "Importable",
    "Importer",
    "Mapper",
    "MetadataResolver",
    "PropertyFilter",
    "config_properties",
    "exportable_entity",
    "importable_entity",
]
