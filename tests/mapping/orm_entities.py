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
"""SQLAlchemy-mapped entities for the object store tests.

Mapped imperatively so the ``Annotated`` directives stay the only class-level
annotations.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Self

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import registry, relationship

from impex.mapping import Exportable, Importable, exportable_entity, importable_entity

mapper_registry = registry()

autoincrement_table = Table(
    "autoincrement_entity",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, default=""),
    Column("parent_id", Integer, ForeignKey("autoincrement_entity.id"), nullable=True),
)


@exportable_entity
@importable_entity
class AutoincrementEntity:
    """Primary keys are assigned by the database and never imported."""

    id: Annotated[int | None, Exportable()]
    name: Annotated[str, Exportable(), Importable()]
    parent: Annotated[Self | None, Exportable(reference_by_identifier="id"), Importable()]
    children: Annotated[Sequence[Self], Exportable(reference_by_identifier="id"), Importable()]

    def __init__(self) -> None:
        self.id = None
        self.name = ""
        self.parent = None


mapper_registry.map_imperatively(
    AutoincrementEntity,
    autoincrement_table,
    properties={
        "parent": relationship(
            AutoincrementEntity,
            remote_side=[autoincrement_table.c.id],
            back_populates="children",
        ),
        "children": relationship(AutoincrementEntity, back_populates="parent"),
    },
)
