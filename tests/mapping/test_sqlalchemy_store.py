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
"""Tests for SqlAlchemyObjectStore with identity mapping against SQLite."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session

from impex.kernel.exceptions import SchemaException
from impex.mapping import Exporter, Importer
from impex.mapping.adapters.sqlalchemy import SqlAlchemyObjectStore
from impex.mapping.plain import ENTITY_CLASS_KEY, entity_name
from tests.mapping.entities import SampleDTO
from tests.mapping.orm_entities import AutoincrementEntity, autoincrement_table, mapper_registry


@pytest.fixture
def engine():
    engine = create_engine("sqlite://")
    mapper_registry.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session: Session) -> SqlAlchemyObjectStore:
    return SqlAlchemyObjectStore(session)


@pytest.fixture
def importer(store: SqlAlchemyObjectStore) -> Importer:
    importer = Importer(object_store=store)
    importer.set_identity_mapping_classes([AutoincrementEntity])
    return importer


def _count(session: Session) -> int:
    return session.scalar(select(func.count()).select_from(autoincrement_table))


class TestSqlAlchemyObjectStore:
    def test_persist_flush_and_find(self, store: SqlAlchemyObjectStore, session: Session):
        entity = AutoincrementEntity()
        entity.name = "stored"

        store.persist(entity)
        store.flush()

        assert entity.id is not None
        assert store.find(AutoincrementEntity, entity.id) is entity
        assert store.session is session

    def test_find_missing(self, store: SqlAlchemyObjectStore):
        assert store.find(AutoincrementEntity, 12345) is None

    def test_find_unmapped_class(self, store: SqlAlchemyObjectStore):
        with pytest.raises(SchemaException, match="is not mapped"):
            store.find(SampleDTO, 1)


class TestAutoincrementIdentityMapping:
    def test_identifiers_are_reassigned(self, importer: Importer, session: Session):
        first = importer.import_object({"id": 99999, "name": "e1"}, AutoincrementEntity)

        assert first.id is not None
        assert first.id != 99999
        assert importer.identity_map[AutoincrementEntity][99999] == first.id
        assert _count(session) == 1

    def test_parent_reference_uses_new_identifier(self, importer: Importer):
        first = importer.import_object({"id": 99999, "name": "e1"}, AutoincrementEntity)
        second = importer.import_object({"id": 77777, "name": "e2", "parent": 99999}, AutoincrementEntity)

        assert second.parent is first
        assert second in first.children
        assert importer.identity_map[AutoincrementEntity][77777] == second.id

    def test_children_references(self, importer: Importer):
        importer.import_object({"id": 1001, "name": "c1"}, AutoincrementEntity)
        importer.import_object({"id": 1002, "name": "c2"}, AutoincrementEntity)

        parent = importer.import_object({"id": 1000, "name": "p", "children": [1001, 1002]}, AutoincrementEntity)

        assert [child.name for child in parent.children] == ["c1", "c2"]
        assert all(child.parent is parent for child in parent.children)

    def test_entity_collection(self, importer: Importer, session: Session):
        entities = importer.import_entity_collection(
            [
                {ENTITY_CLASS_KEY: entity_name(AutoincrementEntity), "id": 5, "name": "root"},
                {"id": 6, "name": "child", "parent": 5},
                {"id": 7, "name": "grandchild", "parent": 6},
            ],
            AutoincrementEntity,
        )

        root, child, grandchild = entities
        assert grandchild.parent is child
        assert child.parent is root
        assert _count(session) == 3

    def test_export_of_imported_graph(self, importer: Importer):
        parent = importer.import_object({"id": 1, "name": "p"}, AutoincrementEntity)
        child = importer.import_object({"id": 2, "name": "c", "parent": 1}, AutoincrementEntity)

        exported = Exporter().export(parent)

        assert exported == {
            "id": parent.id,
            "name": "p",
            "parent": None,
            "children": [child.id],
        }

    def test_export_child_references_parent_by_identifier(self, importer: Importer):
        parent = importer.import_object({"id": 1, "name": "p"}, AutoincrementEntity)
        child = importer.import_object({"id": 2, "name": "c", "parent": 1}, AutoincrementEntity)

        assert Exporter().export(child)["parent"] == parent.id
