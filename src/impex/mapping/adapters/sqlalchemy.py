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
"""Object store backed by a synchronous SQLAlchemy 2.0 session."""

from __future__ import annotations

from typing import Any, TypeVar

from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import UnmappedClassError

from impex.kernel.exceptions import SchemaException
from impex.mapping.plain import entity_name

T = TypeVar("T")


class SqlAlchemyObjectStore:
    """ObjectStorePort over a :class:`~sqlalchemy.orm.Session`.

    The session's transaction belongs to the caller: the store flushes so
    that primary keys get assigned, but never commits or rolls back.

    Usage:
        with Session(engine) as session, session.begin():
            importer = Importer(object_store=SqlAlchemyObjectStore(session))
            importer.import_entity_collection(rows, Customer)
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    def find(self, entity_class: type[T], id: Any) -> T | None:
        """Find an entity by primary key, from the identity map or the database."""
        try:
            return self._session.get(entity_class, id)
        except (UnmappedClassError, NoInspectionAvailable) as exc:
            raise SchemaException(
                f"Class {entity_name(entity_class)} is not mapped, cannot find record #{id}",
                context={"entity": entity_name(entity_class), "value": id},
            ) from exc

    def persist(self, entity: object) -> None:
        self._session.add(entity)

    def flush(self) -> None:
        self._session.flush()
