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
"""Identity mapping: old payload identifiers to store-assigned identifiers.

When records are imported into a store that assigns its own identifiers
(autoincrement keys, sequences), the identifiers in the payload no longer
match. Instances of the configured classes are persisted and flushed right
after import so their new identifier is known, and later references to the
old identifier are redirected to it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from impex.kernel.exceptions import ConfigurationException, UnresolvedReferenceException
from impex.mapping.plain import entity_name
from impex.mapping.ports.outbound import ObjectStorePort, PropertyAccessorPort

logger = structlog.get_logger(__name__)

_DECIMAL_ID = re.compile(r"-?(0|[1-9][0-9]*)")


def is_subtype(cls: type, base: type) -> bool:
    """Nominal subtype check that also works for Protocol bases."""
    if base in getattr(cls, "__mro__", ()):
        return True
    if getattr(base, "_is_protocol", False):
        return False
    return isinstance(cls, type) and issubclass(cls, base)


def _identity_key(identifier: Any) -> Any:
    """Canonical decimal strings key the same entry as the integer they spell."""
    if isinstance(identifier, str) and _DECIMAL_ID.fullmatch(identifier):
        return int(identifier)
    return identifier


class IdentityMapper:
    """Tracks ``class -> old id -> new id`` for opted-in classes.

    Args:
        accessor: Used to read the identifier of persisted instances.
        identity_field: Name of the identifier property.
    """

    def __init__(self, accessor: PropertyAccessorPort, identity_field: str = "id") -> None:
        self._accessor = accessor
        self._identity_field = identity_field
        self._classes: list[type] = []
        self._map: dict[type, dict[Any, Any]] = {}

    @property
    def classes(self) -> list[type]:
        return list(self._classes)

    @property
    def identity_field(self) -> str:
        return self._identity_field

    def configure(self, classes: Iterable[type]) -> None:
        """Set the classes (or interfaces) whose instances are identity mapped."""
        self._classes = list(dict.fromkeys(classes))

    def snapshot(self) -> dict[type, dict[Any, Any]]:
        """Copy of the identity map."""
        return {cls: dict(ids) for cls, ids in self._map.items()}

    def mapping_class_for(self, cls: type) -> type | None:
        """First configured class that *cls* is a subtype of."""
        for mapping_class in self._classes:
            if is_subtype(cls, mapping_class):
                return mapping_class
        return None

    def process(self, data: Mapping[str, Any], instance: object, store: ObjectStorePort | None) -> None:
        """Persist and flush an identity-mapped *instance* and record its new id.

        Payloads without an identifier are persisted but not recorded.
        """
        mapping_class = self.mapping_class_for(type(instance))
        if mapping_class is None:
            return
        if store is None:
            raise ConfigurationException(
                "Object store must be set to use identity mapping!",
                context={"entity": entity_name(type(instance))},
            )

        store.persist(instance)
        store.flush()

        old_id = data.get(self._identity_field)
        if old_id is None:
            return
        new_id = self._accessor.get_value(instance, self._identity_field)
        self._map.setdefault(mapping_class, {})[_identity_key(old_id)] = new_id
        logger.debug(
            "identity_mapped",
            mapping_class=entity_name(mapping_class),
            old_id=old_id,
            new_id=new_id,
        )

    def translate(self, target: type, identifier: Any) -> Any:
        """Translate *identifier* for *target* if the class is identity mapped.

        Raises:
            UnresolvedReferenceException: *target* is mapped but *identifier*
                was not imported yet.
        """
        mapping_class = self.mapping_class_for(target)
        if mapping_class is None:
            return identifier
        try:
            return self._map[mapping_class][_identity_key(identifier)]
        except KeyError as exc:
            raise UnresolvedReferenceException(
                f"ID for referenced record {entity_name(target)}#{identifier} was not yet mapped, "
                f"check import order!",
                context={"entity": entity_name(target), "value": identifier},
            ) from exc
