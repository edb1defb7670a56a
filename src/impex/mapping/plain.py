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
"""Plain Representation helpers.

The plain representation is a JSON-compatible tree of ``None``, ``bool``,
``int``, ``float``, ``str``, lists and string-keyed mappings. A mapping that
stands for an exported object may carry the reserved :data:`ENTITY_CLASS_KEY`
naming the object's concrete class.
"""

from __future__ import annotations

import json
from collections.abc import Collection, Mapping
from datetime import date, datetime, time
from typing import Any

ENTITY_CLASS_KEY = "_entityClass"

# Values copied verbatim on export; lists, tuples and dicts are opaque arrays.
PLAIN_TYPES: tuple[type, ...] = (bool, int, float, str, list, tuple, dict)

_OPAQUE_ARRAYS = (list, tuple, dict)

_NOT_OBJECTS = (type(None), bool, int, float, str, bytes, list, tuple, Mapping)


def entity_name(cls: type) -> str:
    """Fully-qualified name used as the ``_entityClass`` tag of *cls*."""
    return f"{cls.__module__}.{cls.__qualname__}"


def is_object(value: Any) -> bool:
    """True for an already instantiated object (anything but plain data)."""
    return not isinstance(value, _NOT_OBJECTS)


def is_reference(value: Any) -> bool:
    """True for a value that can stand for a record identifier."""
    return isinstance(value, (int, str)) and not isinstance(value, bool)


def is_collection(value: Any) -> bool:
    """True for a collection object exported element by element.

    Exact ``list``, ``tuple`` and ``dict`` values are opaque arrays; any other
    non-string, non-mapping collection (ORM collections, ``UserList``,
    ``deque``, ``set``...) is a collection.
    """
    if type(value) in _OPAQUE_ARRAYS:
        return False
    return isinstance(value, Collection) and not isinstance(value, (str, bytes, bytearray, Mapping))


def is_tagged(value: Any) -> bool:
    """True for a mapping that names its class under ``_entityClass``."""
    return isinstance(value, Mapping) and ENTITY_CLASS_KEY in value


def format_temporal(value: date | time) -> str:
    """Format dates and times as ISO-8601; datetimes carry seconds and an offset."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.astimezone()
        return value.isoformat(timespec="seconds")
    if isinstance(value, time):
        return value.isoformat(timespec="seconds")
    return value.isoformat()


def describe(value: Any) -> str:
    """JSON rendering of *value* for error messages."""
    return json.dumps(value, default=repr, ensure_ascii=False)
