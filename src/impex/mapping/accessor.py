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
"""Getter/setter-aware property access."""

from __future__ import annotations

from typing import Any

from impex.kernel.exceptions import PropertyAccessException
from impex.mapping.plain import entity_name

_GETTER_PREFIXES = ("get_", "is_", "has_")


class PropertyAccessor:
    """Reads and writes properties by name.

    Reading tries ``get_<name>()``, ``is_<name>()`` and ``has_<name>()``
    before plain attribute access (which covers ``@property``). Writing calls
    ``set_<name>(value)`` when it exists and assigns the attribute otherwise.
    """

    def get_value(self, obj: object, name: str) -> Any:
        for prefix in _GETTER_PREFIXES:
            getter = getattr(obj, f"{prefix}{name}", None)
            if callable(getter):
                return getter()
        try:
            return getattr(obj, name)
        except AttributeError as exc:
            raise PropertyAccessException(
                f"Cannot read {entity_name(type(obj))}.{name}: no getter and no attribute",
                context={"entity": entity_name(type(obj)), "property": name},
            ) from exc

    def set_value(self, obj: object, name: str, value: Any) -> None:
        setter = getattr(obj, f"set_{name}", None)
        if callable(setter):
            setter(value)
        else:
            setattr(obj, name, value)
