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
"""Entity registry: the dispatch table from ``_entityClass`` tags to classes."""

from __future__ import annotations

from collections.abc import Iterator

from impex.mapping.plain import entity_name


def _iter_subclasses(cls: type) -> Iterator[type]:
    seen: set[type] = set()
    pending = list(type.__subclasses__(cls) if isinstance(cls, type) else [])
    while pending:
        sub = pending.pop(0)
        if sub in seen:
            continue
        seen.add(sub)
        yield sub
        pending.extend(type.__subclasses__(sub))


class EntityRegistry:
    """Maps fully-qualified entity names to classes.

    Classes are registered by the ``exportable_entity`` / ``importable_entity``
    decorators. Subclasses of registered classes inherit their markers and are
    found on demand, then cached under their own name.
    """

    def __init__(self) -> None:
        self._classes: dict[str, type] = {}

    def register(self, cls: type) -> type:
        self._classes[entity_name(cls)] = cls
        return cls

    def __contains__(self, name: object) -> bool:
        return name in self._classes

    def __len__(self) -> int:
        return len(self._classes)

    def resolve(self, name: str, within: type | None = None) -> type | None:
        """Find the class tagged *name*.

        Looks at registered classes first, then at subclasses of registered
        classes and of *within* (usually the expected target class).
        """
        cls = self._classes.get(name)
        if cls is not None:
            return cls

        roots = list(self._classes.values())
        if within is not None:
            if entity_name(within) == name:
                return within
            roots.insert(0, within)

        for root in roots:
            for sub in _iter_subclasses(root):
                if entity_name(sub) == name:
                    return self.register(sub)
        return None


entity_registry = EntityRegistry()
"""Registry used by the class decorators and by default-constructed importers."""
