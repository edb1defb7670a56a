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
"""Recursive include/exclude property filters.

A filter selects property names and may carry a nested filter per name that
applies to the object or list found under that property::

    PropertyFilter.of(["id", "name", {"lines": ["sku", "quantity"]}])
    PropertyFilter.of({"customer": {"address": None}})

An empty filter selects everything, in include and in exclude mode.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, TypeAlias

FilterSpec: TypeAlias = "PropertyFilter | Mapping[str, Any] | Iterable[Any] | str | None"


class PropertyFilter:
    """Immutable table of ``name -> nested filter or None``."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, PropertyFilter | None] | None = None) -> None:
        self._entries: dict[str, PropertyFilter | None] = dict(entries or {})

    @classmethod
    def of(cls, spec: FilterSpec) -> PropertyFilter:
        """Normalise names, mappings and lists mixing both into a filter.

        A name listed both bare and with a nested filter keeps the nested one.
        """
        if isinstance(spec, PropertyFilter):
            return spec
        if spec is None:
            return EMPTY_FILTER
        if isinstance(spec, str):
            return cls.single(spec)

        entries: dict[str, PropertyFilter | None] = {}
        items: Iterable[Any] = [spec] if isinstance(spec, Mapping) else spec
        for item in items:
            if isinstance(item, Mapping):
                for name, nested in item.items():
                    entries[str(name)] = None if nested is None else cls.of(nested)
            elif isinstance(item, str):
                entries.setdefault(item, None)
            else:
                raise TypeError(f"Invalid property filter entry: {item!r}")
        return cls(entries)

    @classmethod
    def single(cls, name: str) -> PropertyFilter:
        return cls({name: None})

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertyFilter):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(tuple(self._entries))

    def __repr__(self) -> str:
        return f"PropertyFilter({self._entries!r})"

    def skips(self, name: str, exclude: bool) -> bool:
        """Whether property *name* is filtered out.

        In include mode names that are not listed are skipped. In exclude mode
        listed names are skipped, unless they carry a nested filter: those are
        kept so the nested filter can exclude below them.
        """
        if not self._entries:
            return False
        if exclude:
            return name in self._entries and self._entries[name] is None
        return name not in self._entries

    def nested(self, name: str) -> PropertyFilter:
        """Filter for the value under *name*; empty when there is none."""
        return self._entries.get(name) or EMPTY_FILTER

    def single_name(self) -> str | None:
        """The only listed name of a one-entry filter."""
        if len(self._entries) == 1:
            return next(iter(self._entries))
        return None


EMPTY_FILTER = PropertyFilter()
