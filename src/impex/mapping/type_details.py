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
"""Type facts derived from a property's declared type."""

from __future__ import annotations

import types
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from typing import Any, Literal, Self, Union, get_args, get_origin

from impex.kernel.exceptions import AmbiguousTypeException
from impex.mapping.plain import entity_name

BUILTIN_TYPES: tuple[type, ...] = (
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    bool,
    list,
    tuple,
    dict,
    set,
    frozenset,
)

ARRAY_TYPES: tuple[type, ...] = (list, tuple, dict, set, frozenset)


@dataclass(frozen=True)
class TypeDetails:
    """What a property's declared type admits.

    Attributes:
        allows_array: An array (list, tuple, dict or set) is acceptable.
        allows_null: ``None`` is acceptable.
        is_builtin: The type is a builtin scalar or array type.
        is_union: The type lists several non-None alternatives.
        typename: Name of a builtin type.
        target: The class (or interface) values are built as.
        item_class: Element class taken from a generic collection type.
    """

    allows_array: bool = False
    allows_null: bool = False
    is_builtin: bool = False
    is_union: bool = False
    typename: str | None = None
    target: type | None = None
    item_class: type | None = None

    @property
    def classname(self) -> str | None:
        return entity_name(self.target) if self.target is not None else None

    @property
    def is_collection(self) -> bool:
        target = self.target
        return (
            target is not None
            and issubclass(target, Collection)
            and not issubclass(target, (str, bytes, bytearray, Mapping))
        )


UNTYPED = TypeDetails(allows_array=True, allows_null=True)


def _is_builtin(tp: Any) -> bool:
    return tp in BUILTIN_TYPES or tp is Literal


def _base(tp: Any, self_type: type) -> Any:
    if tp is Self:
        return self_type
    origin = get_origin(tp)
    return origin if origin is not None else tp


def _item_class(tp: Any, self_type: type) -> type | None:
    args = get_args(tp)
    if not args:
        return None
    item = self_type if args[0] is Self else args[0]
    return item if isinstance(item, type) else None


def _named(self_type: type, tp: Any, allows_null: bool) -> TypeDetails:
    if tp is Any:
        return UNTYPED

    base = _base(tp, self_type)
    if _is_builtin(base):
        typename = "Literal" if get_origin(tp) is Literal else base.__name__
        return TypeDetails(
            allows_array=base in ARRAY_TYPES,
            allows_null=allows_null,
            is_builtin=True,
            typename=typename,
        )

    target = base if isinstance(base, type) else None
    item_class = _item_class(tp, self_type) if target is not None and issubclass(target, Collection) else None
    return TypeDetails(allows_null=allows_null, target=target, item_class=item_class)


def derive_type_details(owner: type, name: str, annotation: Any, self_type: type | None = None) -> TypeDetails:
    """Derive the type facts of property *name* declared on *owner*.

    ``X | None`` counts as the named type ``X`` accepting ``None``. A union of
    several alternatives may contain at most one class; builtin alternatives
    are skipped, array alternatives set ``allows_array``. ``Self`` stands for
    *self_type*, the class that declared the annotation, defaulting to *owner*.

    Raises:
        AmbiguousTypeException: the union names more than one class.
    """
    if self_type is None:
        self_type = owner
    if annotation is Any:
        return UNTYPED

    if get_origin(annotation) not in (Union, types.UnionType):
        return _named(self_type, annotation, allows_null=annotation is None)

    alternatives = [a for a in get_args(annotation) if a is not type(None)]
    allows_null = len(alternatives) < len(get_args(annotation))

    if len(alternatives) == 1:
        return _named(self_type, alternatives[0], allows_null)

    allows_array = False
    target: type | None = None
    for alternative in alternatives:
        if alternative is Any:
            return UNTYPED
        base = _base(alternative, self_type)
        if base in ARRAY_TYPES:
            allows_array = True
            continue
        if _is_builtin(base) or not isinstance(base, type):
            continue
        if target is not None:
            raise AmbiguousTypeException(
                f"Cannot import object, found ambiguous union type: {annotation} "
                f"on {entity_name(owner)}.{name}",
                context={"entity": entity_name(owner), "property": name, "type": str(annotation)},
            )
        target = base

    return TypeDetails(allows_array=allows_array, allows_null=allows_null, is_union=True, target=target)
