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
"""Annotation-based metadata provider.

Reads directives from :data:`typing.Annotated` class annotations. Only this
module introspects classes; everything above it works on
:class:`DeclaredProperty` records.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Annotated, Any, ClassVar, TypeVar, get_args, get_origin, get_type_hints

from impex.kernel.exceptions import SchemaException
from impex.mapping.plain import entity_name

D = TypeVar("D")


@dataclass(frozen=True)
class DeclaredProperty:
    """A class-level annotation with its directive metadata stripped off.

    Attributes:
        name: Property name.
        annotation: Declared type without the ``Annotated`` wrapper.
        directives: ``Annotated`` metadata, in declaration order.
        owner: The class whose body declares the annotation.
    """

    name: str
    annotation: Any
    directives: tuple[Any, ...] = ()
    owner: type | None = field(default=None, compare=False)

    def directives_of(self, kind: type[D]) -> list[D]:
        """All attached directives that are instances of *kind*."""
        return [d for d in self.directives if isinstance(d, kind)]


class AnnotatedMetadataProvider:
    """Collects declared properties from ``get_type_hints(include_extras=True)``.

    Base-class annotations come first, each class in declaration order.
    ``ClassVar`` annotations are not properties.
    """

    def declared_properties(self, cls: type) -> list[DeclaredProperty]:
        try:
            hints = get_type_hints(cls, include_extras=True)
        except (NameError, TypeError) as exc:
            raise SchemaException(
                f"Cannot read the type hints of {entity_name(cls)}: {exc}",
                context={"entity": entity_name(cls)},
            ) from exc

        properties: list[DeclaredProperty] = []
        for name, hint in hints.items():
            directives: tuple[Any, ...] = ()
            if get_origin(hint) is Annotated:
                hint, *metadata = get_args(hint)
                directives = tuple(metadata)
            if hint is ClassVar or get_origin(hint) is ClassVar:
                continue
            properties.append(DeclaredProperty(name, hint, directives, _declaring_class(cls, name)))
        return properties


def _declaring_class(cls: type, name: str) -> type:
    for klass in cls.__mro__:
        if name in inspect.get_annotations(klass):
            return klass
    return cls
