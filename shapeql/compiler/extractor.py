# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Type extraction: turning one shape into named GraphQL type definitions.

The emitted type is named after the *context* it is reached from, not after
the shape: an operation's output is named after the operation, and a nested
structure after the member that holds it. Two operations referencing the
same named shape therefore get independently named types, which the
deduplicator later collapses when the names coincide.

Contexts are not unique, so names are handed out by a TypeNameRegistry.
When a member name is already taken by a different shape, the new type gets
a qualified name (``Rules_LifecycleRule``) and the field points at it.

Example:
    shapes = {
        "Reservation": {"type": "structure", "members": {"InstanceId": {"type": "string"}}},
    }
    output = {
        "type": "structure",
        "members": {"Reservations": {"type": "list", "member": {"shape": "Reservation"}}},
    }
    extract_types("DescribeInstances", output, shapes)
    # [DescribeInstances{Reservations: [Reservations]}, Reservations{InstanceId: String}]
"""

import logging
from typing import Hashable, Mapping, Optional

from shapeql.catalog.shapes import (
    LIST,
    OPAQUE_SCALAR,
    STRUCTURE,
    dereference_named,
    scalar_for,
    shape_type,
)
from shapeql.compiler.naming import TypeNameRegistry, graphql_name
from shapeql.core.models import ExtractedType, FieldSpec, TypeKind

logger = logging.getLogger(__name__)

PLACEHOLDER_FIELD = FieldSpec(name="ok", target="String")


class TypeExtractor:
    """Recursive shape walker for one service's shape table.

    Expansions currently on the stack are tracked by allocated type name.
    Re-entering an expansion stops the recursion: the outer call is already
    declaring that type, so the inner field simply refers to it by name.
    This is what makes self-referential and mutually-referential shape graphs
    terminate.

    Pass a shared ``registry`` when the types of several services end up in
    one schema.
    """

    def __init__(
        self,
        shapes: Mapping[str, dict],
        service: Optional[str] = None,
        registry: Optional[TypeNameRegistry] = None,
    ):
        self.shapes = shapes
        self.service = service
        self.registry = registry if registry is not None else TypeNameRegistry()
        self._in_progress: set[str] = set()

    def extract(self, parent_name: str, shape: Optional[dict], is_input: bool = False) -> list[ExtractedType]:
        """Extract the type for ``shape`` and every nested type it needs.

        Returns the type for this level first, followed by the nested types
        collected while walking its members. Scalars and absent shapes
        produce no types.
        """
        return self.extract_named(parent_name, shape, is_input)[1]

    def extract_named(
        self,
        parent_name: str,
        shape: Optional[dict],
        is_input: bool = False,
    ) -> tuple[Optional[str], list[ExtractedType]]:
        """Like extract, also returning the name allocated for this level.

        The name is None when ``shape`` is absent or not a structure. On a
        cycle the name is returned with no types.
        """
        if not shape:
            return None, []

        shape_name, shape = dereference_named(shape, self.shapes, self.service)
        kind = shape_type(shape)
        if kind == LIST:
            return self.extract_named(parent_name, shape.get("member"), is_input)
        if kind != STRUCTURE:
            return None, []

        name = self.registry.claim(
            parent_name,
            self._identity(shape_name, shape, is_input),
            is_input=is_input,
            shape_name=shape_name,
            service=self.service,
        )
        if name in self._in_progress:
            logger.debug(f"Cycle at '{name}', referring to the enclosing type by name")
            return name, []

        self._in_progress.add(name)
        try:
            fields, nested = self._extract_members(shape, is_input)
        finally:
            self._in_progress.discard(name)

        current = ExtractedType(
            name=name,
            kind=TypeKind.INPUT if is_input else TypeKind.OUTPUT,
            fields=tuple(fields) or (PLACEHOLDER_FIELD,),
        )
        return name, [current, *nested]

    def _identity(self, shape_name: Optional[str], shape: dict, is_input: bool) -> Hashable:
        if shape_name:
            return (is_input, self.service, shape_name)
        # Inline shapes are told apart by the dict itself
        return (is_input, self.service, id(shape))

    def _extract_members(self, shape: dict, is_input: bool) -> tuple[list[FieldSpec], list[ExtractedType]]:
        required = set(shape.get("required") or ())
        fields = []
        nested = []

        for member_name, member in (shape.get("members") or {}).items():
            field, member_types = self._member_field(
                member_name, member, member_name in required, is_input
            )
            fields.append(field)
            nested.extend(member_types)

        return fields, nested

    def _member_field(
        self,
        member_name: str,
        member: dict,
        required: bool,
        is_input: bool,
    ) -> tuple[FieldSpec, list[ExtractedType]]:
        name = graphql_name(member_name)
        source_name = member_name if name != member_name else None
        _, concrete = dereference_named(member or {}, self.shapes, self.service)
        kind = shape_type(concrete)

        if kind == STRUCTURE:
            target, types = self.extract_named(member_name, member, is_input)
            field = FieldSpec(name, target, required, is_scalar=False, source_name=source_name)
            return field, types

        if kind == LIST:
            element = concrete.get("member") or {}
            _, element_concrete = dereference_named(element, self.shapes, self.service)
            element_kind = shape_type(element_concrete)
            if element_kind == STRUCTURE:
                target, types = self.extract_named(member_name, element, is_input)
                field = FieldSpec(
                    name, target, required,
                    is_list=True, is_scalar=False, source_name=source_name,
                )
                return field, types
            # Lists of lists are passed through untyped
            target = OPAQUE_SCALAR if element_kind == LIST else scalar_for(element_concrete)
            return FieldSpec(name, target, required, is_list=True, source_name=source_name), []

        return FieldSpec(name, scalar_for(concrete), required, source_name=source_name), []


def extract_types(
    parent_name: str,
    shape: Optional[dict],
    shapes: Mapping[str, dict],
    is_input: bool = False,
    service: Optional[str] = None,
) -> list[ExtractedType]:
    """Extract the types for one shape. See TypeExtractor.extract."""
    return TypeExtractor(shapes, service).extract(parent_name, shape, is_input)
