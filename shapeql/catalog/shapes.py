# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Shape lookup and scalar classification.

A shape is the raw dict from the description document. Three forms matter
here:

    {"shape": "InstanceList"}                        reference
    {"type": "structure", "members": {...}}          structure
    {"type": "list", "member": {"shape": "..."}}     list

anything else is a scalar, classified by its ``type`` tag.
"""

from typing import Mapping, Optional

from shapeql.core.errors import UnknownShapeError


# Description type tag -> GraphQL scalar name
SCALAR_TYPES: dict[str, str] = {
    "string": "String",
    "character": "String",
    "integer": "Int",
    "long": "Long",  # GraphQL Int is 32-bit; AWS longs are not
    "float": "Float",
    "double": "Float",
    "boolean": "Boolean",
    "timestamp": "Timestamp",
    "blob": "Blob",
    "map": "JSON",
}

# Fallback for unknown or missing tags
OPAQUE_SCALAR = "JSON"

STRUCTURE = "structure"
LIST = "list"


def resolve_shape(ref: str, shapes: Mapping[str, dict], service: Optional[str] = None) -> dict:
    """Look up a named shape. Raises UnknownShapeError if it is missing."""
    try:
        return shapes[ref]
    except KeyError:
        raise UnknownShapeError(ref, service) from None


def is_reference(shape: Optional[dict]) -> bool:
    return bool(shape) and "shape" in shape


def dereference_named(
    shape: dict, shapes: Mapping[str, dict], service: Optional[str] = None
) -> tuple[Optional[str], dict]:
    """Follow references to a concrete shape, returning ``(shape_name, shape)``.

    ``shape_name`` is the last name followed, or None for an inline shape.
    """
    name = None
    seen = set()
    while is_reference(shape):
        name = shape["shape"]
        if name in seen:
            # A ring of bare references never reaches a concrete shape
            raise UnknownShapeError(name, service)
        seen.add(name)
        shape = resolve_shape(name, shapes, service)
    return name, shape


def dereference(shape: dict, shapes: Mapping[str, dict], service: Optional[str] = None) -> dict:
    """Follow references until a concrete (non-reference) shape is reached."""
    return dereference_named(shape, shapes, service)[1]


def shape_type(shape: dict) -> Optional[str]:
    """Type tag of a concrete shape, inferring structure/list from its keys."""
    tag = shape.get("type")
    if tag:
        return tag
    if "members" in shape:
        return STRUCTURE
    if "member" in shape:
        return LIST
    return None


def is_scalar_shape(shape: dict) -> bool:
    return shape_type(shape) not in (STRUCTURE, LIST)


def scalar_for(shape: dict) -> str:
    """GraphQL scalar name for a concrete scalar shape."""
    return SCALAR_TYPES.get(shape_type(shape), OPAQUE_SCALAR)
