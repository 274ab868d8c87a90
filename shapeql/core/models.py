# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Core data structures shared by the loader, the compiler and the server.

Shapes themselves stay plain dicts exactly as they appear in the service
description document; everything produced by compilation is an immutable
dataclass.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Optional


class TypeKind(Enum):
    """Position a type is generated for."""
    INPUT = "input"
    OUTPUT = "output"


@dataclass(frozen=True)
class FieldSpec:
    """One field of an extracted type.

    ``target`` is a scalar name (``String``, ``JSON``...) when ``is_scalar``
    is set, otherwise the name of another extracted type. ``source_name`` is
    the member name in the description when it had to be changed to form a
    valid GraphQL name.
    """
    name: str
    target: str
    required: bool = False
    is_list: bool = False
    is_scalar: bool = True
    source_name: Optional[str] = None

    @property
    def key(self) -> str:
        """Member name used in backend requests and responses."""
        return self.source_name or self.name


@dataclass(frozen=True)
class ExtractedType:
    """A named object/input type produced by extraction. Identity is the name."""
    name: str
    kind: TypeKind
    fields: tuple[FieldSpec, ...]

    @property
    def is_input(self) -> bool:
        return self.kind is TypeKind.INPUT

    def signature(self) -> tuple:
        """Structural identity used to detect same-named but different types."""
        return (self.kind, self.fields)

    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


@dataclass(frozen=True)
class TypeConflict:
    """Two structures that wanted the same type name.

    ``renamed_to`` is the qualified name the other structure was given, or
    None when it was dropped in favour of the kept one.
    """
    name: str
    kept_fields: tuple[str, ...]
    other_fields: tuple[str, ...]
    renamed_to: Optional[str] = None


@dataclass
class Operation:
    """A named operation with optional input and output shapes."""
    name: str
    input_shape: Optional[dict] = None
    output_shape: Optional[dict] = None


@dataclass
class ServiceAPIDescription:
    """One service API description document.

    ``operations`` and ``shapes`` are wrapped read-only on construction; the
    compiler never mutates a loaded description.
    """
    service_identifier: str
    endpoint_namespace: str
    api_version: str
    operations: Mapping[str, Operation]
    shapes: Mapping[str, dict]
    client_name: Optional[str] = None  # botocore service name, when known
    source: Optional[str] = None

    def __post_init__(self):
        self.operations = MappingProxyType(dict(self.operations))
        self.shapes = MappingProxyType(dict(self.shapes))

    @property
    def client_key(self) -> str:
        """Identifier handed to the client factory."""
        return self.client_name or self.service_identifier

    @classmethod
    def from_document(
        cls,
        document: dict,
        client_name: Optional[str] = None,
        source: Optional[str] = None,
    ) -> "ServiceAPIDescription":
        """Build a description from a parsed ``{metadata, operations, shapes}`` document."""
        metadata = document.get("metadata") or {}
        namespace = metadata.get("endpointPrefix")
        if not namespace:
            raise ValueError("metadata.endpointPrefix is required")

        operations = {}
        for name, op in (document.get("operations") or {}).items():
            operations[name] = Operation(
                name=op.get("name", name),
                input_shape=op.get("input"),
                output_shape=op.get("output"),
            )

        return cls(
            service_identifier=metadata.get("serviceId") or namespace,
            endpoint_namespace=namespace,
            api_version=str(metadata.get("apiVersion", "")),
            operations=operations,
            shapes=document.get("shapes") or {},
            client_name=client_name,
            source=source,
        )


@dataclass(frozen=True)
class ArgumentSpec:
    """Argument of an operation field, derived from one input member."""
    name: str
    type_name: str
    required: bool = False
    is_list: bool = False
    is_scalar: bool = True
    source_name: Optional[str] = None

    @property
    def key(self) -> str:
        return self.source_name or self.name


@dataclass
class BoundEndpoint:
    """An operation bound to an async resolver that calls the backend."""
    operation_name: str
    service_identifier: str
    endpoint_namespace: str
    result_type_name: str
    method_name: str
    resolver: Callable[..., Awaitable[Any]]
    argument_spec: dict[str, ArgumentSpec] = field(default_factory=dict)
    has_output: bool = True
