# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Assembling extracted types and bound endpoints into a graphql-core schema.

Fields are declared as thunks and types are looked up by name, so a type may
refer to itself or to a type declared later; this is how the cyclic shape
graphs that extraction cut short end up as cyclic GraphQL types.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLString,
    print_schema,
)

from shapeql.compiler.extractor import PLACEHOLDER_FIELD
from shapeql.compiler.scalars import SCALARS, GraphQLJSON
from shapeql.core.errors import CompilationError
from shapeql.core.models import (
    BoundEndpoint,
    ExtractedType,
    FieldSpec,
    ServiceAPIDescription,
    TypeConflict,
)

logger = logging.getLogger(__name__)

SDK_VERSION_FIELD = "sdkVersion"


@dataclass
class AssembledSchema:
    """Result of compilation: the executable schema plus what went into it."""
    schema: GraphQLSchema
    services: list[ServiceAPIDescription] = field(default_factory=list)
    types: list[ExtractedType] = field(default_factory=list)
    endpoints: dict[str, list[BoundEndpoint]] = field(default_factory=dict)
    conflicts: list[TypeConflict] = field(default_factory=list)
    client_version: str = ""

    def print_schema(self) -> str:
        """SDL of the assembled schema."""
        return print_schema(self.schema)

    def get_endpoint(self, namespace: str, operation_name: str) -> Optional[BoundEndpoint]:
        for endpoint in self.endpoints.get(namespace, []):
            if endpoint.operation_name == operation_name:
                return endpoint
        return None


def _key_resolver(key: str):
    def resolve(source, info, **args):
        return source.get(key) if isinstance(source, dict) else getattr(source, key, None)
    return resolve


def _placeholder_resolver(source, info, **args):
    if isinstance(source, dict) and source.get(PLACEHOLDER_FIELD.name) is not None:
        return source[PLACEHOLDER_FIELD.name]
    return "ok"


def _root_resolver(source, info, **args):
    return {}


def _endpoint_resolver(endpoint: BoundEndpoint):
    def resolve(source, info, **args):
        return endpoint.resolver(**args)
    resolve.__name__ = endpoint.resolver.__name__
    return resolve


class SchemaBuilder:
    """Builds GraphQL types on demand from ExtractedTypes, by name.

    ``bindings`` maps ``(type name, field name)`` to the endpoint whose
    resolver serves that field; those fields get arguments and a resolver,
    all others resolve from the parent dict.
    """

    def __init__(
        self,
        types: list[ExtractedType],
        bindings: Optional[dict[tuple[str, str], BoundEndpoint]] = None,
    ):
        self._specs = {t.name: t for t in types}
        self._bindings = bindings or {}
        self._built: dict[str, GraphQLNamedType] = {}

    def named_type(self, name: str) -> GraphQLNamedType:
        if name in SCALARS:
            return SCALARS[name]
        built = self._built.get(name)
        if built is None:
            spec = self._specs.get(name)
            if spec is None:
                raise CompilationError(f"Type '{name}' is referenced but was never generated")
            built = self._build(spec)
        return built

    def all_types(self) -> list[GraphQLNamedType]:
        return [self.named_type(name) for name in self._specs]

    def _build(self, spec: ExtractedType) -> GraphQLNamedType:
        if spec.is_input:
            built = GraphQLInputObjectType(
                spec.name,
                fields=lambda: {f.name: self._input_field(f) for f in spec.fields},
            )
        else:
            built = GraphQLObjectType(
                spec.name,
                fields=lambda: {f.name: self._output_field(spec, f) for f in spec.fields},
            )
        self._built[spec.name] = built
        return built

    def _target(self, f: FieldSpec, owner: str, want_input: bool) -> GraphQLNamedType:
        """Named type of a field, degraded to JSON if the name belongs to the wrong kind."""
        if f.is_scalar:
            return SCALARS.get(f.target, GraphQLJSON)
        spec = self._specs.get(f.target)
        if spec is not None and spec.is_input != want_input:
            logger.warning(
                f"{owner}.{f.name}: '{f.target}' is an {spec.kind.value} type here, exposing as JSON"
            )
            return GraphQLJSON
        return self.named_type(f.target)

    @staticmethod
    def _wrap(named: GraphQLNamedType, is_list: bool, required: bool):
        wrapped = GraphQLList(named) if is_list else named
        return GraphQLNonNull(wrapped) if required else wrapped

    def _input_field(self, f: FieldSpec) -> GraphQLInputField:
        target = self._target(f, "input", want_input=True)
        return GraphQLInputField(
            self._wrap(target, f.is_list, f.required),
            out_name=f.source_name,
        )

    def _output_field(self, owner: ExtractedType, f: FieldSpec) -> GraphQLField:
        endpoint = self._bindings.get((owner.name, f.name))
        if endpoint is not None:
            return self._endpoint_field(endpoint)

        target = self._target(f, owner.name, want_input=False)
        if owner.fields == (PLACEHOLDER_FIELD,):
            resolve = _placeholder_resolver
        elif f.source_name:
            resolve = _key_resolver(f.key)
        else:
            resolve = None
        return GraphQLField(self._wrap(target, f.is_list, f.required), resolve=resolve)

    def _endpoint_field(self, endpoint: BoundEndpoint) -> GraphQLField:
        args = {}
        for name, spec in endpoint.argument_spec.items():
            if spec.is_scalar:
                named = SCALARS.get(spec.type_name, GraphQLJSON)
            else:
                named = self.named_type(spec.type_name)
            args[name] = GraphQLArgument(self._wrap(named, spec.is_list, spec.required))
        return GraphQLField(
            self.named_type(endpoint.result_type_name),
            args=args,
            resolve=_endpoint_resolver(endpoint),
        )


def assemble_schema(
    types: list[ExtractedType],
    service_types: dict[str, str],
    bindings: dict[tuple[str, str], BoundEndpoint],
    client_version: str,
) -> GraphQLSchema:
    """Build the executable schema.

    ``service_types`` maps each root field name to its service entry-point
    type. The root ``Query`` also carries ``sdkVersion``.
    """
    builder = SchemaBuilder(types, bindings)

    query_fields = {
        SDK_VERSION_FIELD: GraphQLField(
            GraphQLString,
            description="Version of the backend client library.",
            resolve=lambda source, info: client_version,
        ),
    }
    for field_name, service_type in service_types.items():
        query_fields[field_name] = GraphQLField(
            builder.named_type(service_type),
            resolve=_root_resolver,
        )

    return GraphQLSchema(
        query=GraphQLObjectType("Query", query_fields),
        types=builder.all_types(),
    )
