# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Compiling service API descriptions into one GraphQL schema.

Usage:
    from shapeql.backends import Boto3ClientFactory
    from shapeql.catalog import load_botocore_descriptions
    from shapeql.compiler import compile_schema

    descriptions = load_botocore_descriptions(["ec2", "s3"])
    assembled = compile_schema(["ec2", "s3"], descriptions, Boto3ClientFactory())
    print(assembled.print_schema())

The result exposes one root field per service namespace, one field per
operation under it, and ``sdkVersion``:

    { ec2 { DescribeInstances { Reservations { Instances { InstanceId } } } } }
"""

import logging
from typing import Iterable, Optional

from shapeql.backends.base import ClientFactory
from shapeql.catalog.descriptions import select_descriptions
from shapeql.compiler.binder import bind_operation
from shapeql.compiler.dedupe import dedupe_types
from shapeql.compiler.extractor import PLACEHOLDER_FIELD, TypeExtractor
from shapeql.compiler.naming import TypeNameRegistry, graphql_name, type_name
from shapeql.compiler.schema_builder import AssembledSchema, assemble_schema
from shapeql.core.errors import CompilationError, DuplicateTypeConflictError
from shapeql.core.models import (
    BoundEndpoint,
    ExtractedType,
    FieldSpec,
    ServiceAPIDescription,
    TypeConflict,
    TypeKind,
)

logger = logging.getLogger(__name__)

# No-output markers are all `{ok: String}` and share one name owner
NO_OUTPUT_IDENTITY = ("no-output",)


def no_output_type(operation_name: str, name: Optional[str] = None) -> ExtractedType:
    """Marker result type for operations that declare no output."""
    return ExtractedType(
        name=name or type_name(operation_name),
        kind=TypeKind.OUTPUT,
        fields=(PLACEHOLDER_FIELD,),
    )


def extract_service(
    service: ServiceAPIDescription,
    client_factory: ClientFactory,
    registry: Optional[TypeNameRegistry] = None,
) -> tuple[list[ExtractedType], list[BoundEndpoint]]:
    """Extract every operation's types and bind its endpoint.

    The returned type list ends with the service entry-point type, named
    after the endpoint namespace, with one field per operation.
    """
    namespace = service.endpoint_namespace
    extractor = TypeExtractor(service.shapes, namespace, registry)
    registry = extractor.registry
    types: list[ExtractedType] = []
    endpoints: list[BoundEndpoint] = []

    for operation in service.operations.values():
        input_types = extractor.extract(operation.name, operation.input_shape, is_input=True)
        types.extend(input_types)

        result_type_name, output_types = extractor.extract_named(operation.name, operation.output_shape)
        if output_types:
            types.extend(output_types)
        else:
            result_type_name = registry.claim(operation.name, NO_OUTPUT_IDENTITY, service=namespace)
            types.append(no_output_type(operation.name, result_type_name))

        endpoints.append(bind_operation(
            service,
            operation,
            client_factory,
            input_type=input_types[0] if input_types else None,
            result_type_name=result_type_name,
        ))

    entry_fields = tuple(
        FieldSpec(
            name=graphql_name(endpoint.operation_name),
            target=endpoint.result_type_name,
            is_scalar=False,
        )
        for endpoint in endpoints
    )
    types.append(ExtractedType(
        name=registry.claim(namespace, ("service", namespace)),
        kind=TypeKind.OUTPUT,
        fields=entry_fields or (PLACEHOLDER_FIELD,),
    ))

    logger.debug(
        f"Extracted {len(types)} types for {namespace} "
        f"({len(endpoints)} operations)"
    )
    return types, endpoints


def renamed_type_conflicts(
    registry: TypeNameRegistry,
    types: Iterable[ExtractedType],
) -> list[TypeConflict]:
    """One TypeConflict per qualified name whose structure differs from the base type."""
    by_name = {t.name: t for t in types}
    conflicts = []
    for renamed_to, base in registry.renames.items():
        kept = by_name.get(base)
        renamed = by_name.get(renamed_to)
        if kept is None or renamed is None:
            continue
        if kept.signature() == renamed.signature():
            continue
        conflicts.append(TypeConflict(
            name=base,
            kept_fields=kept.field_names(),
            other_fields=renamed.field_names(),
            renamed_to=renamed_to,
        ))
    return conflicts


def compile_schema(
    allowed_services: Iterable[str],
    descriptions: Iterable[ServiceAPIDescription],
    client_factory: ClientFactory,
    client_version: Optional[str] = None,
    strict: bool = False,
) -> AssembledSchema:
    """Compile the allow-listed descriptions into an AssembledSchema.

    Args:
        allowed_services: Endpoint namespaces to expose. Empty means only
            the ``sdkVersion`` field is served.
        descriptions: Loaded descriptions; several may share a namespace,
            the highest api_version is kept.
        client_factory: Builds backend clients for the resolvers.
        client_version: Reported by ``sdkVersion``; defaults to the
            factory's library version.
        strict: Raise DuplicateTypeConflictError when two different
            structures want the same type name, instead of giving the
            later one a qualified name.

    Raises:
        CompilationError: allowed_services is non-empty and matched nothing.
        UnknownShapeError: a description references a missing shape.
    """
    allowed = list(allowed_services)
    services = select_descriptions(descriptions, allowed)

    if allowed and not services:
        raise CompilationError(
            f"None of the configured services {allowed} matched a loaded API description"
        )
    missing = set(allowed) - {s.endpoint_namespace for s in services}
    if missing:
        logger.warning(f"No API description found for: {sorted(missing)}")

    registry = TypeNameRegistry()
    all_types: list[ExtractedType] = []
    endpoints: dict[str, list[BoundEndpoint]] = {}
    service_types: dict[str, str] = {}
    bindings: dict[tuple[str, str], BoundEndpoint] = {}

    for service in services:
        logger.info(
            f"Compiling {service.endpoint_namespace} ({service.service_identifier}, "
            f"API version {service.api_version})"
        )
        types, service_endpoints = extract_service(service, client_factory, registry)
        all_types.extend(types)
        endpoints[service.endpoint_namespace] = service_endpoints

        entry_type = types[-1].name
        service_types[graphql_name(service.endpoint_namespace)] = entry_type
        for endpoint in service_endpoints:
            bindings[(entry_type, graphql_name(endpoint.operation_name))] = endpoint

    conflicts: list[TypeConflict] = []
    types = dedupe_types(all_types, conflicts=conflicts, strict=strict)

    for conflict in renamed_type_conflicts(registry, types):
        if strict:
            raise DuplicateTypeConflictError(conflict)
        logger.warning(
            f"Type '{conflict.name}' is used by shapes with different fields; "
            f"{list(conflict.other_fields)} exposed as '{conflict.renamed_to}'"
        )
        conflicts.append(conflict)

    logger.info(
        f"Compiled {len(services)} services: {len(types)} types "
        f"({len(all_types) - len(types)} duplicates removed, "
        f"{len(registry.renames)} names qualified, {len(conflicts)} conflicts)"
    )

    version = client_version if client_version is not None else client_factory.version
    schema = assemble_schema(types, service_types, bindings, version)

    return AssembledSchema(
        schema=schema,
        services=services,
        types=types,
        endpoints=endpoints,
        conflicts=conflicts,
        client_version=version,
    )
