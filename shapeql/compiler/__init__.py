# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Shape-graph to GraphQL schema compiler."""

from shapeql.compiler.naming import TypeNameRegistry, derive_method_name, graphql_name, type_name
from shapeql.compiler.extractor import TypeExtractor, extract_types, PLACEHOLDER_FIELD
from shapeql.compiler.dedupe import dedupe_types
from shapeql.compiler.binder import bind_operation, build_argument_spec
from shapeql.compiler.schema_builder import AssembledSchema, SchemaBuilder, assemble_schema
from shapeql.compiler.compiler import compile_schema, extract_service

__all__ = [
    "derive_method_name",
    "graphql_name",
    "type_name",
    "TypeNameRegistry",
    "TypeExtractor",
    "extract_types",
    "PLACEHOLDER_FIELD",
    "dedupe_types",
    "bind_operation",
    "build_argument_spec",
    "AssembledSchema",
    "SchemaBuilder",
    "assemble_schema",
    "compile_schema",
    "extract_service",
]
