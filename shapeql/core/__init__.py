# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Core models, configuration and errors."""

from shapeql.core.config import (
    Config,
    BackendConfig,
    CompilerConfig,
    DescriptionsConfig,
    ServerConfig,
)
from shapeql.core.errors import (
    ShapeQLError,
    DescriptionLoadError,
    UnknownShapeError,
    CompilationError,
    DuplicateTypeConflictError,
    UpstreamCallError,
)
from shapeql.core.models import (
    TypeKind,
    FieldSpec,
    ExtractedType,
    TypeConflict,
    Operation,
    ServiceAPIDescription,
    ArgumentSpec,
    BoundEndpoint,
)

__all__ = [
    "Config",
    "BackendConfig",
    "CompilerConfig",
    "DescriptionsConfig",
    "ServerConfig",
    "ShapeQLError",
    "DescriptionLoadError",
    "UnknownShapeError",
    "CompilationError",
    "DuplicateTypeConflictError",
    "UpstreamCallError",
    "TypeKind",
    "FieldSpec",
    "ExtractedType",
    "TypeConflict",
    "Operation",
    "ServiceAPIDescription",
    "ArgumentSpec",
    "BoundEndpoint",
]
