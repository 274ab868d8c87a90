# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Exception types raised by the compiler and by bound resolvers."""

from typing import Optional


class ShapeQLError(Exception):
    """Base class for all shapeql errors."""


class DescriptionLoadError(ShapeQLError):
    """Raised when a service API description document cannot be read."""

    def __init__(self, source: str, message: str):
        super().__init__(f"Failed to load API description '{source}': {message}")
        self.source = source


class UnknownShapeError(ShapeQLError):
    """Raised when a shape reference names a shape absent from the table."""

    def __init__(self, shape_name: str, service: Optional[str] = None):
        where = f" in service '{service}'" if service else ""
        super().__init__(f"Unknown shape '{shape_name}'{where}")
        self.shape_name = shape_name
        self.service = service


class CompilationError(ShapeQLError):
    """Raised when the schema cannot be compiled (e.g. nothing matched the allow-list)."""


class DuplicateTypeConflictError(ShapeQLError):
    """Raised in strict mode when two different structures want the same type name."""

    def __init__(self, conflict):
        super().__init__(
            f"Type '{conflict.name}' was generated twice with different fields: "
            f"kept {conflict.kept_fields}, other {conflict.other_fields}"
        )
        self.conflict = conflict


class UpstreamCallError(ShapeQLError):
    """Raised when a backend call made by a resolver fails.

    Request scoped: the error is surfaced to the single caller of the
    resolver and never affects other in-flight requests.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        message: str,
        error_code: Optional[str] = None,
    ):
        super().__init__(f"{service}.{operation} failed: {message}")
        self.service = service
        self.operation = operation
        self.error_code = error_code
