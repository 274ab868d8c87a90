# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Service API descriptions: loading, version selection and shape lookup."""

from shapeql.catalog.descriptions import (
    load_description_file,
    load_descriptions_from_dir,
    load_botocore_descriptions,
    load_descriptions,
    select_descriptions,
    version_key,
)
from shapeql.catalog.shapes import (
    SCALAR_TYPES,
    OPAQUE_SCALAR,
    resolve_shape,
    dereference,
    dereference_named,
    scalar_for,
)

__all__ = [
    "load_description_file",
    "load_descriptions_from_dir",
    "load_botocore_descriptions",
    "load_descriptions",
    "select_descriptions",
    "version_key",
    "SCALAR_TYPES",
    "OPAQUE_SCALAR",
    "resolve_shape",
    "dereference",
    "dereference_named",
    "scalar_for",
]
