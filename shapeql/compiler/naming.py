# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""GraphQL naming rules for generated types and fields."""

import itertools
import logging
import re
from typing import Hashable, Iterator, Optional

logger = logging.getLogger(__name__)

INPUT_SUFFIX = "Input"

# Names taken by built-in scalars, custom scalars and root types
RESERVED_TYPE_NAMES = frozenset({
    "Query", "Mutation", "Subscription",
    "String", "Int", "Float", "Boolean", "ID",
    "JSON", "Long", "Timestamp", "Blob",
})

_INVALID_CHARS = re.compile(r"[^_0-9A-Za-z]")


def graphql_name(raw: str) -> str:
    """Coerce an arbitrary identifier into a valid GraphQL name.

    'runtime.sagemaker' -> 'runtime_sagemaker', '3dModel' -> '_3dModel'.
    Leading double underscores are reserved for introspection.
    """
    name = _INVALID_CHARS.sub("_", raw or "")
    if not name:
        return "_"
    if name[0].isdigit():
        name = "_" + name
    if name.startswith("__"):
        name = "_" + name.lstrip("_")
    return name


def type_name(parent_name: str, is_input: bool = False) -> str:
    """Name of the type generated for ``parent_name`` in input or output position."""
    name = graphql_name(parent_name)
    if name in RESERVED_TYPE_NAMES:
        name += "Object"
    return f"{name}{INPUT_SUFFIX}" if is_input else name


class TypeNameRegistry:
    """Hands out generated type names so that one name never means two shapes.

    Each name is owned by the first shape identity that claims it, typically
    ``(is_input, service, shape_name)``. Claiming the same context name for a
    different identity yields a qualified name instead, tried in order:

        <context>_<ShapeName>     Rules_LifecycleRule
        <context>_<service>       Rules_s3
        <context>_<n>             Rules_2

    One registry is shared by every service in a compilation.
    """

    def __init__(self):
        self._owners: dict[str, Hashable] = {}
        # qualified name -> the contextual name it would have had
        self.renames: dict[str, str] = {}

    def claim(
        self,
        parent_name: str,
        identity: Hashable,
        is_input: bool = False,
        shape_name: Optional[str] = None,
        service: Optional[str] = None,
    ) -> str:
        """Name for the type of ``identity`` reached from ``parent_name``."""
        base = type_name(parent_name, is_input)
        for candidate in self._candidates(parent_name, shape_name, service):
            name = type_name(candidate, is_input)
            owner = self._owners.setdefault(name, identity)
            if owner != identity:
                continue
            if name != base and name not in self.renames:
                logger.debug(f"Type name '{base}' is taken by another shape, using '{name}'")
                self.renames[name] = base
            return name
        raise AssertionError("unreachable")

    @staticmethod
    def _candidates(parent_name: str, shape_name: Optional[str], service: Optional[str]) -> Iterator[str]:
        yield parent_name
        if shape_name and shape_name != parent_name:
            yield f"{parent_name}_{shape_name}"
        if service:
            yield f"{parent_name}_{service}"
        for n in itertools.count(2):
            yield f"{parent_name}_{n}"


def derive_method_name(operation_name: str) -> str:
    """Backend method name for an operation: first character lowercased, rest untouched.

    'DescribeInstances' -> 'describeInstances', 'listTags' -> 'listTags'.
    """
    if not operation_name:
        return operation_name
    return operation_name[0].lower() + operation_name[1:]
