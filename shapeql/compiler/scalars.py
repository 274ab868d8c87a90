# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Custom scalars for description types that have no GraphQL built-in."""

import base64
from datetime import date, datetime
from typing import Any

from graphql import (
    GraphQLBoolean,
    GraphQLFloat,
    GraphQLInt,
    GraphQLScalarType,
    GraphQLString,
    IntValueNode,
    StringValueNode,
    value_from_ast_untyped,
)
from graphql.error import GraphQLError


def _parse_json_literal(value_node, variables=None) -> Any:
    return value_from_ast_untyped(value_node, variables)


GraphQLJSON = GraphQLScalarType(
    name="JSON",
    description="Opaque JSON value, passed through unchanged.",
    serialize=lambda value: value,
    parse_value=lambda value: value,
    parse_literal=_parse_json_literal,
)


def _serialize_timestamp(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (str, int, float)):
        return value
    raise GraphQLError(f"Timestamp cannot represent value: {value!r}")


def _parse_timestamp_literal(value_node, variables=None) -> Any:
    if isinstance(value_node, StringValueNode):
        return value_node.value
    if isinstance(value_node, IntValueNode):
        return int(value_node.value)
    raise GraphQLError("Timestamp must be an ISO-8601 string or epoch seconds")


GraphQLTimestamp = GraphQLScalarType(
    name="Timestamp",
    description="ISO-8601 date-time string (epoch seconds accepted on input).",
    serialize=_serialize_timestamp,
    parse_value=lambda value: value,
    parse_literal=_parse_timestamp_literal,
)


LONG_MIN = -(2 ** 63)
LONG_MAX = 2 ** 63 - 1


def _coerce_long(value: Any) -> int:
    if isinstance(value, bool):
        raise GraphQLError(f"Long cannot represent non-integer value: {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise GraphQLError(f"Long cannot represent non-integer value: {value!r}")
    if not LONG_MIN <= value <= LONG_MAX:
        raise GraphQLError(f"Long cannot represent value outside 64-bit range: {value!r}")
    return value


def _parse_long_literal(value_node, variables=None) -> int:
    if not isinstance(value_node, IntValueNode):
        raise GraphQLError("Long must be an integer literal")
    return _coerce_long(int(value_node.value))


GraphQLLong = GraphQLScalarType(
    name="Long",
    description="64-bit signed integer.",
    serialize=_coerce_long,
    parse_value=_coerce_long,
    parse_literal=_parse_long_literal,
)


def _serialize_blob(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, str):
        return value
    raise GraphQLError(f"Blob cannot represent value: {value!r}")


def _parse_blob(value: Any) -> bytes:
    if not isinstance(value, str):
        raise GraphQLError("Blob must be a base64-encoded string")
    return base64.b64decode(value, validate=True)


def _parse_blob_literal(value_node, variables=None) -> bytes:
    if not isinstance(value_node, StringValueNode):
        raise GraphQLError("Blob must be a base64-encoded string")
    return _parse_blob(value_node.value)


GraphQLBlob = GraphQLScalarType(
    name="Blob",
    description="Binary data, base64-encoded.",
    serialize=_serialize_blob,
    parse_value=_parse_blob,
    parse_literal=_parse_blob_literal,
)


SCALARS: dict[str, GraphQLScalarType] = {
    "String": GraphQLString,
    "Int": GraphQLInt,
    "Float": GraphQLFloat,
    "Long": GraphQLLong,
    "Boolean": GraphQLBoolean,
    "JSON": GraphQLJSON,
    "Timestamp": GraphQLTimestamp,
    "Blob": GraphQLBlob,
}
