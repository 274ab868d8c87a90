# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Binding operations to resolvers that call the backend client.

Every input member becomes one argument. Scalar members are scalar
arguments; structure and list members are structured arguments typed by
their extracted input type, so nothing in the input shape is dropped.

The method each resolver calls is fixed at bind time: the derived method
name is captured in an ``attrgetter`` once, and the resolver only applies it
to whichever client the factory hands back.
"""

import logging
from operator import attrgetter
from typing import Any, Callable, Optional

from shapeql.backends.base import ClientFactory
from shapeql.compiler.extractor import PLACEHOLDER_FIELD
from shapeql.compiler.naming import derive_method_name, type_name
from shapeql.core.errors import UpstreamCallError
from shapeql.core.models import (
    ArgumentSpec,
    BoundEndpoint,
    ExtractedType,
    Operation,
    ServiceAPIDescription,
)

logger = logging.getLogger(__name__)


def build_argument_spec(input_type: Optional[ExtractedType]) -> dict[str, ArgumentSpec]:
    """One argument per field of the operation's top-level input type.

    A memberless input carries only the placeholder field, which is not a
    real parameter and yields no argument.
    """
    if input_type is None:
        return {}
    return {
        f.name: ArgumentSpec(
            name=f.name,
            type_name=f.target,
            required=f.required,
            is_list=f.is_list,
            is_scalar=f.is_scalar,
            source_name=f.source_name,
        )
        for f in input_type.fields
        if f is not PLACEHOLDER_FIELD
    }


def _strip_nulls(value: Any) -> Any:
    """Drop explicit nulls; backend parameter validation rejects None members."""
    if isinstance(value, dict):
        return {k: _strip_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_strip_nulls(v) for v in value]
    return value


def _error_code(error: Exception) -> Optional[str]:
    # botocore ClientError carries {"Error": {"Code": ...}} in .response
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        return (response.get("Error") or {}).get("Code")
    return None


def make_resolver(
    service: ServiceAPIDescription,
    operation_name: str,
    method_getter: Callable[[Any], Callable],
    client_factory: ClientFactory,
    argument_keys: Optional[dict[str, str]] = None,
) -> Callable:
    """Build the async resolver for one operation."""
    argument_keys = argument_keys or {}

    async def resolve(**args):
        params = {argument_keys.get(k, k): v for k, v in _strip_nulls(args).items()}
        try:
            client = client_factory.get_client(service.client_key)
            method = method_getter(client)
            return await method(**params)
        except UpstreamCallError:
            raise
        except Exception as e:
            logger.debug(f"{service.endpoint_namespace}.{operation_name} failed: {e}")
            raise UpstreamCallError(
                service.endpoint_namespace,
                operation_name,
                str(e),
                error_code=_error_code(e),
            ) from e

    resolve.__name__ = f"resolve_{operation_name}"
    return resolve


def bind_operation(
    service: ServiceAPIDescription,
    operation: Operation,
    client_factory: ClientFactory,
    input_type: Optional[ExtractedType] = None,
    result_type_name: Optional[str] = None,
) -> BoundEndpoint:
    """Produce the BoundEndpoint for one operation.

    ``input_type`` is the top-level extracted input type of the operation
    (``<Operation>Input``), or None when the operation takes no input.
    ``result_type_name`` is the name allocated for its output type; it
    defaults to the operation name.
    """
    method_name = derive_method_name(operation.name)
    argument_spec = build_argument_spec(input_type)
    argument_keys = {
        name: spec.source_name for name, spec in argument_spec.items() if spec.source_name
    }

    return BoundEndpoint(
        operation_name=operation.name,
        service_identifier=service.service_identifier,
        endpoint_namespace=service.endpoint_namespace,
        result_type_name=result_type_name or type_name(operation.name),
        method_name=method_name,
        resolver=make_resolver(
            service,
            operation.name,
            attrgetter(method_name),
            client_factory,
            argument_keys,
        ),
        argument_spec=argument_spec,
        has_output=bool(operation.output_shape),
    )
