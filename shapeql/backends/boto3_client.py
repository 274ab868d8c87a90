# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""boto3-backed clients.

boto3 names client methods in snake_case (``describe_instances``) while the
resolvers call ``describeInstances``. AsyncServiceClient bridges the two with
a table built once per client from the service model, and runs each call in
a worker thread so the event loop is never blocked. Streaming response
bodies are read to bytes in that same thread.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

import boto3
from botocore import xform_name
from botocore.response import StreamingBody

from shapeql.backends.base import ClientFactory
from shapeql.compiler.naming import derive_method_name
from shapeql.core.config import BackendConfig

logger = logging.getLogger(__name__)


def boto3_service_name(service_identifier: str) -> str:
    """Best-effort botocore service name for a serviceId ('SageMaker Runtime' -> 'sagemaker-runtime')."""
    return service_identifier.strip().lower().replace(" ", "-")


def read_streaming_bodies(response: Any) -> Any:
    """Replace top-level StreamingBody values (S3 GetObject "Body") with their bytes.

    Blocking; call it off the event loop.
    """
    if not isinstance(response, dict):
        return response
    streams = [key for key, value in response.items() if isinstance(value, StreamingBody)]
    if not streams:
        return response
    response = dict(response)
    for key in streams:
        body = response[key]
        try:
            response[key] = body.read()
        finally:
            body.close()
    return response


class AsyncServiceClient:
    """Async, camelCase view of a boto3 client."""

    def __init__(self, client: Any):
        self._client = client
        self._methods: dict[str, Callable] = {}
        for operation_name in client.meta.service_model.operation_names:
            method = getattr(client, xform_name(operation_name))
            self._methods[derive_method_name(operation_name)] = self._wrap(method)

    @staticmethod
    def _wrap(method: Callable) -> Callable:
        def call_and_read(**params):
            return read_streaming_bodies(method(**params))

        async def call(**params):
            return await asyncio.to_thread(call_and_read, **params)
        return call

    @property
    def method_names(self) -> list[str]:
        return sorted(self._methods)

    def __getattr__(self, name: str) -> Callable:
        try:
            return self.__dict__["_methods"][name]
        except KeyError:
            raise AttributeError(f"Client has no operation method '{name}'") from None


class Boto3ClientFactory(ClientFactory):
    """Constructs one boto3 client per service and reuses it across requests.

    Configuration is explicit: region, profile, endpoint and credentials come
    from the BackendConfig passed in, never from process-wide state.
    """

    def __init__(self, config: Optional[BackendConfig] = None):
        self.config = config or BackendConfig()
        self._session: Optional[boto3.Session] = None
        self._clients: dict[str, AsyncServiceClient] = {}

    @property
    def version(self) -> str:
        return boto3.__version__

    @property
    def session(self) -> boto3.Session:
        """Lazy-initialize the boto3 session."""
        if self._session is None:
            session_kwargs = {}
            if self.config.profile_name:
                session_kwargs["profile_name"] = self.config.profile_name
            if self.config.region:
                session_kwargs["region_name"] = self.config.region
            self._session = boto3.Session(**session_kwargs)
        return self._session

    def _client_kwargs(self) -> dict:
        client_kwargs = {}
        if self.config.endpoint_url:
            client_kwargs["endpoint_url"] = self.config.endpoint_url
        if self.config.aws_access_key_id:
            client_kwargs["aws_access_key_id"] = self.config.aws_access_key_id
            client_kwargs["aws_secret_access_key"] = self.config.aws_secret_access_key
        if self.config.aws_session_token:
            client_kwargs["aws_session_token"] = self.config.aws_session_token
        return client_kwargs

    def get_client(self, service_identifier: str) -> AsyncServiceClient:
        client = self._clients.get(service_identifier)
        if client is None:
            service_name = boto3_service_name(service_identifier)
            logger.debug(f"Creating boto3 client for '{service_name}'")
            client = AsyncServiceClient(self.session.client(service_name, **self._client_kwargs()))
            self._clients[service_identifier] = client
        return client
