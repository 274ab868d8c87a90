# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Backend client factories used by the bound resolvers."""

from shapeql.backends.base import ClientFactory
from shapeql.backends.boto3_client import (
    AsyncServiceClient,
    Boto3ClientFactory,
    boto3_service_name,
    read_streaming_bodies,
)

__all__ = [
    "ClientFactory",
    "AsyncServiceClient",
    "Boto3ClientFactory",
    "boto3_service_name",
    "read_streaming_bodies",
]
