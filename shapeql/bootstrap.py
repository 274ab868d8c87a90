# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Startup wiring: config -> descriptions -> client factory -> compiled schema."""

import logging
from typing import Optional

from shapeql.backends import Boto3ClientFactory, ClientFactory
from shapeql.catalog.descriptions import load_descriptions
from shapeql.compiler import AssembledSchema, compile_schema
from shapeql.core.config import Config

logger = logging.getLogger(__name__)


def compile_from_config(
    config: Config,
    client_factory: Optional[ClientFactory] = None,
) -> AssembledSchema:
    """Load descriptions and compile the configured services.

    Errors are not caught: a process must never serve a partially
    compiled schema.
    """
    descriptions = load_descriptions(config)
    client_factory = client_factory or Boto3ClientFactory(config.backend)
    return compile_schema(
        config.services,
        descriptions,
        client_factory,
        strict=config.compiler.strict_conflicts,
    )
