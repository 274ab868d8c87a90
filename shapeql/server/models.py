# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Pydantic models for API request schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class GraphQLRequest(BaseModel):
    """GraphQL-over-HTTP POST body."""
    model_config = {"populate_by_name": True}

    query: str
    variables: Optional[dict[str, Any]] = None
    operation_name: Optional[str] = Field(default=None, alias="operationName")
