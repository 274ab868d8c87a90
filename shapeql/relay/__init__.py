# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""GitHub webhook relay.

Usage:
    from shapeql.relay import WebhookRelay, create_relay_router

    relay = WebhookRelay()
    app.include_router(create_relay_router(relay), prefix="/webhooks")
"""

from shapeql.relay.pubsub import PubSub
from shapeql.relay.schema import (
    COMMENTS_CHANNEL,
    GithubComment,
    RelayContext,
    WebhookRelay,
    comment_from_payload,
    schema,
)
from shapeql.relay.app import create_relay_router

__all__ = [
    "PubSub",
    "COMMENTS_CHANNEL",
    "GithubComment",
    "RelayContext",
    "WebhookRelay",
    "comment_from_payload",
    "schema",
    "create_relay_router",
]
