# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""GitHub webhook relay: republishes issue comments to GraphQL subscribers.

Independent from the compiled service schema; it has its own small static
schema:

    type Query { githubWebhook(data: JSON): String! }
    type Subscription { issueComments: GithubComment! }
"""

import logging
from typing import AsyncGenerator, Optional

import strawberry
from strawberry.fastapi import BaseContext
from strawberry.scalars import JSON

from shapeql.relay.pubsub import PubSub

logger = logging.getLogger(__name__)

COMMENTS_CHANNEL = "issue_comments"

GITHUB_HOOK_QUERY = """
query GithubHookHandle($payload: JSON) {
    githubWebhook(data: $payload)
}
"""


@strawberry.type
class GithubComment:
    """A comment taken from a GitHub issue_comment webhook."""
    # GitHub ids exceed GraphQL Int's 32-bit range
    id: Optional[strawberry.ID] = None
    text: Optional[str] = None
    author_name: Optional[str] = None


def comment_from_payload(data: Optional[dict]) -> Optional[GithubComment]:
    """Build a GithubComment from a webhook payload, or None if it carries no comment."""
    if not isinstance(data, dict):
        return None
    comment = data.get("comment")
    if not comment:
        return None
    sender = data.get("sender") or {}
    comment_id = comment.get("id")
    return GithubComment(
        id=strawberry.ID(str(comment_id)) if comment_id is not None else None,
        text=comment.get("body"),
        author_name=sender.get("name") or sender.get("login"),
    )


class WebhookRelay:
    """Turns inbound webhook payloads into published GithubComment events."""

    def __init__(self, pubsub: Optional[PubSub] = None):
        self.pubsub = pubsub or PubSub()

    def handle(self, payload: Optional[dict]) -> Optional[GithubComment]:
        comment = comment_from_payload(payload)
        if comment is not None:
            delivered = self.pubsub.publish(COMMENTS_CHANNEL, comment)
            logger.debug(f"Relayed comment {comment.id} to {delivered} subscribers")
        return comment

    async def comments(self) -> AsyncGenerator[GithubComment, None]:
        async for comment in self.pubsub.subscribe(COMMENTS_CHANNEL):
            yield comment


class RelayContext(BaseContext):
    """Context available to relay resolvers."""

    def __init__(self, relay: WebhookRelay):
        super().__init__()
        self.relay = relay


@strawberry.type
class Query:
    """Relay Query type."""

    @strawberry.field
    def github_webhook(self, info: strawberry.Info, data: Optional[JSON] = None) -> str:
        """Accept a GitHub webhook payload."""
        ctx: RelayContext = info.context
        ctx.relay.handle(data)
        return "200 OK"


@strawberry.type
class Subscription:
    """Relay Subscription type."""

    @strawberry.subscription
    async def issue_comments(self, info: strawberry.Info) -> AsyncGenerator[GithubComment, None]:
        """Subscribe to comments as webhooks arrive."""
        ctx: RelayContext = info.context
        async for comment in ctx.relay.comments():
            yield comment


schema = strawberry.Schema(query=Query, subscription=Subscription)
