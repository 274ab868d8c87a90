# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""FastAPI router exposing the webhook relay."""

import logging

from fastapi import APIRouter, HTTPException, Request
from strawberry.fastapi import GraphQLRouter

from shapeql.relay.schema import GITHUB_HOOK_QUERY, RelayContext, WebhookRelay, schema

logger = logging.getLogger(__name__)


def create_relay_router(relay: WebhookRelay) -> APIRouter:
    """Router with the relay GraphQL endpoint and a raw GitHub webhook receiver.

    Routes (relative to the mount prefix):
        /graphql   strawberry GraphQL endpoint (queries and subscriptions)
        /github    POST target for GitHub; the payload is run through the
                   githubWebhook query
    """
    router = APIRouter()

    async def get_context() -> RelayContext:
        return RelayContext(relay)

    graphql_router = GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql",
    )
    router.include_router(graphql_router, prefix="/graphql")

    @router.post("/github")
    async def github_webhook(request: Request):
        try:
            payload = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Webhook body must be JSON")

        result = await schema.execute(
            GITHUB_HOOK_QUERY,
            variable_values={"payload": payload},
            context_value=RelayContext(relay),
        )
        if result.errors:
            logger.warning(f"Webhook handling failed: {result.errors[0].message}")
            raise HTTPException(status_code=500, detail=result.errors[0].message)
        return {"status": result.data["githubWebhook"]}

    return router
