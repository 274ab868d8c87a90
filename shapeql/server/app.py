# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""FastAPI application serving a compiled schema over GraphQL-over-HTTP."""

import json
import logging
from typing import Any, Optional

# Configure logging for the shapeql package
# Only add handler if not already configured, and prevent duplicate logs
_shapeql_logger = logging.getLogger('shapeql')
if not any(isinstance(h, logging.StreamHandler) for h in _shapeql_logger.handlers):
    _console_handler = logging.StreamHandler()
    _console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    _shapeql_logger.addHandler(_console_handler)
    _shapeql_logger.setLevel(logging.INFO)
_shapeql_logger.propagate = False

from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from graphql import GraphQLError, GraphQLSchema, graphql

from shapeql import __version__
from shapeql.compiler.schema_builder import AssembledSchema
from shapeql.core.config import Config, ServerConfig
from shapeql.core.errors import UpstreamCallError
from shapeql.relay import WebhookRelay, create_relay_router
from shapeql.server.models import GraphQLRequest

logger = logging.getLogger(__name__)

GRAPHIQL_HTML = """<!DOCTYPE html>
<html>
<head>
  <title>shapeql</title>
  <link rel="stylesheet" href="https://unpkg.com/graphiql/graphiql.min.css" />
</head>
<body style="margin: 0;">
  <div id="graphiql" style="height: 100vh;"></div>
  <script crossorigin src="https://unpkg.com/react/umd/react.production.min.js"></script>
  <script crossorigin src="https://unpkg.com/react-dom/umd/react-dom.production.min.js"></script>
  <script crossorigin src="https://unpkg.com/graphiql/graphiql.min.js"></script>
  <script>
    const fetcher = GraphiQL.createFetcher({ url: window.location.pathname });
    ReactDOM.render(React.createElement(GraphiQL, { fetcher }), document.getElementById("graphiql"));
  </script>
</body>
</html>
"""


def format_error(error: GraphQLError) -> dict:
    """Serialize a GraphQL error, tagging failed backend calls."""
    formatted = dict(error.formatted)
    original = error.original_error
    if isinstance(original, UpstreamCallError):
        extensions = dict(formatted.get("extensions") or {})
        extensions["code"] = "UPSTREAM_CALL_FAILED"
        extensions["service"] = original.service
        extensions["operation"] = original.operation
        if original.error_code:
            extensions["upstreamCode"] = original.error_code
        formatted["extensions"] = extensions
    return formatted


async def execute_query(
    schema: GraphQLSchema,
    query: str,
    variables: Optional[dict[str, Any]] = None,
    operation_name: Optional[str] = None,
) -> dict:
    """Execute one GraphQL request and shape the response body."""
    result = await graphql(
        schema,
        query,
        variable_values=variables,
        operation_name=operation_name,
    )
    body: dict[str, Any] = {"data": result.data}
    if result.errors:
        body["errors"] = [format_error(e) for e in result.errors]
    return body


def create_app(
    assembled: AssembledSchema,
    config: Optional[Config] = None,
    relay: Optional[WebhookRelay] = None,
) -> FastAPI:
    """
    Create FastAPI application serving the compiled schema.

    Args:
        assembled: Result of compile_schema()
        config: Config instance (server section is used for CORS/GraphiQL/relay)
        relay: WebhookRelay to mount when the relay is enabled

    Returns:
        FastAPI application
    """
    server_config = config.server if config else ServerConfig()

    app = FastAPI(
        title="shapeql",
        description="GraphQL gateway compiled from service API descriptions",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=server_config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/graphql")
    async def graphql_post(request: GraphQLRequest):
        body = await execute_query(
            assembled.schema,
            request.query,
            request.variables,
            request.operation_name,
        )
        return JSONResponse(jsonable_encoder(body))

    @app.get("/graphql")
    async def graphql_get(
        query: Optional[str] = None,
        variables: Optional[str] = None,
        operationName: Optional[str] = None,
    ):
        if query is None:
            if server_config.graphiql:
                return HTMLResponse(GRAPHIQL_HTML)
            raise HTTPException(status_code=400, detail="Missing query parameter")
        try:
            parsed_variables = json.loads(variables) if variables else None
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="Variables must be JSON")
        body = await execute_query(assembled.schema, query, parsed_variables, operationName)
        return JSONResponse(jsonable_encoder(body))

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "services": [s.endpoint_namespace for s in assembled.services],
            "types": len(assembled.types),
            "conflicts": len(assembled.conflicts),
        }

    @app.get("/")
    async def root():
        return {
            "name": "shapeql",
            "version": __version__,
            "graphql": "/graphql",
            "health": "/health",
            "sdkVersion": assembled.client_version,
            "relay": "/webhooks/graphql" if server_config.relay_enabled else None,
        }

    if server_config.relay_enabled:
        app.include_router(create_relay_router(relay or WebhookRelay()), prefix="/webhooks")
        logger.info("Webhook relay mounted at /webhooks")

    return app


def run_server(app: FastAPI, host: str = "127.0.0.1", port: int = 4000, **kwargs):
    """Run the server."""
    import uvicorn
    uvicorn.run(app, host=host, port=port, **kwargs)
