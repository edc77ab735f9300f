import logging

from aiohttp import web
from strawberry.aiohttp.views import GraphQLView

from rollgraph.graphql.context import GraphQLContext, derive_tokens
from rollgraph.graphql.schema import create_schema
from rollgraph.models.config import AppConfig, RequestTokens
from rollgraph.services.cache import RequestCache
from rollgraph.services.rollbar_client import RollbarClient

logger = logging.getLogger(__name__)

CLIENT_KEY = web.AppKey("client", RollbarClient)


class RollgraphView(GraphQLView):
    """GraphQL endpoint building a fresh resolver context for every request"""

    def __init__(
        self,
        schema,
        client: RollbarClient,
        default_tokens: RequestTokens,
        **kwargs,
    ):
        super().__init__(schema=schema, **kwargs)
        self.client = client
        self.default_tokens = default_tokens

    async def get_context(
        self, request: web.Request, response: web.StreamResponse
    ) -> GraphQLContext:
        return GraphQLContext(
            tokens=derive_tokens(request.headers, self.default_tokens),
            client=self.client,
        )


def create_client(config: AppConfig) -> RollbarClient:
    cache = None
    if config.cache.enabled:
        cache = RequestCache(
            max_size=config.cache.max_size, ttl=config.cache.ttl_seconds
        )
        logger.info("Request cache enabled")
    return RollbarClient(config.rollbar, cache=cache)


def create_app(
    config: AppConfig, client: RollbarClient | None = None
) -> web.Application:
    client = client or create_client(config)

    view = RollgraphView(
        schema=create_schema(tracing=config.server.tracing),
        client=client,
        default_tokens=config.rollbar.default_tokens(),
        graphql_ide="graphiql" if config.server.graphiql else None,
    )

    app = web.Application()
    app[CLIENT_KEY] = client
    app.router.add_route("*", config.server.path, view)
    app.on_cleanup.append(_close_client)
    return app


async def _close_client(app: web.Application):
    await app[CLIENT_KEY].close()
