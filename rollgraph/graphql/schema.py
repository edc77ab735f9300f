"""
GraphQL schema for the Rollbar gateway.

Field names follow the Rollbar API (snake_case), so automatic camel casing is
disabled.
"""

import strawberry
from strawberry.extensions.tracing import ApolloTracingExtension
from strawberry.schema.config import StrawberryConfig

from rollgraph.graphql.queries import Query


def create_schema(tracing: bool = False) -> strawberry.Schema:
    extensions = [ApolloTracingExtension] if tracing else []
    return strawberry.Schema(
        query=Query,
        config=StrawberryConfig(auto_camel_case=False),
        extensions=extensions,
    )


schema = create_schema()
