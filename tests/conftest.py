"""
Pytest configuration and fixtures
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from rollgraph.graphql.context import GraphQLContext
from rollgraph.graphql.schema import schema
from rollgraph.models.config import DEFAULT_BASE_URL, RequestTokens, RollbarConfig
from rollgraph.services.rollbar_client import RollbarClient


class FakeRollbar:
    """Stands in for the Rollbar API: answers by endpoint path and records every URL"""

    def __init__(self, routes: dict):
        self.routes = routes
        self.urls: list[str] = []

    async def respond(self, url: str):
        self.urls.append(url)
        # Yield so concurrent resolvers interleave like real network calls
        await asyncio.sleep(0)

        endpoint = url.split("?")[0][len(DEFAULT_BASE_URL) :]
        body = self.routes.get(endpoint)
        if isinstance(body, Exception):
            raise body
        if body is None:
            return {"err": 1, "message": f"Not found: {endpoint}"}
        return body

    @property
    def endpoints(self) -> list[str]:
        return [url.split("?")[0][len(DEFAULT_BASE_URL) :] for url in self.urls]


@pytest.fixture
def rollbar_config():
    """RollbarConfig with distinct account and project tokens"""
    return RollbarConfig(account_token="acct_token", project_token="proj_token")


@pytest.fixture
def tokens(rollbar_config):
    return rollbar_config.default_tokens()


@pytest.fixture
def make_client(rollbar_config):
    """Build a RollbarClient whose transport is a FakeRollbar"""

    def factory(routes: dict, cache=None):
        fake = FakeRollbar(routes)
        client = RollbarClient(rollbar_config, cache=cache)
        client._make_request = AsyncMock(side_effect=fake.respond)
        return client, fake

    return factory


@pytest.fixture
def execute(tokens):
    """Run a GraphQL query against the schema with a given client"""

    async def run(client, query: str, request_tokens: RequestTokens | None = None):
        context = GraphQLContext(tokens=request_tokens or tokens, client=client)
        return await schema.execute(query, context_value=context)

    return run


@pytest.fixture
def user_payloads():
    return {
        1: {"id": 1, "username": "alice", "email": "alice@example.com", "email_enabled": 1},
        2: {"id": 2, "username": "bob", "email": "bob@example.com", "email_enabled": 0},
        3: {"id": 3, "username": "", "email": "invited@example.com", "email_enabled": 1},
    }


@pytest.fixture
def item_payload():
    return {
        "id": 272505123,
        "project_id": 12,
        "counter": 42,
        "title": "TypeError: cannot read property 'x' of undefined",
        "environment": "production",
        "level": "error",
        "status": "active",
        "framework": "browser-js",
        "platform": "browser",
        "hash": "a1b2c3",
        "total_occurrences": 150,
        "unique_occurrences": 25,
        "last_occurrence_timestamp": 1718723400,
        "first_occurrence_timestamp": 1718704800,
    }


@pytest.fixture
def occurrence_payload():
    return {
        "id": 481761639083,
        "project_id": 12,
        "timestamp": 1718723400,
        "version": 2,
        "billable": 1,
        "data": {
            "uuid": "d4c7acef-55bf-4b0f-9a4e-f2ac5ae2a0d4",
            "level": "error",
            "environment": "production",
            "framework": "browser-js",
            "language": "javascript",
            "timestamp": 1718723400,
            "notifier": {"name": "rollbar-browser-js", "version": "2.26.1"},
            "metadata": {"customer_timestamp": 1718723399},
            "body": {"trace": {"exception": {"class": "TypeError"}}},
        },
    }
