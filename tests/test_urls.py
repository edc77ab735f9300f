"""
Tests for UrlBuilder
"""

from rollgraph.models.config import DEFAULT_BASE_URL, RequestTokens
from rollgraph.services.urls import UpstreamRequest, UrlBuilder


class TestUrlBuilder:
    def test_account_url_without_query(self, tokens):
        request = UrlBuilder().account(tokens, "users")

        assert request.url == f"{DEFAULT_BASE_URL}users?access_token=acct_token"

    def test_project_url_with_query(self, tokens):
        request = UrlBuilder().project(tokens, "rql/job/7", "expand=result")

        assert (
            request.url
            == f"{DEFAULT_BASE_URL}rql/job/7?access_token=proj_token&expand=result"
        )

    def test_empty_query_is_omitted(self, tokens):
        request = UrlBuilder().project(tokens, "items", "")

        assert request.query is None
        assert request.url.endswith("items?access_token=proj_token")

    def test_tokens_are_never_crossed(self):
        tokens = RequestTokens(account_token="A", project_token="P")
        builder = UrlBuilder("http://rollbar.test/api/1/")

        account = builder.account(tokens, "teams")
        project = builder.project(tokens, "items")

        assert account.url == "http://rollbar.test/api/1/teams?access_token=A"
        assert project.url == "http://rollbar.test/api/1/items?access_token=P"

    def test_describe_hides_token(self, tokens):
        request = UrlBuilder().account(tokens, "team/5/users", "page=1")

        assert request.describe() == "/team/5/users?page=1"
        assert "acct_token" not in request.describe()

    def test_requests_are_hashable_and_comparable(self, tokens):
        builder = UrlBuilder()
        first = builder.account(tokens, "user/1")
        second = builder.account(tokens, "user/1")

        assert first == second
        assert hash(first) == hash(second)
        assert first != builder.project(tokens, "user/1")
        assert isinstance(first, UpstreamRequest)
