"""
URL construction for Rollbar API calls
"""

from pydantic import BaseModel, ConfigDict

from rollgraph.models.config import DEFAULT_BASE_URL, RequestTokens


class UpstreamRequest(BaseModel):
    """A fully resolved GET against the Rollbar API"""

    model_config = ConfigDict(frozen=True)

    base_url: str
    endpoint: str
    token: str
    query: str | None = None

    @property
    def url(self) -> str:
        url = f"{self.base_url}{self.endpoint}?access_token={self.token}"
        if self.query:
            url += f"&{self.query}"
        return url

    def describe(self) -> str:
        """Token-free form of the request, safe for logs"""
        if self.query:
            return f"/{self.endpoint}?{self.query}"
        return f"/{self.endpoint}"


class UrlBuilder:
    """Builds account-scoped and project-scoped requests"""

    def __init__(self, base_url: str = DEFAULT_BASE_URL):
        self.base_url = base_url

    def account(
        self, tokens: RequestTokens, endpoint: str, query: str | None = None
    ) -> UpstreamRequest:
        return self._build(tokens.account_token, endpoint, query)

    def project(
        self, tokens: RequestTokens, endpoint: str, query: str | None = None
    ) -> UpstreamRequest:
        return self._build(tokens.project_token, endpoint, query)

    def _build(self, token: str, endpoint: str, query: str | None) -> UpstreamRequest:
        return UpstreamRequest(
            base_url=self.base_url, endpoint=endpoint, token=token, query=query or None
        )
