from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from rollgraph.models.config import RequestTokens
from rollgraph.services.rollbar_client import RollbarClient

ACCOUNT_TOKEN_HEADER = "x-account-token"
PROJECT_TOKEN_HEADER = "x-project-token"


class GraphQLContext(BaseModel):
    """Per-request context handed to every resolver"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    tokens: RequestTokens
    client: RollbarClient


def derive_tokens(
    headers: Mapping[str, str] | None, defaults: RequestTokens
) -> RequestTokens:
    """Request headers override the configured tokens for this request only"""
    if not headers:
        return defaults

    return RequestTokens(
        account_token=headers.get(ACCOUNT_TOKEN_HEADER) or defaults.account_token,
        project_token=headers.get(PROJECT_TOKEN_HEADER) or defaults.project_token,
    )
