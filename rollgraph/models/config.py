import os

from pydantic import BaseModel, ConfigDict

DEFAULT_BASE_URL = "https://api.rollbar.com/api/1/"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str) -> int | None:
    value = os.getenv(name, "").strip()
    return int(value) if value else None


def _env_float(name: str) -> float | None:
    value = os.getenv(name, "").strip()
    return float(value) if value else None


class RollbarConfig(BaseModel):
    account_token: str = ""
    project_token: str = ""
    base_url: str = DEFAULT_BASE_URL
    verbose: bool = False

    @classmethod
    def from_env(cls):
        return cls(
            account_token=os.getenv("ACCOUNT_TOKEN", ""),
            project_token=os.getenv("PROJECT_TOKEN", ""),
            base_url=os.getenv("ROLLBAR_BASE_URL", DEFAULT_BASE_URL),
            verbose=_env_flag("VERBOSE"),
        )

    def is_configured(self) -> bool:
        return bool(self.account_token or self.project_token)

    def default_tokens(self) -> "RequestTokens":
        return RequestTokens(
            account_token=self.account_token, project_token=self.project_token
        )


class RequestTokens(BaseModel):
    """Access tokens used for the upstream calls of a single GraphQL request"""

    model_config = ConfigDict(frozen=True)

    account_token: str = ""
    project_token: str = ""


class CacheConfig(BaseModel):
    enabled: bool = False
    max_size: int | None = None
    ttl_seconds: float | None = None

    @classmethod
    def from_env(cls):
        return cls(
            enabled=_env_flag("CACHE"),
            max_size=_env_int("CACHE_MAX_SIZE"),
            ttl_seconds=_env_float("CACHE_TTL"),
        )


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 4000
    path: str = "/"
    graphiql: bool = True
    tracing: bool = True

    @classmethod
    def from_env(cls):
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "4000")),
            path=os.getenv("GRAPHQL_PATH", "/"),
            graphiql=_env_flag("GRAPHIQL", "true"),
            tracing=_env_flag("TRACING", "true"),
        )


class AppConfig(BaseModel):
    rollbar: RollbarConfig
    cache: CacheConfig = CacheConfig()
    server: ServerConfig = ServerConfig()
    debug: bool = False

    @classmethod
    def from_env(cls):
        return cls(
            rollbar=RollbarConfig.from_env(),
            cache=CacheConfig.from_env(),
            server=ServerConfig.from_env(),
            debug=_env_flag("DEBUG"),
        )
