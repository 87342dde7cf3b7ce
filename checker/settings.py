from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from checker.github_api import DEFAULT_USER_AGENT


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    """

    github_token: str = ""
    github_username: str = ""
    github_graphql_url: str = "https://api.github.com/graphql"
    user_agent: str = DEFAULT_USER_AGENT
    poll_interval_seconds: float = 0.1
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
