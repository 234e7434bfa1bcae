"""Configuration using pydantic-settings."""

from pydantic_settings import BaseSettings

DEFAULT_USER_AGENT = "Collector/0.1 (+https://github.com/web-collector)"


class CollectorSettings(BaseSettings):
    """Collector configuration."""

    user_agent: str = DEFAULT_USER_AGENT
    max_depth: int = 0
    timeout: float = 10.0
    max_connections: int = 100
    max_keepalive_connections: int = 20
    follow_redirects: bool = True

    model_config = {"env_prefix": "COLLECTOR_"}


settings = CollectorSettings()
