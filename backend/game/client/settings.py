"""Player client configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    model_config = {"env_prefix": "DAYDLE_CLIENT_"}

    api_url: str = Field(default="http://localhost:8000", min_length=1)
    state_path: str = Field(default="~/.burger-daydle/state.json", min_length=1)
    timeout_seconds: float = Field(default=10.0, gt=0)
