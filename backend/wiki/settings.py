"""Wiki scraper configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class WikiScraperSettings(BaseSettings):
    model_config = {"env_prefix": "WIKI_"}

    base_url: str = "https://bobs-burgers.fandom.com"
    episode_guide_path: str = "/wiki/Episode_Guide"
    rate_limit_seconds: float = Field(default=0.3, ge=0)
    user_agent: str = "BurgerDaydle-Bot/1.0 (burgerofthe.day)"
    timeout_seconds: float = Field(default=30.0, gt=0)

    @property
    def episode_guide_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.episode_guide_path}"
