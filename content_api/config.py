"""Application configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Public site (sitemap URLs)
    site_url: str = "http://localhost:3000"

    # Directus headless CMS
    directus_url: str = ""
    directus_token: str = ""
    http_timeout: float = 15.0

    # Locales
    default_locale: str = "en-US"
    static_locale: str = "id-ID"

    # Static Markdown posts
    content_dir: str = "data/blog"

    # Listing sizes
    teaser_size: int = 5
    list_page_size: int = 5
    feed_remote_limit: int = 100

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def cms_configured(self) -> bool:
        return bool(self.directus_url and self.directus_token)


@lru_cache
def get_settings() -> Settings:
    return Settings()
