import logging
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from docpress.models.link_rule import InternalLinkRule

_logger = logging.getLogger(__name__)

DEFAULT_SITE_BASE_URL = "https://medicly.com.au"
DEFAULT_CTA_CLASS = "blog_cta"


def default_link_rules(base_url: str = DEFAULT_SITE_BASE_URL) -> List[InternalLinkRule]:
    """Internal links applied to every post, most specific phrase first."""
    base = base_url.rstrip("/")
    return [
        InternalLinkRule(
            match_phrases=["online doctor consultation", "doctor consultation"],
            target_url=f"{base}/doctor-consultation",
        ),
        InternalLinkRule(match_phrases=["online prescription"], target_url=f"{base}/prescriptions"),
        InternalLinkRule(match_phrases=["certificates"], target_url=f"{base}/certificates"),
    ]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    DB_USER: str = "postgres"
    DB_HOST: str = "localhost"
    DB_DATABASE: str = "postgres"
    DB_PASSWORD: str = ""
    DB_PORT: int = 5432

    # Batch runner
    DOCS_DIRECTORY: str = "doc"
    SENT_DIRECTORY: str = "sent"
    ERROR_LOG_FILE: str = "error.log"
    LOG_LEVEL: str = "INFO"

    # Post-processing
    SITE_BASE_URL: str = DEFAULT_SITE_BASE_URL
    CTA_CLASS: str = DEFAULT_CTA_CLASS
    INTERNAL_LINK_RULES: List[InternalLinkRule] = default_link_rules()

    # Rate limiting (per minute)
    RATE_LIMIT_EXTRACT: int = 30
    RATE_LIMIT_PUBLISH: int = 10

    def model_post_init(self, __context) -> None:
        if not self.DB_PASSWORD:
            _logger.warning(
                "DB_PASSWORD not set. Set it in your .env or environment if the "
                "database requires password authentication."
            )


@lru_cache
def get_settings() -> Settings:
    return Settings()
