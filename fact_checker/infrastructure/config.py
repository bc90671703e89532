"""Service configuration loaded from the environment."""

import logging
import os
from typing import List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-5-mini-2025-08-07"


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"⚠️ Ignoring non-integer {name}={value!r}, using {default}")
        return default


def _float_env(name: str, default: Optional[float]) -> Optional[float]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"⚠️ Ignoring non-numeric {name}={value!r}, using {default}")
        return default


class Settings(BaseModel):
    """Configuration for the fact-checking service."""

    openai_api_key: str = Field(default="", description="OpenAI API key")
    model: str = Field(default=DEFAULT_MODEL, description="Model used for all three phases")
    moderation_model: str = Field(default="omni-moderation-latest", description="Moderation model")

    rate_limit_max_requests: int = Field(default=15, ge=1, description="Requests allowed per window")
    rate_limit_window_ms: int = Field(default=60 * 60 * 1000, ge=1, description="Window length in ms")
    rate_limit_backend: str = Field(default="memory", description="'memory' or 'redis'")
    redis_url: str = Field(default="redis://localhost:6379", description="Redis connection URL")

    max_input_length: int = Field(default=100_000, ge=1, description="Maximum input characters")
    evidence_time_window_days: int = Field(default=365, ge=1, le=365, description="Evidence freshness window")

    upstream_timeout: float = Field(default=120.0, gt=0, description="Timeout per provider call in seconds")
    request_deadline: Optional[float] = Field(default=600.0, description="Deadline for one analysis in seconds")
    tool_loop_max_turns: Optional[int] = Field(default=None, description="Cap on tool-loop turns (None = model decides)")

    search_timeout: float = Field(default=10.0, gt=0, description="Timeout per search call in seconds")
    wikipedia_language: str = Field(default="en", description="Wikipedia language edition")
    wikipedia_user_agent: str = Field(default="ArticleFactChecker/1.0", description="User agent for Wikipedia")

    article_fetch_timeout: float = Field(default=10.0, gt=0, description="Article fetch timeout in seconds")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    @property
    def credentials_configured(self) -> bool:
        return bool(self.openai_api_key.strip())

    @classmethod
    def from_env(cls) -> "Settings":
        """Create configuration from environment variables."""
        max_turns = _int_env("TOOL_LOOP_MAX_TURNS", 0)
        deadline = _float_env("REQUEST_DEADLINE_SECONDS", 600.0)
        origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

        settings = cls(
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
            moderation_model=os.getenv("OPENAI_MODERATION_MODEL", "omni-moderation-latest"),
            rate_limit_max_requests=_int_env("RATE_LIMIT_MAX_REQUESTS", 15),
            rate_limit_window_ms=_int_env("RATE_LIMIT_WINDOW_MS", 60 * 60 * 1000),
            rate_limit_backend=os.getenv("RATE_LIMIT_BACKEND", "memory").lower(),
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379"),
            max_input_length=_int_env("MAX_INPUT_LENGTH", 100_000),
            evidence_time_window_days=_int_env("EVIDENCE_TIME_WINDOW_DAYS", 365),
            upstream_timeout=_float_env("UPSTREAM_TIMEOUT_SECONDS", 120.0),
            request_deadline=deadline if deadline and deadline > 0 else None,
            tool_loop_max_turns=max_turns if max_turns > 0 else None,
            search_timeout=_float_env("SEARCH_TIMEOUT_SECONDS", 10.0),
            wikipedia_language=os.getenv("WIKIPEDIA_LANGUAGE", "en"),
            wikipedia_user_agent=os.getenv("WIKIPEDIA_USER_AGENT", "ArticleFactChecker/1.0"),
            article_fetch_timeout=_float_env("ARTICLE_FETCH_TIMEOUT_SECONDS", 10.0),
            cors_origins=origins or ["*"],
        )

        if settings.credentials_configured:
            logger.info(f"✅ OpenAI API key loaded: {len(settings.openai_api_key)} chars")
        else:
            logger.warning("⚠️ OPENAI_API_KEY not found in environment variables")
        logger.info(
            f"🚦 Rate limit: {settings.rate_limit_max_requests} requests per "
            f"{settings.rate_limit_window_ms // 60000} min ({settings.rate_limit_backend} store)"
        )
        return settings
