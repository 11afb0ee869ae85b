"""Nomination flow configuration -- remote services, timers, attachment limits."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _flag_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class TradeDirectoryConfig:
    """Configuration for the trade-directory lookup service."""

    base_url: str = field(
        default_factory=lambda: os.environ.get(
            "TRADE_API_URL", "https://api.checkatrade.com/v1/consumer-public"
        )
    )
    timeout: float = field(
        default_factory=lambda: float(os.environ.get("TRADE_API_TIMEOUT", "10"))
    )
    page_size: int = field(
        default_factory=lambda: int(os.environ.get("TRADE_SEARCH_PAGE_SIZE", "10"))
    )
    search_debounce: float = field(
        default_factory=lambda: float(os.environ.get("TRADE_SEARCH_DEBOUNCE", "0.3"))
    )
    min_term_length: int = 2


@dataclass
class FeedbackConfig:
    """Configuration for the justification quality-feedback service.

    An empty ``base_url`` means the service is not configured and the
    feedback client scores text with its local heuristic instead.
    """

    base_url: str = field(
        default_factory=lambda: os.environ.get("FEEDBACK_API_URL", "")
    )
    api_key: str | None = field(
        default_factory=lambda: os.environ.get("FEEDBACK_API_KEY") or None
    )
    timeout: float = field(
        default_factory=lambda: float(os.environ.get("FEEDBACK_API_TIMEOUT", "20"))
    )
    idle_seconds: float = field(
        default_factory=lambda: float(os.environ.get("FEEDBACK_IDLE_SECONDS", "15"))
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)


@dataclass
class NominationsConfig:
    """Top-level configuration for the nomination flow."""

    trades: TradeDirectoryConfig = field(default_factory=TradeDirectoryConfig)
    feedback: FeedbackConfig = field(default_factory=FeedbackConfig)
    log_level: str = field(
        default_factory=lambda: os.environ.get("NOMINATIONS_LOG_LEVEL", "INFO")
    )
    max_media: int = 5
    max_media_bytes: int = 5 * 1024 * 1024
    allowed_origins: list[str] = field(
        default_factory=lambda: _flag_list(
            os.environ.get("ALLOWED_ORIGINS", "http://localhost:3000")
        )
    )
    api_host: str = field(
        default_factory=lambda: os.environ.get("NOMINATIONS_HOST", "127.0.0.1")
    )
    api_port: int = field(
        default_factory=lambda: int(os.environ.get("NOMINATIONS_PORT", "8000"))
    )
    session_ttl: float = field(
        default_factory=lambda: float(os.environ.get("NOMINATIONS_SESSION_TTL", "3600"))
    )
    max_sessions: int = field(
        default_factory=lambda: int(os.environ.get("NOMINATIONS_MAX_SESSIONS", "500"))
    )


# Singleton for convenience
_config: NominationsConfig | None = None


def get_config() -> NominationsConfig:
    """Get or create the global nominations configuration."""
    global _config
    if _config is None:
        _config = NominationsConfig()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
