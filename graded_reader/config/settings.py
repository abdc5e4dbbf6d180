"""Configuration settings for the graded reader."""

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from graded_reader.core.errors import ValidationError

ENV_PREFIX = "GRADED_READER_"
FEED_MODES = ("live", "sample")


@dataclass
class Settings:
    """Runtime configuration.

    Attributes:
        database_url: SQLAlchemy URL of the article database
        feed_url: RSS feed to ingest
        feed_mode: "live" downloads feed_url, "sample" uses built-in items
        feed_limit: Maximum number of feed items handled per sync
        source_name: Display name stored on ingested articles
        user_agent: User-Agent header sent when fetching the feed
        request_timeout: Timeout in seconds for feed requests
        kimi_api_key: Moonshot API key; without an "sk-" key the offline glossary is used
        kimi_base_url: Moonshot API base URL
        kimi_model: Chat model used for translation
        translation_timeout: Timeout in seconds for translation requests
        translation_cache_ttl: Seconds a translation stays cached
        sync_interval: Seconds between scheduled feed syncs
        cleanup_days: Articles published before this many days are removed monthly
        log_level: Minimum log level
        log_json: Render logs as JSON instead of console output
        metrics_port: Port for the Prometheus metrics server, 0 disables it
    """

    database_url: str = "sqlite:///./data/articles.db"
    feed_url: str = "https://www.geekpark.net/rss"
    feed_mode: str = "live"
    feed_limit: int = 5
    source_name: str = "极客公园"
    user_agent: str = "Chinese Level Reader Bot 1.0"
    request_timeout: float = 15.0
    kimi_api_key: Optional[str] = None
    kimi_base_url: str = "https://api.moonshot.cn/v1"
    kimi_model: str = "moonshot-v1-8k"
    translation_timeout: float = 30.0
    translation_cache_ttl: int = 3600
    sync_interval: int = 3600
    cleanup_days: int = 30
    log_level: str = "INFO"
    log_json: bool = False
    metrics_port: int = 0

    def __post_init__(self):
        if self.feed_mode not in FEED_MODES:
            raise ValidationError(
                f"Invalid feed mode: {self.feed_mode}", details={"choices": list(FEED_MODES)}
            )
        if self.feed_limit < 1:
            raise ValidationError(f"Feed limit must be at least 1, got {self.feed_limit}")
        if self.sync_interval <= 0:
            raise ValidationError(f"Sync interval must be positive, got {self.sync_interval}")
        if self.cleanup_days < 0:
            raise ValidationError(f"Cleanup days cannot be negative, got {self.cleanup_days}")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "Settings":
        """Create a Settings instance from a dictionary.

        Args:
            config_dict: Dictionary containing configuration values

        Returns:
            Settings instance with values from dictionary
        """
        return cls(**{k: v for k, v in config_dict.items() if k in cls.__dataclass_fields__})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Create a Settings instance from GRADED_READER_* environment variables.

        A .env file in the working directory is loaded first when reading
        from the process environment.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        values: Dict[str, Any] = {}
        for name, field in cls.__dataclass_fields__.items():
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            try:
                values[name] = _coerce(raw, field.default)
            except ValueError as e:
                raise ValidationError(
                    f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}"
                ) from e

        # Conventional name used by the hosted translation service
        if "kimi_api_key" not in values and environ.get("KIMI_API_KEY"):
            values["kimi_api_key"] = environ["KIMI_API_KEY"]

        return cls.from_dict(values)


def _coerce(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw
