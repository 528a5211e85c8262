"""
Runtime settings loaded from environment variables (optionally from .env)
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from thepaper.errors import ConfigError

RESOURCE_DIR = Path(__file__).parent / "resources"
DEFAULT_RSS_RESOURCE = RESOURCE_DIR / "rss.json"
DEFAULT_HISTORY_FILE = Path("data") / "history.json"


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {value!r}")


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {value!r}")


class Settings:
    """Tunable knobs for one pipeline run"""

    def __init__(self,
                 top_n: int = 8,
                 max_per_category: int = 2,
                 candidate_multiplier: int = 3,
                 recency_hours: float = 24.0,
                 history_days: int = 30,
                 rate_limit_ms: int = 200,
                 max_retries: int = 5,
                 base_delay: float = 1.0,
                 rss_resource: Path = DEFAULT_RSS_RESOURCE,
                 history_file: Path = DEFAULT_HISTORY_FILE,
                 log_level: str = "INFO"):
        if top_n < 1:
            raise ConfigError(f"top_n must be positive, got {top_n}")
        if max_per_category < 1:
            raise ConfigError(f"max_per_category must be positive, got {max_per_category}")
        if max_retries < 0:
            raise ConfigError(f"max_retries must not be negative, got {max_retries}")
        if rate_limit_ms < 0:
            raise ConfigError(f"rate_limit_ms must not be negative, got {rate_limit_ms}")
        self.top_n = top_n
        self.max_per_category = max_per_category
        self.candidate_multiplier = candidate_multiplier
        self.recency_hours = recency_hours
        self.history_days = history_days
        self.rate_limit_ms = rate_limit_ms
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.rss_resource = Path(rss_resource)
        self.history_file = Path(history_file)
        self.log_level = log_level

    @property
    def rate_limit_seconds(self) -> float:
        return self.rate_limit_ms / 1000.0

    @staticmethod
    def build_from_envs():
        load_dotenv()
        settings = Settings(
            top_n=_env_int("MAX_ARTICLE_NUMS", 8),
            max_per_category=_env_int("MAX_PER_CATEGORY", 2),
            recency_hours=_env_float("RECENCY_HOURS", 24.0),
            history_days=_env_int("HISTORY_DAYS", 30),
            rate_limit_ms=_env_int("GPT_RATE_LIMIT_MS", 200),
            max_retries=_env_int("GPT_MAX_RETRIES", 5),
            rss_resource=Path(os.environ.get("RSS_RESOURCE") or DEFAULT_RSS_RESOURCE),
            history_file=Path(os.environ.get("HISTORY_FILE") or DEFAULT_HISTORY_FILE),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )
        logger.debug(
            f"Settings: top_n={settings.top_n}, cap={settings.max_per_category}, "
            f"recency={settings.recency_hours}h, history={settings.history_days}d, "
            f"rate_limit={settings.rate_limit_ms}ms"
        )
        return settings
