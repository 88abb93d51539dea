"""Pipeline configuration: YAML tunables plus environment secrets."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar

import yaml
from dotenv import load_dotenv

from common.errors import ConfigurationError

load_dotenv()

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Config directory at the repository root
CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"
CONFIG_ENV_VAR = "PULSE_CONFIG"

SUMMARY_STYLES = ("executive", "technical", "simple", "brief", "detailed")


def find_config_path(
    config_name: str | None,
    config_dir: Path,
    default_name: str = "prod",
    env_var: str | None = None,
) -> Path:
    """Find config file path, checking env var and defaults.

    Args:
        config_name: Name of config (without .yaml) or None for default
        config_dir: Directory containing config files
        default_name: Default config name if config_name is None
        env_var: Environment variable to check for config name

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    config_path = config_dir / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _check_unit_interval(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0, 1], got {value}")


def _check_positive(name: str, value: int) -> None:
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")


@dataclass
class IngestConfig:
    """Feed ingestion settings."""

    recency_months: int = 3
    request_timeout_seconds: int = 30
    user_agent: str = "ai-pulse-ingest/1.0 (RSS reader)"
    fetch_full_text: bool = False
    full_text_min_chars: int = 200

    def __post_init__(self) -> None:
        _check_positive("ingest.recency_months", self.recency_months)
        _check_positive("ingest.request_timeout_seconds", self.request_timeout_seconds)


@dataclass
class LLMConfig:
    """Insight extraction model settings."""

    model: str = "gpt-4o-mini"
    temperature: float = 0.5
    max_output_tokens: int = 1000
    timeout_seconds: float = 60.0
    max_retries: int = 2
    max_input_chars: int = 15000
    min_input_chars: int = 50

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError(f"llm.timeout_seconds must be positive, got {self.timeout_seconds}")
        if self.max_input_chars < self.min_input_chars:
            raise ValueError("llm.max_input_chars must not be smaller than llm.min_input_chars")


@dataclass
class ProcessConfig:
    """Processing pipeline batch settings."""

    batch_size: int = 3
    trending_limit: int = 10
    max_pulse_keywords: int = 10
    stale_claim_seconds: int = 600

    def __post_init__(self) -> None:
        _check_positive("process.batch_size", self.batch_size)
        _check_positive("process.trending_limit", self.trending_limit)
        _check_positive("process.stale_claim_seconds", self.stale_claim_seconds)


@dataclass
class TrendConfig:
    """Trend aggregation window and output sizes."""

    lookback_hours: int = 48
    top_trending: int = 10
    top_onboarding: int = 15
    prune_stale_topics: bool = True

    def __post_init__(self) -> None:
        _check_positive("trends.lookback_hours", self.lookback_hours)
        _check_positive("trends.top_trending", self.top_trending)
        _check_positive("trends.top_onboarding", self.top_onboarding)


@dataclass
class FeedConfig:
    """Personalized ranking settings."""

    candidate_limit: int = 50
    feed_limit: int = 20
    interest_boost: float = 0.1
    user_type_bonus: float = 0.05
    summary_min_chars: int = 50
    default_summary_style: str = "simple"

    def __post_init__(self) -> None:
        _check_positive("feed.candidate_limit", self.candidate_limit)
        _check_positive("feed.feed_limit", self.feed_limit)
        _check_unit_interval("feed.interest_boost", self.interest_boost)
        _check_unit_interval("feed.user_type_bonus", self.user_type_bonus)
        if self.default_summary_style not in SUMMARY_STYLES:
            raise ValueError(
                f"Invalid feed.default_summary_style: {self.default_summary_style}. "
                f"Must be one of {list(SUMMARY_STYLES)}"
            )


@dataclass
class APIConfig:
    """Read API server settings."""

    host: str = "0.0.0.0"
    port: int = 8000
    trending_limit: int = 10
    onboarding_limit: int = 15
    search_limit: int = 20


_SECTIONS = {
    "ingest": IngestConfig,
    "llm": LLMConfig,
    "process": ProcessConfig,
    "trends": TrendConfig,
    "feed": FeedConfig,
    "api": APIConfig,
}


@dataclass
class PulseConfig:
    ingest: IngestConfig = field(default_factory=IngestConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    process: ProcessConfig = field(default_factory=ProcessConfig)
    trends: TrendConfig = field(default_factory=TrendConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)
    api: APIConfig = field(default_factory=APIConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PulseConfig:
        unknown = set(data) - set(_SECTIONS)
        if unknown:
            raise ValueError(f"Unknown config sections: {sorted(unknown)}")

        sections = {}
        for name, section_cls in _SECTIONS.items():
            values = data.get(name) or {}
            allowed = {f.name for f in fields(section_cls)}
            unknown_keys = set(values) - allowed
            if unknown_keys:
                raise ValueError(f"Unknown keys in '{name}' config: {sorted(unknown_keys)}")
            sections[name] = section_cls(**values)
        return cls(**sections)


def load_config(config_name: str | None = None) -> PulseConfig:
    """Load PulseConfig from configs/<name>.yaml.

    Falls back to built-in defaults when no name was requested and the
    default file is absent.
    """
    try:
        path = find_config_path(config_name, CONFIG_DIR, env_var=CONFIG_ENV_VAR)
    except FileNotFoundError:
        if config_name is not None:
            raise
        logger.warning("No config file found in %s, using defaults", CONFIG_DIR)
        return PulseConfig()

    logger.info("Loading config from %s", path)
    return PulseConfig.from_dict(load_yaml(path))


def require_env(name: str) -> str:
    """Return a required environment variable or raise ConfigurationError."""
    value = os.environ.get(name, "").strip()
    if not value:
        raise ConfigurationError(f"{name} is not set")
    return value


class ConfigSingleton(Generic[T]):
    """Generic config singleton manager.

    Provides get/set/reset pattern for managing a global config instance.
    """

    def __init__(self, loader: Callable[[], T] | None = None):
        self._config: T | None = None
        self._loader = loader

    def get(self) -> T:
        """Get the config, loading it lazily if needed."""
        if self._config is None:
            if self._loader is None:
                raise RuntimeError("No config loaded and no loader set")
            self._config = self._loader()
        return self._config

    def set(self, config: T) -> None:
        """Set the config directly."""
        self._config = config

    def reset(self) -> None:
        """Reset the config, forcing reload on next get()."""
        self._config = None


_manager: ConfigSingleton[PulseConfig] = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
