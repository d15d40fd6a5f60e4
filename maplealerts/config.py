from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional
import os

import yaml


DEFAULT_BASE_URL = "https://dd.weather.gc.ca/today/alerts/cap"
DEFAULT_UA = "maplealerts/1.0 (EC CAP alert reader)"
ENV_PREFIX = "MAPLEALERTS_"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class FeedConfig:
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_UA
    listing_timeout_seconds: float = 10.0
    request_timeout_seconds: float = 8.0
    hour_window: int = 6
    max_concurrency: int = 4
    request_delay_seconds: float = 0.05
    retries: int = 2
    retry_backoff_seconds: float = 0.5


@dataclass(frozen=True)
class ParserConfig:
    language: str = "en-CA"
    default_details_url: str = "https://weather.gc.ca/"
    provider: str = "Environment Canada"


@dataclass(frozen=True)
class AppConfig:
    feed: FeedConfig = FeedConfig()
    parser: ParserConfig = ParserConfig()


def _env(key: str, default: str | None = None) -> str | None:
    v = os.environ.get(key)
    return v if v not in (None, "") else default


def _env_int(key: str, default: int) -> int:
    v = (_env(key) or "").strip()
    if not v:
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_float(key: str, default: float) -> float:
    v = (_env(key) or "").strip()
    if not v:
        return default
    try:
        return float(v)
    except ValueError:
        return default


def _env_str(key: str, default: str) -> str:
    v = _env(key)
    return v.strip() if v else default


# annotations are strings under `from __future__ import annotations`
_COERCE = {"int": int, "float": float, "str": str}


def _section(raw: Dict[str, Any], name: str, cls: type) -> Any:
    data = raw.get(name) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"config section '{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown keys in '{name}': {', '.join(unknown)}")
    values: Dict[str, Any] = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        v = data[f.name]
        conv = _COERCE.get(str(f.type))
        try:
            values[f.name] = conv(v) if conv else v
        except (TypeError, ValueError) as e:
            raise ConfigError(f"{name}.{f.name} must be {f.type}, got {v!r}") from e
    return cls(**values)


def _apply_env(feed: FeedConfig) -> FeedConfig:
    return replace(
        feed,
        base_url=_env_str(ENV_PREFIX + "BASE_URL", feed.base_url).rstrip("/"),
        user_agent=_env_str(ENV_PREFIX + "USER_AGENT", feed.user_agent),
        listing_timeout_seconds=_env_float(ENV_PREFIX + "LISTING_TIMEOUT_SECONDS", feed.listing_timeout_seconds),
        request_timeout_seconds=_env_float(ENV_PREFIX + "REQUEST_TIMEOUT_SECONDS", feed.request_timeout_seconds),
        hour_window=_env_int(ENV_PREFIX + "HOUR_WINDOW", feed.hour_window),
        max_concurrency=_env_int(ENV_PREFIX + "MAX_CONCURRENCY", feed.max_concurrency),
        request_delay_seconds=_env_float(ENV_PREFIX + "REQUEST_DELAY_SECONDS", feed.request_delay_seconds),
        retries=_env_int(ENV_PREFIX + "RETRIES", feed.retries),
        retry_backoff_seconds=_env_float(ENV_PREFIX + "RETRY_BACKOFF_SECONDS", feed.retry_backoff_seconds),
    )


def _validate(feed: FeedConfig) -> None:
    if not feed.base_url.startswith(("http://", "https://")):
        raise ConfigError(f"feed.base_url must be an http(s) URL: {feed.base_url!r}")
    if feed.hour_window < 1:
        raise ConfigError("feed.hour_window must be >= 1")
    if feed.max_concurrency < 1:
        raise ConfigError("feed.max_concurrency must be >= 1")
    if feed.retries < 0:
        raise ConfigError("feed.retries must be >= 0")
    if feed.request_timeout_seconds <= 0 or feed.listing_timeout_seconds <= 0:
        raise ConfigError("feed timeouts must be positive")


def load_config(path: str | None = None) -> AppConfig:
    """
    Load config from YAML (optional), then apply MAPLEALERTS_* env overrides.

    With no path, MAPLEALERTS_CONFIG is used if set; otherwise defaults.
    """
    cfg_path: Optional[str] = path or _env(ENV_PREFIX + "CONFIG")
    raw: Dict[str, Any] = {}
    if cfg_path:
        loaded = yaml.safe_load(Path(cfg_path).read_text(encoding="utf-8"))
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"config root must be a mapping: {cfg_path}")
        raw = loaded

    feed = _apply_env(_section(raw, "feed", FeedConfig))
    parser = _section(raw, "parser", ParserConfig)
    parser = replace(parser, language=_env_str(ENV_PREFIX + "LANGUAGE", parser.language))

    _validate(feed)
    return AppConfig(feed=feed, parser=parser)
