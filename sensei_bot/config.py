"""
Centralized configuration with environment variable overrides.

Brand copy, checkout destinations, campaign attribution, CORS origins and
session storage settings are configurable here. Nothing is hardcoded in
engine or transport logic.
"""

import logging
import os
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from dotenv import load_dotenv

from sensei_bot.logging_context import build_log_handler

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] [%(session_id)s] %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SESSION_STORE_BACKENDS = ("memory", "redis")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_list(env_var: str, default: str) -> tuple[str, ...]:
    """Parse a comma-separated env var into a tuple of stripped, non-empty items."""
    raw = os.getenv(env_var, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _is_http_url(value: str) -> bool:
    parts = urlsplit(value)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


@dataclass(frozen=True)
class BrandConfig:
    """Visitor-facing brand settings."""

    name: str = os.getenv("BRAND_NAME", "Shotokan Karate Rebel")
    bot_name: str = os.getenv("BOT_NAME", "Shotokan Sensei-bot")
    price_label: str = os.getenv("PRICE_LABEL", "£27")


@dataclass(frozen=True)
class CheckoutConfig:
    """Checkout destinations and campaign attribution."""

    kumite_url: str = os.getenv(
        "CHECKOUT_URL_KUMITE", "https://cart.strategicrebel.com/kumite-strategy-playbook/"
    )
    kata_url: str = os.getenv(
        "CHECKOUT_URL_KATA", "https://shotokankaraterebel.com/coming-soon/"
    )
    cond_url: str = os.getenv(
        "CHECKOUT_URL_COND", "https://shotokankaraterebel.com/coming-soon/"
    )
    mind_url: str = os.getenv(
        "CHECKOUT_URL_MIND", "https://checkout.yourdomain.com/mental-dojo"
    )
    utm_source: str = os.getenv("UTM_SOURCE", "sensei_bot")
    utm_campaign: str = os.getenv("UTM_CAMPAIGN", "skr")


@dataclass(frozen=True)
class ServerConfig:
    """HTTP boundary settings."""

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = _safe_int("PORT", "8000")
    chat_path: str = os.getenv("CHAT_PATH", "/api/chat")
    allowed_origins: tuple[str, ...] = _safe_list(
        "ALLOWED_ORIGINS",
        "https://shotokankaraterebel.com,"
        "https://www.shotokankaraterebel.com,"
        "http://localhost:3000,"
        "https://sensei-bot.vercel.app",
    )


@dataclass(frozen=True)
class StoreConfig:
    """Server-side session cache settings."""

    backend: str = os.getenv("SESSION_STORE_BACKEND", "memory")
    redis_url: str = os.getenv("REDIS_URL", "")
    ttl_seconds: int = _safe_int("SESSION_TTL_SECONDS", "86400")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    brand: BrandConfig = field(default_factory=BrandConfig)
    checkout: CheckoutConfig = field(default_factory=CheckoutConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    for env_name, url in [
        ("CHECKOUT_URL_KUMITE", config.checkout.kumite_url),
        ("CHECKOUT_URL_KATA", config.checkout.kata_url),
        ("CHECKOUT_URL_COND", config.checkout.cond_url),
        ("CHECKOUT_URL_MIND", config.checkout.mind_url),
    ]:
        if not _is_http_url(url):
            raise ValueError(f"{env_name} must be an absolute http(s) URL, got {url!r}")

    if not config.checkout.utm_source or not config.checkout.utm_campaign:
        raise ValueError("UTM_SOURCE and UTM_CAMPAIGN must not be empty")

    for origin in config.server.allowed_origins:
        parts = urlsplit(origin)
        if "*" in origin or not _is_http_url(origin) or parts.path not in ("", "/"):
            raise ValueError(
                f"ALLOWED_ORIGINS entries must be scheme://host[:port], got {origin!r}"
            )

    if not 1 <= config.server.port <= 65535:
        raise ValueError(f"PORT must be between 1 and 65535, got {config.server.port}")

    if not config.server.chat_path.startswith("/"):
        raise ValueError(f"CHAT_PATH must start with '/', got {config.server.chat_path!r}")

    if config.store.backend not in SESSION_STORE_BACKENDS:
        raise ValueError(
            f"SESSION_STORE_BACKEND must be one of {SESSION_STORE_BACKENDS}, "
            f"got {config.store.backend!r}"
        )
    if config.store.backend == "redis" and not config.store.redis_url:
        raise ValueError("SESSION_STORE_BACKEND=redis requires REDIS_URL")
    if config.store.ttl_seconds < 1:
        raise ValueError(
            f"SESSION_TTL_SECONDS must be >= 1, got {config.store.ttl_seconds}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        handlers=[build_log_handler(LOG_FORMAT, LOG_DATE_FORMAT)],
    )
    logger.info("Configuration loaded for '%s'", config.brand.name)
    return config


# Singleton instance
settings = load_config()
