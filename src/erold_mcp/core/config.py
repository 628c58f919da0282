from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_API_URL = "https://api.erold.dev/api/v1"

API_KEY_ENV = "EROLD_API_KEY"
TENANT_ENV = "EROLD_TENANT"
API_URL_ENV = "EROLD_API_URL"
LOG_LEVEL_ENV = "EROLD_LOG_LEVEL"


@dataclass(frozen=True)
class ClientConfig:
    api_url: str
    api_key: str
    tenant: str


def get_config(*, use_dotenv: bool = False) -> ClientConfig:
    """
    Resolve API URL, key and tenant from the environment (optional .env).

    Read on every call; nothing is cached, so environment changes apply to
    the next request.
    """
    if use_dotenv:
        load_dotenv()

    api_key = os.getenv(API_KEY_ENV, "").strip()
    tenant = os.getenv(TENANT_ENV, "").strip()
    api_url = os.getenv(API_URL_ENV, "").strip() or DEFAULT_API_URL

    if not api_key:
        raise ConfigurationError(
            f"{API_KEY_ENV} environment variable is required.\n"
            "Get your API key from: Settings > API Keys in Erold"
        )
    if not tenant:
        raise ConfigurationError(
            f"{TENANT_ENV} environment variable is required.\n"
            "Set this to your tenant ID or slug."
        )

    return ClientConfig(api_url=api_url.rstrip("/"), api_key=api_key, tenant=tenant)


def validate_config(*, use_dotenv: bool = True) -> ClientConfig:
    """Startup check: print the problem to stderr and exit 1 when invalid."""
    try:
        return get_config(use_dotenv=use_dotenv)
    except ConfigurationError as exc:
        print(f"Configuration Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


def log_level_from_env(default: str = "INFO") -> str:
    return os.getenv(LOG_LEVEL_ENV, "").strip() or default


__all__ = [
    "ClientConfig",
    "get_config",
    "validate_config",
    "log_level_from_env",
    "DEFAULT_API_URL",
    "API_KEY_ENV",
    "TENANT_ENV",
    "API_URL_ENV",
]
