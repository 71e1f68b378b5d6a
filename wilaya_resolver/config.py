"""Application configuration and constants."""
from __future__ import annotations

import os
from dataclasses import dataclass


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


@dataclass(frozen=True)
class Settings:
    """Simple settings container with environment variable overrides."""

    communes_fr_path: str = _get_env("COMMUNES_FR_PATH", "data/communes_fr.json")
    communes_fr_extra_path: str = _get_env("COMMUNES_FR_EXTRA_PATH", "data/communes_fr_extra.json")
    communes_ar_path: str = _get_env("COMMUNES_AR_PATH", "data/communes_ar.json")
    index_path: str = _get_env("INDEX_PATH", "data/communes.generated.json")
    default_wilaya: int = int(_get_env("DEFAULT_WILAYA", "16"))
    log_level: str = _get_env("LOG_LEVEL", "INFO")
    api_host: str = _get_env("API_HOST", "127.0.0.1")
    api_port: int = int(_get_env("API_PORT", "8000"))


settings = Settings()
