"""Application-wide settings helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    viacep_base_url: str = "https://viacep.com.br"
    ibge_base_url: str = "https://servicodados.ibge.gov.br"
    pluggy_base_url: str = "https://api.pluggy.ai"
    pluggy_client_id: Optional[str] = None
    pluggy_client_secret: Optional[str] = None
    make_webhook_url: Optional[str] = None
    http_timeout_seconds: float = 10.0
    validation_debounce_ms: int = 300
    submit_url: str = "http://localhost:3000/api/cadastro"
    port: int = 3000
    log_json: bool = True


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(int(raw), 0)
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _optional_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv()
    return Settings(
        viacep_base_url=os.getenv("VIACEP_BASE_URL", Settings.viacep_base_url),
        ibge_base_url=os.getenv("IBGE_BASE_URL", Settings.ibge_base_url),
        pluggy_base_url=os.getenv("PLUGGY_BASE_URL", Settings.pluggy_base_url),
        pluggy_client_id=_optional_env("PLUGGY_CLIENT_ID"),
        pluggy_client_secret=_optional_env("PLUGGY_CLIENT_SECRET"),
        make_webhook_url=_optional_env("MAKE_WEBHOOK_URL"),
        http_timeout_seconds=_float_env("HTTP_TIMEOUT_SECONDS", Settings.http_timeout_seconds),
        validation_debounce_ms=_int_env("VALIDATION_DEBOUNCE_MS", Settings.validation_debounce_ms),
        submit_url=os.getenv("SUBMIT_URL", Settings.submit_url),
        port=_int_env("PORT", Settings.port),
        log_json=_bool_env("LOG_JSON", Settings.log_json),
    )
