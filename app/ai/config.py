from __future__ import annotations

import os
from dataclasses import dataclass

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"

_PROVIDER_DEFAULTS: dict[str, tuple[str, str, str | None]] = {
    # provider -> (api key env var, default model, default base url)
    "openrouter": ("OPENROUTER_API_KEY", "mistralai/mistral-small-3.1-24b-instruct:free", OPENROUTER_BASE_URL),
    "gemini": ("GEMINI_API_KEY", "gemini-2.0-flash", GEMINI_OPENAI_BASE_URL),
    "openai": ("OPENAI_API_KEY", "gpt-4o-mini", None),
}


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str | None
    base_url: str | None
    timeout_s: float
    site_url: str | None = None
    app_name: str | None = None

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def load_ai_config() -> AIConfig:
    provider = (os.getenv("AI_PROVIDER") or "openrouter").strip().lower()
    if provider not in _PROVIDER_DEFAULTS:
        raise ValueError(f"Unsupported AI_PROVIDER='{provider}'")

    key_env, default_model, default_base_url = _PROVIDER_DEFAULTS[provider]
    api_key = (os.getenv(key_env) or "").strip()
    if _looks_like_placeholder(api_key):
        api_key = ""

    return AIConfig(
        provider=provider,
        model=(os.getenv("AI_MODEL") or default_model).strip(),
        api_key=api_key or None,
        base_url=(os.getenv("AI_BASE_URL") or "").strip() or default_base_url,
        timeout_s=min(max(_env_float("AI_TIMEOUT_S", 60.0), 1.0), 60.0),
        site_url=(os.getenv("OPENROUTER_SITE_URL") or os.getenv("CLIENT_ORIGIN") or "").strip() or None,
        app_name=(os.getenv("OPENROUTER_APP_NAME") or "ResumeIQ").strip(),
    )
