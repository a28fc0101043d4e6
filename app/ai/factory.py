from __future__ import annotations

import logging

from app.ai.config import AIConfig, load_ai_config
from app.ai.providers.openai_provider import OpenAICompatibleProvider
from app.ai.types import AIClient

logger = logging.getLogger(__name__)


def build_ai_client(cfg: AIConfig | None = None) -> AIClient | None:
    """Return a configured client, or None when no API key is available."""
    cfg = cfg or load_ai_config()
    if not cfg.has_api_key:
        logger.info("ai_client_disabled provider=%s reason=missing_api_key", cfg.provider)
        return None

    extra_headers: dict[str, str] = {}
    if cfg.provider == "openrouter":
        if cfg.site_url:
            extra_headers["HTTP-Referer"] = cfg.site_url
        if cfg.app_name:
            extra_headers["X-Title"] = cfg.app_name

    return OpenAICompatibleProvider(
        model=cfg.model,
        api_key=cfg.api_key,
        base_url=cfg.base_url,
        timeout_s=cfg.timeout_s,
        max_retries=0,
        default_headers=extra_headers or None,
    )
