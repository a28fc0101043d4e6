from __future__ import annotations

from fastapi import Request

from app.ai.types import AIClient


def get_ai_client(request: Request) -> AIClient | None:
    return getattr(request.app.state, "ai_client", None)
