import logging
from contextlib import asynccontextmanager

from app.ai.factory import build_ai_client
from app.core.config import settings
from app.core.config.vocabulary import load_vocabulary

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # Fail fast on a broken vocabulary file instead of on the first request.
    vocabulary = load_vocabulary()
    logger.info(
        "ats_vocabulary_loaded priority_keywords=%s stop_words=%s section_groups=%s",
        len(vocabulary.priority_keywords),
        len(vocabulary.stop_words),
        len(vocabulary.section_hints),
    )

    app.state.ai_client = build_ai_client() if settings.ats_ai_enabled else None
    yield
    app.state.ai_client = None
