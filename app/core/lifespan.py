from contextlib import asynccontextmanager
import logging

from app.ai.feedback_client import OpenAIFeedbackClient, ai_enabled
from app.core.config import settings
from app.services.resume_service import ResumeService
from app.store.files import LocalFileStore
from app.store.kv import SqliteKeyValueStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    store = SqliteKeyValueStore(settings.store_db_path)
    files = LocalFileStore(settings.files_root)
    app.state.resume_service = ResumeService(
        store=store,
        files=files,
        ai=OpenAIFeedbackClient(files),
    )
    logger.info(
        "resume_service_started store=%s files=%s ai_enabled=%s",
        settings.store_db_path,
        settings.files_root,
        ai_enabled(),
    )
    yield
    store.close()
