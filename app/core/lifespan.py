from contextlib import asynccontextmanager
import logging
import random

from app.core.config import Settings, settings
from app.core.history_storage import KeyValueStorage, build_history_storage
from app.services.analysis_controller import AnalysisController
from app.services.analysis_engine import AnalysisEngine
from app.services.session_store import SessionStore

logger = logging.getLogger(__name__)


def build_controller(config: Settings = settings, storage: KeyValueStorage | None = None) -> AnalysisController:
    store = SessionStore(
        storage or build_history_storage(),
        key=config.history_storage_key,
        max_items=config.history_max_items,
    )
    store.load()
    rng = random.Random(config.random_seed) if config.random_seed is not None else random.Random()
    return AnalysisController(
        store,
        AnalysisEngine(rng),
        analysis_delay=config.analysis_delay_seconds,
        humanize_delay=config.humanize_delay_seconds,
        min_text_chars=config.min_text_chars,
        max_upload_bytes=config.max_upload_bytes,
    )


@asynccontextmanager
async def lifespan(app):
    app.state.settings = settings
    controller = build_controller()
    app.state.controller = controller
    logger.info(
        "session_store_loaded backend=%s history_items=%s",
        settings.history_storage_backend,
        len(controller.history()),
    )
    yield
    close = getattr(controller.store.storage, "close", None)
    if callable(close):
        close()
