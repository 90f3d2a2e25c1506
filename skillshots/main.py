import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skillshots.ai.router import router as ai_router
from skillshots.ai.services import ContentGenerationService
from skillshots.auth.router import router as auth_router
from skillshots.authoring.service import DraftBoard
from skillshots.catalog.persistence import MongoSnapshotStore, SnapshotStore
from skillshots.catalog.store import Catalog
from skillshots.core.config import Configuration, load_configuration
from skillshots.core.errors import register_error_handlers
from skillshots.core.logs import configure_logging
from skillshots.creator.router import router as creator_router
from skillshots.learning.router import router as learning_router
from skillshots.notifications.mailer import Mailer
from skillshots.progress.tracker import ProgressTracker
from skillshots.quiz.evaluator import QuizSessions

logger = logging.getLogger(__name__)


def create_app(
    configuration: Optional[Configuration] = None,
    snapshot_store: Optional[SnapshotStore] = None,
    generator: Optional[ContentGenerationService] = None,
) -> FastAPI:
    """
    Build the SkillShots API.

    Without arguments everything comes from the environment and the catalog
    is persisted in MongoDB. Tests pass an in-memory store and a fake
    generator instead.
    """
    config = configuration or load_configuration()
    configure_logging(config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = snapshot_store
        if store is None:
            store = MongoSnapshotStore(config.mongo_url, config.mongo_db_name)
            await store.create_indexes()

        catalog = Catalog(store, config)
        await catalog.bootstrap()

        app.state.config = config
        app.state.catalog = catalog
        app.state.tracker = ProgressTracker(catalog)
        app.state.quiz_sessions = QuizSessions()
        app.state.drafts = DraftBoard()
        app.state.generator = generator or ContentGenerationService(config)
        app.state.mailer = Mailer(config)
        logger.info("SkillShots %s started", config.version)

        yield

        await store.close()

    app = FastAPI(title="SkillShots API", version=config.version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # ==================== ROUTER REGISTRATION ====================
    app.include_router(auth_router)
    app.include_router(learning_router)
    app.include_router(creator_router)
    app.include_router(ai_router)
    # ============================================================

    @app.get("/health")
    async def health():
        return {"status": "ok", "timestamp": datetime.utcnow().isoformat()}

    @app.get("/version")
    async def version():
        return {"version": config.version}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
