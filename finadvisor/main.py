import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from finadvisor.config import Settings
from finadvisor.data.base import build_engine, create_session_factory, create_tables
from finadvisor.presentation.category_api import router as categories_router
from finadvisor.presentation.errors import register_error_handlers
from finadvisor.presentation.expense_api import router as expenses_router
from finadvisor.presentation.goal_api import router as goals_router
from finadvisor.presentation.income_api import router as incomes_router
from finadvisor.presentation.user_api import router as users_router

logger = logging.getLogger(__name__)


def create_app(engine: Engine | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Build the API. The store handle lives as long as the process: when no
    engine is passed one is built from DATABASE_URL at startup and disposed
    at shutdown.
    """
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_engine = engine is None
        app_engine = engine or build_engine(settings.require_database_url())
        create_tables(app_engine)
        app.state.engine = app_engine
        app.state.session_factory = create_session_factory(app_engine)
        logger.info("Store ready (%s)", app_engine.url.render_as_string(hide_password=True))
        try:
            yield
        finally:
            if owns_engine:
                app_engine.dispose()
                logger.info("Store connection closed")

    app = FastAPI(title="FinAdvisor API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    @app.get("/")
    def read_root():
        return {"message": "FinAdvisor API"}

    app.include_router(users_router)
    app.include_router(categories_router)
    app.include_router(expenses_router)
    app.include_router(incomes_router)
    app.include_router(goals_router)
    return app


app = create_app()


def run(settings: Settings | None = None) -> None:
    settings = settings or Settings.from_env()
    uvicorn.run(
        "finadvisor.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
