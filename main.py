import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from config import Settings
from db.database import Base, create_db_engine, create_session_factory

# models を import しておく（create_all がテーブルを認識するため）
from models.user import User  # noqa: F401
from models.task import Task  # noqa: F401

from routers import auth, tasks
from services.errors import StoreError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    settings.validate()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        起動時: Engine 作成・テーブル作成
        終了時: Engine を破棄
        """
        engine = create_db_engine(settings.database_url, echo=settings.sql_echo)
        Base.metadata.create_all(bind=engine)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        logger.info("Database ready")
        try:
            yield
        finally:
            engine.dispose()
            logger.info("Database engine disposed")

    app = FastAPI(title="todo-ranking-backend", lifespan=lifespan)
    app.state.settings = settings
    app.state.started_at = time.time()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router)
    app.include_router(tasks.router)

    @app.exception_handler(StoreError)
    @app.exception_handler(SQLAlchemyError)
    async def _server_error(request: Request, exc: Exception):
        logger.error("Server error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Server Error"})

    # --- 超軽量エンドポイント（DBに触らない） ---
    @app.get("/ping", include_in_schema=False)
    def ping():
        return {
            "ok": True,
            "service": "todo-ranking-backend",
            "ts": datetime.now(timezone.utc).isoformat(),
            "uptime_sec": round(time.time() - app.state.started_at, 2),
        }

    return app


def build_app() -> FastAPI:
    # uvicorn main:build_app --factory
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return create_app(settings)
