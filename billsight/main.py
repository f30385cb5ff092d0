"""
Billsight — FastAPI app factory; each app owns one SessionStore.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from billsight.api.router_dashboard import router as dashboard_router
from billsight.api.router_export import router as export_router
from billsight.api.router_meta import router as meta_router
from billsight.api.router_upload import router as upload_router
from billsight.data.store import SessionStore
from billsight.logging_setup import configure_logging, get_logger

logger = get_logger("billsight.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    app.state.session = SessionStore()
    logger.info("Billsight ready — upload WeChat Pay or Alipay exports to begin")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Billsight API",
        description="Personal bill analytics — WeChat Pay / Alipay export ingestion and summaries",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(upload_router)
    app.include_router(dashboard_router)
    app.include_router(export_router)

    return app


app = create_app()
