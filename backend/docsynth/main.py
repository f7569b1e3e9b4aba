from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from .api.deps import get_discovery_service
from .api.routes import documents, health
from .core.config import settings

logger = logging.getLogger("docsynth.backend")
logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.probe_on_startup:
        state = await run_in_threadpool(get_discovery_service().probe_enumeration_reliability)
        logger.info("Search enumeration reliable: %s", state.enumeration_is_reliable)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(health.router, prefix="/api")
app.include_router(documents.router, prefix="/api")


__all__ = ["app"]
