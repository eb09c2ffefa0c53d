"""EvalBoard FastAPI application."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from evalboard.api.evaluations import router as evaluations_router
from evalboard.api.health import router as health_router
from evalboard.api.ingest import router as ingest_router
from evalboard.api.settings import router as settings_router
from evalboard.config import settings
from evalboard.errors import StorageError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"

app = FastAPI(
    title="EvalBoard",
    description="Ingests AI-agent evaluation results under per-user quota, sampling and PII policies",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["Health"])
app.include_router(ingest_router, prefix="/api", tags=["Ingestion"])
app.include_router(evaluations_router, prefix="/v1", tags=["Evaluations"])
app.include_router(settings_router, prefix="/v1", tags=["Settings"])


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Storage unavailable"})


@app.get("/")
async def root():
    """Root endpoint."""
    return {"service": "EvalBoard", "version": VERSION, "docs": "/docs"}
