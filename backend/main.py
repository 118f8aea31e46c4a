"""
LearnHub AI Content Backend

Serves the AI provider settings, the chat gateway and the generators for
topics, exercises, hints, test cases, quizzes and topic reviews.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from learnhub.api import api_router
from learnhub.core.config import get_config, get_log_path
from learnhub.core.datetime_utils import now_iso
from learnhub.core.errors import LearnHubError
from learnhub.core.logging import get_logger, setup_logging

APP_NAME = "LearnHub AI Content Backend"
APP_VERSION = "0.1.0"

_startup_time = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup; tables are created by scripts/init_db.py."""
    global _startup_time
    _startup_time = now_iso()
    logger = setup_logging()
    logger.info("Starting %s %s", APP_NAME, APP_VERSION)
    logger.debug("Log level: %s, log file: %s", get_config().logging.level, get_log_path())

    yield

    logger.info("Shutting down %s", APP_NAME)


app = FastAPI(
    title=APP_NAME,
    description="Multi-provider AI gateway and learning content generation",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger = get_logger()
    response = await call_next(request)
    logger.debug("%s %s -> %s", request.method, request.url.path, response.status_code)
    return response


@app.exception_handler(LearnHubError)
async def learnhub_error_handler(request: Request, exc: LearnHubError):
    """Render application errors as {"detail": message}; raw AI output stays in the log."""
    logger = get_logger()
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().server.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"name": APP_NAME, "version": APP_VERSION, "status": "running"}


@app.get("/health")
async def health_check():
    """Liveness probe with process start time."""
    return {"status": "healthy", "startup_time": _startup_time, "timestamp": now_iso()}


if __name__ == "__main__":
    import uvicorn

    server = get_config().server
    uvicorn.run("main:app", host=server.host, port=server.port, reload=server.debug)
