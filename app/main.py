"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.errors import GENERIC_ERROR_MESSAGE, RelayError
from app.routers import chat

# ── Logging setup ────────────────────────────────────────────────────
_log_level = settings.log_level.upper()
logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)
# Always show relay debug messages so run polling can be traced
logging.getLogger("app.services.chat_service").setLevel(logging.DEBUG)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.assistant_configured:
        logger.info("Assistant %s configured", settings.openai_assistant_id)
    else:
        # Requests still fail per-turn with a config error; startup goes ahead
        logger.warning(
            "OPENAI_API_KEY / OPENAI_ASSISTANT_ID not set — chat requests will fail"
        )
    yield


app = FastAPI(
    title="Coastal Chat",
    description="Chat relay for the babysitter handbook assistant",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    logger.error("Chat API error [%s]: %s", exc.code, exc.message)
    return JSONResponse(status_code=500, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # The widget only understands {"error": ...}, so malformed bodies answer like any failed turn
    logger.error("Chat API error [INVALID_REQUEST]: %s", exc.errors())
    return JSONResponse(status_code=500, content={"error": "Invalid request body"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Chat API error: %s", exc)
    return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})


# Mount routers
app.include_router(chat.router, prefix="/api/chat", tags=["chat"])


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "service": "coastalchat",
        "assistant_configured": settings.assistant_configured,
    }
