"""Chat endpoint — relays one user turn to the assistant and returns its reply."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.errors import GENERIC_ERROR_MESSAGE, RelayError
from app.schemas.chat import ChatRequest, ChatResponse, ErrorResponse
from app.services.chat_service import ConversationRelay, get_relay

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ChatResponse, responses={500: {"model": ErrorResponse}})
async def chat(req: ChatRequest, relay: ConversationRelay = Depends(get_relay)):
    """Relay a message.

    Client sends: {"message": "...", "threadId": "..." | null}
    Server sends: {"response": "...", "threadId": "..."}

    The first turn omits ``threadId``; the returned handle must be sent back
    on every later turn so the assistant sees the whole conversation.
    Failures come back as HTTP 500 ``{"error": "..."}``; relay errors carry
    their own message (see ``app.main``), anything else a generic one.
    """
    try:
        return await relay.relay(req.message, req.thread_id)
    except RelayError:
        raise
    except Exception:
        logger.exception("Chat relay failed for thread %s", req.thread_id)
        return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})
