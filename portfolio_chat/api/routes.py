"""FastAPI endpoints for the portfolio chat service.

POST /chat - run one chat turn
GET /chat - capability/status document
GET /health - component health check
"""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from portfolio_chat.api.schemas import ChatStatus, ErrorResponse, RateLimitInfo
from portfolio_chat.core.chat_turn import Rejected, TurnRequest
from portfolio_chat.core.rate_limiter import get_client_ip

logger = structlog.get_logger(__name__)

router = APIRouter()

CAPABILITIES = [
    "Portfolio information",
    "Project details",
    "Skills and experience",
    "Contact information",
    "Education background",
]


@router.post(
    "/chat",
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse},
               429: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def chat(req: Request):
    """Answer a visitor message. The body is parsed after the rate-limit check."""
    processor = req.app.state.processor
    limit = req.app.state.settings.max_request_bytes
    body = await _read_body(req, limit)
    if body is None:
        logger.warning("chat.body_too_large", limit=limit)
        return JSONResponse(status_code=413, content={"error": "Request too large"})

    turn = TurnRequest(
        body=body,
        client_ip=get_client_ip(req),
        session_id=req.headers.get("x-session-id"),
        user_agent=req.headers.get("user-agent"),
    )
    outcome = await processor.process(turn)

    if isinstance(outcome, Rejected):
        return _rejection_response(outcome)

    return JSONResponse(content=outcome.response.model_dump(mode="json", by_alias=True))


@router.get("/chat", response_model=ChatStatus)
def chat_status(req: Request):
    """Static description of what the chat endpoint offers."""
    settings = req.app.state.settings
    return ChatStatus(
        message="Portfolio chatbot is running",
        version=settings.version,
        capabilities=CAPABILITIES,
        rate_limit=RateLimitInfo(
            max_requests=settings.rate_limit_per_window,
            window_ms=int(settings.rate_limit_window_seconds * 1000),
        ),
    )


@router.get("/health")
def health(req: Request):
    """Check health of the backend components."""
    components = {}

    llm = req.app.state.llm_adapter
    components["llm"] = "ok" if llm.is_healthy() else "error"
    components["rate_limiter"] = "ok"

    errors = [k for k, v in components.items() if v == "error"]
    status = "healthy" if not errors else "degraded"

    return {
        "status": status,
        "components": components,
        "provider": llm.provider,
        "rate_limit_keys": len(req.app.state.rate_limiter),
    }


@router.get("/")
@router.head("/")
def root_health():
    """Basic root health check for deployment platforms."""
    return {"status": "ok", "service": "portfolio-chat"}


async def _read_body(req: Request, limit: int) -> bytes | None:
    """Read the request body, giving up with None once it exceeds limit bytes."""
    chunks = []
    size = 0
    async for chunk in req.stream():
        size += len(chunk)
        if size > limit:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


def _rejection_response(outcome: Rejected) -> JSONResponse:
    headers = {}
    reset_time = None
    if outcome.retry_after is not None:
        headers["Retry-After"] = str(outcome.retry_after)
    if outcome.reset_at is not None:
        reset_time = datetime.fromtimestamp(outcome.reset_at, tz=timezone.utc)

    logger.info("chat.rejected", status=outcome.status_code, error=outcome.error)
    body = ErrorResponse(error=outcome.error, reset_time=reset_time)
    return JSONResponse(
        status_code=outcome.status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        headers=headers,
    )
