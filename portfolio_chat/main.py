"""FastAPI application entry point.

Wiring: settings -> logging -> rate limiter -> LLM adapter -> response
selector -> chat turn processor, all hung off app.state.
"""

import random
from collections.abc import Callable
from contextlib import asynccontextmanager

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from portfolio_chat.api.routes import router
from portfolio_chat.core.chat_turn import ChatTurnProcessor
from portfolio_chat.core.llm_adapter import LLMAdapter
from portfolio_chat.core.logging import configure_logging
from portfolio_chat.core.rate_limiter import FixedWindowRateLimiter
from portfolio_chat.core.responder import ResponseSelector
from portfolio_chat.core.settings import Settings, load_settings
from portfolio_chat.core.validator import is_valid_origin

load_dotenv()

logger = structlog.get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    llm_adapter: LLMAdapter | None = None,
    rng: random.Random | None = None,
    clock: Callable[[], float] | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Configuration; read from the environment when omitted.
        llm_adapter: External model adapter; built from settings when omitted.
        rng: Random source for the external/local split and canned replies.
        clock: Time source for the rate limiter (epoch seconds).

    Returns:
        Configured FastAPI instance.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level, settings.log_json)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        logger.info("startup.complete", version=settings.version,
                    llm_configured=app.state.llm_adapter.is_healthy(),
                    provider=app.state.llm_adapter.provider,
                    rate_limit=settings.rate_limit_per_window,
                    allowed_origins=len(settings.allowed_origins))
        yield
        logger.info("shutdown.complete")

    app = FastAPI(
        title="Portfolio Chat API",
        description="Chat backend for a personal portfolio site",
        version=settings.version,
        lifespan=lifespan,
    )

    limiter_kwargs = {"clock": clock} if clock else {}
    rate_limiter = FixedWindowRateLimiter(
        max_requests=settings.rate_limit_per_window,
        window_seconds=settings.rate_limit_window_seconds,
        max_keys=settings.rate_limit_max_keys,
        **limiter_kwargs,
    )
    llm_adapter = llm_adapter or LLMAdapter(settings)
    responder = ResponseSelector(
        llm_adapter,
        rng=rng,
        external_ratio=settings.external_ratio,
        timeout=settings.llm_timeout,
        min_external_length=settings.min_external_length,
        context_turns=settings.context_turns,
    )

    app.state.settings = settings
    app.state.rate_limiter = rate_limiter
    app.state.llm_adapter = llm_adapter
    app.state.processor = ChatTurnProcessor(settings, rate_limiter, responder)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_guard_middleware(request: Request, call_next):
        """Enforce HTTPS, request size, and origin allow-list before routing."""
        if settings.require_https:
            scheme = request.headers.get("x-forwarded-proto", request.url.scheme)
            if scheme.split(",")[0].strip().lower() != "https":
                logger.warning("guard.https_required", path=request.url.path)
                return JSONResponse(status_code=403, content={"error": "HTTPS required"})

        content_length = request.headers.get("content-length")
        if content_length:
            try:
                too_large = int(content_length) > settings.max_request_bytes
            except ValueError:
                return JSONResponse(status_code=400, content={"error": "Invalid Content-Length"})
            if too_large:
                logger.warning("guard.request_too_large", size=content_length)
                return JSONResponse(status_code=413, content={"error": "Request too large"})

        origin = request.headers.get("origin")
        if settings.allowed_origins and origin:
            if not is_valid_origin(origin, settings.allowed_origins):
                logger.warning("guard.invalid_origin", origin=origin[:100])
                return JSONResponse(status_code=403, content={"error": "Invalid origin"})

        return await call_next(request)

    app.include_router(router)
    return app


app = create_app()
