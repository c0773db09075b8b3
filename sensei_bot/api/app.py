"""
HTTP boundary for the funnel.

Accepts the widget's chat envelope, hands it to the ChatService, and
returns the engine's output verbatim. Applies the CORS policy to every
response, including preflights and errors.

Usage:
    uvicorn sensei_bot.api.app:app
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from sensei_bot.api.cors import CorsPolicy
from sensei_bot.config import AppConfig, settings
from sensei_bot.conversation.engine import ConversationEngine
from sensei_bot.conversation.sync import ChatService
from sensei_bot.schemas.chat_schema import ChatRequest, ChatResponse
from sensei_bot.store.session_store import SessionStore, create_session_store
from sensei_bot.tools.checkout import MalformedDestinationError

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    store: Optional[SessionStore] = None,
    engine: Optional[ConversationEngine] = None,
) -> FastAPI:
    """Create the FastAPI application."""
    config = config or settings
    cors = CorsPolicy(allowed_origins=config.server.allowed_origins)
    service = ChatService(store=store or create_session_store(config.store.backend), engine=engine)

    app = FastAPI(title=config.brand.bot_name)
    app.state.config = config
    app.state.cors = cors
    app.state.chat_service = service

    @app.middleware("http")
    async def apply_cors(request: Request, call_next):
        origin = request.headers.get("origin")
        if origin is not None and not cors.is_allowed(origin):
            logger.warning("Rejected request from origin %r", origin)
            return JSONResponse(
                {"error": "origin_not_allowed"},
                status_code=403,
                headers=cors.headers_for(origin),
            )

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = JSONResponse({"error": "internal_error"}, status_code=500)
        response.headers.update(cors.headers_for(origin))
        return response

    @app.exception_handler(MalformedDestinationError)
    async def checkout_misconfigured(request: Request, exc: MalformedDestinationError):
        logger.error("Checkout destination misconfigured: %s", exc)
        return JSONResponse({"error": "checkout_unavailable"}, status_code=500)

    @app.options(config.server.chat_path, include_in_schema=False)
    def chat_preflight() -> Response:
        return Response(status_code=204)

    @app.post(
        config.server.chat_path,
        response_model=ChatResponse,
        response_model_exclude_none=True,
    )
    def chat(payload: ChatRequest) -> ChatResponse:
        return service.handle(payload)

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
