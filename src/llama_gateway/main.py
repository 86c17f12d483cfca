"""
Llama Gateway Service

A FastAPI service exposing one chat-completion interface in front of
either a self-hosted Ollama server or an OpenAI-compatible API.

Endpoints:
  GET  /healthz              - Liveness check
  POST /generate             - Native single-prompt completion
  POST /v1/chat/completions  - OpenAI-compatible completion
"""

import os
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .core.config import LlamaConfig, load_config
from .core.errors import GatewayError
from .core.interface import AbstractModelClient
from .core.registry import create_model_client
from .core.translators import (
    ChatDefaults,
    generate_to_chat_input,
    openai_to_chat_input,
    chat_result_to_native,
    chat_result_to_openai,
)
from .models.chat import ChatResult
from .models.request import GenerateRequest, OpenAIChatRequest
from .models.response import OpenAIChatResponse, HealthResponse

LOG_LEVEL = os.getenv("LOG_LEVEL", "info").upper()

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(
    config: Optional[LlamaConfig] = None,
    client: Optional[AbstractModelClient] = None,
) -> FastAPI:
    """
    Create the gateway application.

    Args:
        config: Gateway configuration. Loaded with ``load_config`` at
                startup when not given.
        client: Backend client. Selected from configuration when not given.

    Returns:
        Configured FastAPI application
    """

    # Set during startup
    model_client: Optional[AbstractModelClient] = None
    defaults: Optional[ChatDefaults] = None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        nonlocal model_client, defaults

        logger.info("Llama Gateway starting up")

        cfg = config or load_config()
        model_client = client or create_model_client(cfg)
        defaults = ChatDefaults.from_config(cfg)
        logger.info(f"Provider: {model_client.name}")
        logger.info(f"Default model: {defaults.model or '<backend default>'}")

        await model_client.connect()

        yield

        logger.info("Llama Gateway shutting down")
        await model_client.disconnect()

    app = FastAPI(
        title="Llama API",
        version="v1",
        lifespan=lifespan,
    )

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/healthz", response_model=HealthResponse)
    async def healthz():
        """Liveness check."""
        return HealthResponse(ok=True, ts=datetime.now(timezone.utc))

    @app.post("/generate", response_model=ChatResult)
    async def generate(request: GenerateRequest):
        """Native completion: one system prompt plus one user prompt."""
        chat_input = generate_to_chat_input(request, defaults)
        result = await model_client.chat(chat_input)
        return chat_result_to_native(result)

    @app.post("/v1/chat/completions", response_model=OpenAIChatResponse)
    async def chat_completions(request: OpenAIChatRequest):
        """OpenAI-compatible completion."""
        chat_input = openai_to_chat_input(request, defaults)
        result = await model_client.chat(chat_input)
        return chat_result_to_openai(result, defaults)

    return app


app = create_app()


def main() -> None:
    """Run the gateway with uvicorn."""
    import uvicorn
    port = int(os.getenv("PORT", "8080"))
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=port)


if __name__ == "__main__":
    main()
