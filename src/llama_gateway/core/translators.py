"""
Translation between the gateway's wire formats and the neutral chat model.

Default resolution happens here, once per inbound call, so backend clients
only ever see a fully-populated ``ChatInput``.
"""

import time
import uuid
from dataclasses import dataclass
from typing import Optional, TypeVar

from .config import LlamaConfig
from ..models.chat import ChatMessage, ChatInput, ChatResult
from ..models.request import GenerateRequest, OpenAIChatRequest, DEFAULT_SYSTEM_PROMPT
from ..models.response import OpenAIChatResponse, Choice, ResponseMessage

FALLBACK_MAX_TOKENS = 512
FALLBACK_TEMPERATURE = 0.7
FALLBACK_TOP_P = 1.0

T = TypeVar("T")


def _first(*values: Optional[T]) -> Optional[T]:
    for value in values:
        if value is not None:
            return value
    return None


@dataclass(frozen=True)
class ChatDefaults:
    """Effective defaults, resolved from configuration at startup."""
    model: Optional[str] = None
    global_model: Optional[str] = None
    max_tokens: int = FALLBACK_MAX_TOKENS
    temperature: float = FALLBACK_TEMPERATURE
    top_p: float = FALLBACK_TOP_P

    @classmethod
    def from_config(cls, config: LlamaConfig) -> "ChatDefaults":
        """Provider model, then global model; global sampling defaults, then built-ins."""
        return cls(
            model=_first(config.provider_model, config.model),
            global_model=config.model,
            max_tokens=_first(config.defaults.max_tokens, FALLBACK_MAX_TOKENS),
            temperature=_first(config.defaults.temperature, FALLBACK_TEMPERATURE),
            top_p=_first(config.defaults.top_p, FALLBACK_TOP_P),
        )


def generate_to_chat_input(request: GenerateRequest, defaults: ChatDefaults) -> ChatInput:
    """Native request: always a system message followed by one user message."""
    messages = [
        ChatMessage(role="system", content=_first(request.system_prompt, DEFAULT_SYSTEM_PROMPT)),
        ChatMessage(role="user", content=request.prompt or ""),
    ]
    return ChatInput(
        model=_first(request.model, defaults.model),
        messages=messages,
        max_tokens=_first(request.max_tokens, defaults.max_tokens),
        temperature=_first(request.temperature, defaults.temperature),
        top_p=_first(request.top_p, defaults.top_p),
    )


def openai_to_chat_input(request: OpenAIChatRequest, defaults: ChatDefaults) -> ChatInput:
    """OpenAI-compatible request: messages pass through in order."""
    return ChatInput(
        model=_first(request.model, defaults.model),
        messages=[ChatMessage(role=m.role, content=m.content) for m in request.messages],
        max_tokens=_first(request.max_tokens, defaults.max_tokens),
        temperature=_first(request.temperature, defaults.temperature),
        top_p=_first(request.top_p, defaults.top_p),
    )


def chat_result_to_native(result: ChatResult) -> ChatResult:
    """The native route returns the neutral result unwrapped."""
    return result


def chat_result_to_openai(result: ChatResult, defaults: ChatDefaults) -> OpenAIChatResponse:
    """
    Wrap a result in a single-choice ``chat.completion`` envelope.

    A result without a model falls back to the global configured model only.
    """
    return OpenAIChatResponse(
        id=f"chatcmpl_{uuid.uuid4()}",
        object="chat.completion",
        created=int(time.time()),
        model=result.model or defaults.global_model or "",
        choices=[
            Choice(
                index=0,
                finish_reason=result.finish_reason or "stop",
                message=ResponseMessage(role="assistant", content=result.content or ""),
            )
        ],
    )
