"""
Gateway data models.
"""

from .chat import ChatMessage, ChatInput, ChatResult
from .request import GenerateRequest, OpenAIChatRequest, OpenAIMessage, DEFAULT_SYSTEM_PROMPT
from .response import OpenAIChatResponse, Choice, ResponseMessage, HealthResponse

__all__ = [
    "ChatMessage",
    "ChatInput",
    "ChatResult",
    "GenerateRequest",
    "OpenAIChatRequest",
    "OpenAIMessage",
    "DEFAULT_SYSTEM_PROMPT",
    "OpenAIChatResponse",
    "Choice",
    "ResponseMessage",
    "HealthResponse",
]
