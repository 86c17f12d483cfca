"""
Llama Gateway

A protocol-translation gateway for chat completions:
- Native single-prompt API and OpenAI-compatible API
- Neutral request/response model
- Ollama and OpenAI-compatible backends, selected from configuration
"""

from .core import AbstractModelClient, ChatDefaults, LlamaConfig, load_config
from .adapters import OllamaClient, OpenAICompatibleClient
from .core.registry import create_model_client
from .models import ChatMessage, ChatInput, ChatResult

__version__ = "1.0.0"

__all__ = [
    "AbstractModelClient",
    "ChatDefaults",
    "LlamaConfig",
    "load_config",
    "OllamaClient",
    "OpenAICompatibleClient",
    "create_model_client",
    "ChatMessage",
    "ChatInput",
    "ChatResult",
]
