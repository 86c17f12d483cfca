"""
Backend clients for the supported LLM providers.
"""

from .ollama_adapter import OllamaClient
from .openai_compatible_adapter import OpenAICompatibleClient

__all__ = [
    "OllamaClient",
    "OpenAICompatibleClient",
]
