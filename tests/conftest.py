"""
Shared fixtures: simulated backends built on ``httpx.MockTransport``.
"""

import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from llama_gateway.core.config import LlamaConfig


class FakeBackend:
    """Records requests and replies with a canned response."""

    def __init__(self, status_code: int = 200, body: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.text = text
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def ollama_config():
    """Config selecting the Ollama backend."""
    return LlamaConfig.from_dict({
        "llama": {
            "provider": "Ollama",
            "ollama": {"base_url": "http://ollama:11434", "model": "llama3.1:8b"},
        }
    })


@pytest.fixture
def openai_config():
    """Config selecting the OpenAI-compatible backend."""
    return LlamaConfig.from_dict({
        "llama": {
            "provider": "OpenAICompatible",
            "model": "global-model",
            "openai_compatible": {
                "base_url": "http://vllm:8000",
                "api_key": "sk-test",
                "model": "gpt-4o-mini",
            },
        }
    })


@pytest.fixture
def ollama_reply():
    return {
        "model": "llama3.1:8b",
        "message": {"role": "assistant", "content": "Hello from Ollama"},
        "done": True,
        "done_reason": "stop",
    }


@pytest.fixture
def openai_reply():
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "Hello!"},
                "finish_reason": "length",
            }
        ],
    }
