"""
Integration tests for the gateway HTTP routes.

Tests:
- Health check
- Native /generate round trip
- OpenAI-compatible /v1/chat/completions envelope
- Error propagation from the backend
"""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from llama_gateway.adapters.ollama_adapter import OllamaClient
from llama_gateway.adapters.openai_compatible_adapter import OpenAICompatibleClient
from llama_gateway.core.errors import GatewayConfigurationError
from llama_gateway.core.registry import create_model_client
from llama_gateway.main import create_app

from conftest import FakeBackend


@pytest.fixture
def ollama_backend(ollama_reply):
    return FakeBackend(body=ollama_reply)


@pytest.fixture
def ollama_api(ollama_config, ollama_backend):
    """Gateway wired to a simulated Ollama server."""
    client = create_model_client(ollama_config, transport=ollama_backend.transport)
    with TestClient(create_app(config=ollama_config, client=client)) as test_client:
        yield test_client


@pytest.fixture
def openai_backend(openai_reply):
    return FakeBackend(body=openai_reply)


@pytest.fixture
def openai_api(openai_config, openai_backend):
    """Gateway wired to a simulated OpenAI-compatible server."""
    client = create_model_client(openai_config, transport=openai_backend.transport)
    with TestClient(create_app(config=openai_config, client=client)) as test_client:
        yield test_client


def api_for(config, backend: FakeBackend) -> TestClient:
    return TestClient(create_app(config=config, client=create_model_client(config, transport=backend.transport)))


class TestHealth:
    """Test the health endpoint."""

    def test_healthz(self, ollama_api):
        """Test health returns ok with a fresh timestamp."""
        before = datetime.now(timezone.utc)
        response = ollama_api.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        ts = datetime.fromisoformat(data["ts"].replace("Z", "+00:00"))
        assert ts >= before

    def test_healthz_does_not_call_backend(self, ollama_api, ollama_backend):
        """Test health is independent of the backend."""
        ollama_api.get("/healthz")
        assert ollama_backend.requests == []


class TestGenerate:
    """Test the native /generate route."""

    def test_generate_ollama(self, ollama_api, ollama_backend):
        """Test a native request against Ollama."""
        response = ollama_api.post("/generate", json={"prompt": "Say hi"})

        assert response.status_code == 200
        data = response.json()
        assert data["model"] == "llama3.1:8b"
        assert data["content"] == "Hello from Ollama"
        assert data["finishReason"] == "stop"
        assert data["raw"]["done"] is True

        sent = ollama_backend.last_json
        assert sent["model"] == "llama3.1:8b"
        assert sent["messages"] == [
            {"role": "system", "content": "You are a helpful assistant."},
            {"role": "user", "content": "Say hi"},
        ]
        assert sent["options"] == {"temperature": 0.7, "num_predict": 512, "top_p": 1.0}
        assert sent["stream"] is False

    def test_generate_camel_case_fields(self, ollama_api, ollama_backend):
        """Test native camelCase request fields reach the backend."""
        ollama_api.post("/generate", json={
            "prompt": "p",
            "systemPrompt": "s",
            "model": "mistral",
            "maxTokens": 32,
            "temperature": 0.1,
            "topP": 0.4,
        })
        sent = ollama_backend.last_json
        assert sent["model"] == "mistral"
        assert sent["messages"][0] == {"role": "system", "content": "s"}
        assert sent["options"] == {"temperature": 0.1, "num_predict": 32, "top_p": 0.4}

    def test_generate_openai_backend(self, openai_api, openai_backend):
        """Test the native route against an OpenAI-compatible backend."""
        response = openai_api.post("/generate", json={"prompt": "Say hi"})

        assert response.status_code == 200
        assert response.json()["content"] == "Hello!"
        sent = openai_backend.last_json
        assert sent["model"] == "gpt-4o-mini"
        assert sent["max_tokens"] == 512
        assert openai_backend.requests[0].headers["Authorization"] == "Bearer sk-test"


class TestChatCompletions:
    """Test the OpenAI-compatible route."""

    def test_envelope(self, openai_api):
        """Test the response envelope shape."""
        response = openai_api.post("/v1/chat/completions", json={
            "messages": [{"role": "user", "content": "Hello"}],
        })

        assert response.status_code == 200
        data = response.json()
        assert data["id"].startswith("chatcmpl_")
        assert data["object"] == "chat.completion"
        assert isinstance(data["created"], int)
        assert data["model"] == "gpt-4o-mini"
        assert len(data["choices"]) == 1
        assert data["choices"][0] == {
            "index": 0,
            "finish_reason": "length",
            "message": {"role": "assistant", "content": "Hello!"},
        }

    def test_ids_unique_per_call(self, openai_api):
        """Test two calls never share an id."""
        body = {"messages": [{"role": "user", "content": "Hello"}]}
        first = openai_api.post("/v1/chat/completions", json=body).json()
        second = openai_api.post("/v1/chat/completions", json=body).json()
        assert first["id"] != second["id"]

    def test_conversation_forwarded(self, ollama_api, ollama_backend):
        """Test the full conversation is forwarded in order."""
        messages = [
            {"role": "system", "content": "s"},
            {"role": "user", "content": "u1"},
            {"role": "assistant", "content": "a1"},
            {"role": "user", "content": "u2"},
        ]
        response = ollama_api.post("/v1/chat/completions", json={
            "model": "qwen",
            "messages": messages,
            "max_tokens": 20,
            "top_p": 0.5,
        })

        assert response.status_code == 200
        sent = ollama_backend.last_json
        assert sent["messages"] == messages
        assert sent["model"] == "qwen"
        assert sent["options"] == {"temperature": 0.7, "num_predict": 20, "top_p": 0.5}

    def test_missing_content_becomes_empty(self, ollama_config):
        """Test an Ollama reply without a message yields empty content."""
        backend = FakeBackend(body={"done": True})
        with api_for(ollama_config, backend) as api:
            response = api.post("/v1/chat/completions", json={
                "messages": [{"role": "user", "content": "Hello"}],
            })

        assert response.status_code == 200
        data = response.json()
        assert data["model"] == ""
        assert data["choices"][0]["message"]["content"] == ""
        assert data["choices"][0]["finish_reason"] == "stop"

    def test_missing_model_uses_global_model(self, openai_config):
        """Test a reply without a model reports the global configured model."""
        backend = FakeBackend(body={"choices": [{"message": {"content": "ok"}}]})
        with api_for(openai_config, backend) as api:
            response = api.post("/v1/chat/completions", json={
                "messages": [{"role": "user", "content": "Hello"}],
            })

        assert response.status_code == 200
        assert response.json()["model"] == "global-model"
        assert backend.last_json["model"] == "gpt-4o-mini"

    def test_missing_messages_rejected(self, openai_api, openai_backend):
        """Test a request without messages never reaches the backend."""
        response = openai_api.post("/v1/chat/completions", json={"model": "m"})
        assert response.status_code == 422
        assert openai_backend.requests == []

    def test_empty_messages_rejected(self, openai_api, openai_backend):
        """Test an empty conversation never reaches the backend."""
        response = openai_api.post("/v1/chat/completions", json={"messages": []})
        assert response.status_code == 422
        assert openai_backend.requests == []


class TestBackendErrors:
    """Test backend failures surface to the caller."""

    def test_backend_status_propagates(self, ollama_config):
        """Test a backend 500 becomes a 502 with the upstream code."""
        backend = FakeBackend(status_code=500, body={"error": "boom"})
        with api_for(ollama_config, backend) as api:
            response = api.post("/generate", json={"prompt": "Hi"})

        assert response.status_code == 502
        error = response.json()["error"]
        assert error["type"] == "backend_error"
        assert error["code"] == "500"
        assert len(backend.requests) == 1

    def test_empty_choices_is_failure(self, openai_config):
        """Test an empty choices array fails the request."""
        backend = FakeBackend(body={"model": "m", "choices": []})
        with api_for(openai_config, backend) as api:
            response = api.post("/v1/chat/completions", json={
                "messages": [{"role": "user", "content": "Hello"}],
            })

        assert response.status_code == 502
        assert response.json()["error"]["type"] == "malformed_backend_response"

    def test_mistyped_backend_reply_is_failure(self, ollama_config):
        """Test a reply with non-string content becomes a 502, not a 500."""
        backend = FakeBackend(body={"model": "m", "message": {"content": ["a", "b"]}})
        with api_for(ollama_config, backend) as api:
            response = api.post("/generate", json={"prompt": "Hi"})

        assert response.status_code == 502
        error = response.json()["error"]
        assert error["type"] == "malformed_backend_response"
        assert error["code"] == "ollama"

    def test_client_lifecycle(self, ollama_config, ollama_backend):
        """Test the backend client is connected only while the app runs."""
        client = OllamaClient(base_url="http://ollama:11434", transport=ollama_backend.transport)
        with TestClient(create_app(config=ollama_config, client=client)):
            assert client.is_connected
        assert not client.is_connected

    def test_unconfigured_startup_fails(self, tmp_path, monkeypatch):
        """Test startup aborts when configuration is incomplete."""
        monkeypatch.delenv("LLAMA_PROVIDER", raising=False)
        monkeypatch.delenv("OLLAMA_HOST", raising=False)
        path = tmp_path / "gateway.yaml"
        path.write_text("llama:\n  provider: OpenAICompatible\n")
        monkeypatch.setenv("LLAMA_GATEWAY_CONFIG", str(path))

        with pytest.raises(GatewayConfigurationError):
            with TestClient(create_app()):
                pass


class TestOpenAIClientWiring:
    """Test the OpenAI-compatible client through the app factory."""

    def test_explicit_client(self, openai_config, openai_backend):
        """Test an explicitly supplied client is used."""
        client = OpenAICompatibleClient(
            base_url="http://vllm:8000",
            api_key="sk-other",
            transport=openai_backend.transport,
        )
        with TestClient(create_app(config=openai_config, client=client)) as api:
            api.post("/generate", json={"prompt": "Hi"})
        assert openai_backend.requests[0].headers["Authorization"] == "Bearer sk-other"
