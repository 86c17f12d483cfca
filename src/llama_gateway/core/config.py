"""
Configuration loading for the gateway.

Configuration is read once at startup. A missing or invalid provider
section is fatal.
"""

import os
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import GatewayConfigurationError

logger = logging.getLogger(__name__)

PROVIDER_OLLAMA = "ollama"
PROVIDER_OPENAI_COMPATIBLE = "openaicompatible"

DEFAULT_TIMEOUT = 90.0
DEFAULT_OLLAMA_CHAT_PATH = "v1/api/chat"


def _norm(key: str) -> str:
    """Fold ``base_url``, ``baseUrl`` and ``BaseUrl`` onto one key."""
    return key.replace("_", "").replace("-", "").lower()


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    for key, value in data.items():
        if _norm(key) == _norm(name):
            return value if isinstance(value, dict) else {}
    return {}


def _value(data: Dict[str, Any], name: str) -> Any:
    for key, value in data.items():
        if _norm(key) == _norm(name):
            return value
    return None


def _expand_env(value: Any) -> Any:
    """Expand ``${VAR}`` strings from the environment, recursively."""
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        return os.environ.get(value[2:-1], "")
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    return value


@dataclass
class OllamaConfig:
    """Self-hosted Ollama backend settings."""
    base_url: Optional[str] = None
    model: Optional[str] = None
    chat_path: str = DEFAULT_OLLAMA_CHAT_PATH


@dataclass
class OpenAICompatibleConfig:
    """OpenAI-compatible backend settings."""
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    model: Optional[str] = None


@dataclass
class DefaultsConfig:
    """Global sampling defaults. ``None`` falls through to built-ins."""
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None


@dataclass
class LlamaConfig:
    """Complete gateway configuration."""
    provider: Optional[str] = None
    model: Optional[str] = None
    ollama: OllamaConfig = field(default_factory=OllamaConfig)
    openai_compatible: OpenAICompatibleConfig = field(default_factory=OpenAICompatibleConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LlamaConfig":
        """
        Parse a configuration mapping.

        Accepts either the bare section or a document with a top-level
        ``llama`` key. Keys may be snake_case or camelCase.
        """
        data = _expand_env(data or {})
        root = _section(data, "llama") or data

        ollama_data = _section(root, "ollama")
        openai_data = _section(root, "openai_compatible")
        defaults_data = _section(root, "defaults")

        return cls(
            provider=_value(root, "provider"),
            model=_value(root, "model") or None,
            ollama=OllamaConfig(
                base_url=_value(ollama_data, "base_url") or None,
                model=_value(ollama_data, "model") or None,
                chat_path=_value(ollama_data, "chat_path") or DEFAULT_OLLAMA_CHAT_PATH,
            ),
            openai_compatible=OpenAICompatibleConfig(
                base_url=_value(openai_data, "base_url") or None,
                api_key=_value(openai_data, "api_key") or None,
                model=_value(openai_data, "model") or None,
            ),
            defaults=DefaultsConfig(
                max_tokens=_value(defaults_data, "max_tokens"),
                temperature=_value(defaults_data, "temperature"),
                top_p=_value(defaults_data, "top_p"),
            ),
        )

    @property
    def provider_type(self) -> str:
        """Normalized provider key. An unset provider means OpenAI-compatible."""
        if not self.provider:
            return PROVIDER_OPENAI_COMPATIBLE
        return _norm(self.provider)

    @property
    def provider_model(self) -> Optional[str]:
        """Configured model of the active provider."""
        if self.provider_type == PROVIDER_OLLAMA:
            return self.ollama.model
        return self.openai_compatible.model

    def apply_env_overrides(self) -> "LlamaConfig":
        """Apply ``LLAMA_*`` and ``OLLAMA_HOST`` environment overrides."""
        if os.getenv("LLAMA_PROVIDER"):
            self.provider = os.environ["LLAMA_PROVIDER"]
        if os.getenv("LLAMA_MODEL"):
            self.model = os.environ["LLAMA_MODEL"]
        if not self.ollama.base_url and os.getenv("OLLAMA_HOST"):
            self.ollama.base_url = os.environ["OLLAMA_HOST"]
        return self

    def validate(self) -> "LlamaConfig":
        """
        Check that the selected provider can be constructed.

        Raises:
            GatewayConfigurationError: Unknown provider or missing base URL
        """
        provider = self.provider_type
        if provider == PROVIDER_OLLAMA:
            if not self.ollama.base_url:
                raise GatewayConfigurationError("llama.ollama.base_url is required", gateway="ollama")
        elif provider == PROVIDER_OPENAI_COMPATIBLE:
            if not self.openai_compatible.base_url:
                raise GatewayConfigurationError(
                    "llama.openai_compatible.base_url is required",
                    gateway="openai_compatible",
                )
            if not self.openai_compatible.api_key:
                logger.warning("No api_key configured for OpenAI-compatible backend")
        else:
            raise GatewayConfigurationError(f"Unknown provider: {self.provider}")
        return self


def _find_config_file() -> Optional[Path]:
    paths = [
        Path("config/llama-gateway.yaml"),
        Path("/etc/llama-gateway/config.yaml"),
        Path.home() / ".config/llama-gateway/config.yaml",
    ]
    for p in paths:
        if p.exists():
            return p
    return None


def load_config(config_path: Optional[str] = None) -> LlamaConfig:
    """
    Load and validate gateway configuration from YAML.

    Args:
        config_path: Path to config file. Falls back to ``LLAMA_GATEWAY_CONFIG``
            and then the default locations.

    Returns:
        Validated configuration

    Raises:
        GatewayConfigurationError: If the file is unreadable or invalid
    """
    config_path = config_path or os.getenv("LLAMA_GATEWAY_CONFIG")

    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise GatewayConfigurationError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()

    data: Dict[str, Any] = {}
    if path is None:
        logger.warning("No gateway config file found, using environment only")
    else:
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise GatewayConfigurationError(f"Failed to load config from {path}: {e}")
        logger.info(f"Loaded gateway config from {path}")

    return LlamaConfig.from_dict(data).apply_env_overrides().validate()
