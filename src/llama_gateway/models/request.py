"""
Inbound request models for the gateway routes.
"""

from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."


class GenerateRequest(BaseModel):
    """
    Native single-prompt request for ``POST /generate``.

    Field names are camelCase on the wire.
    """
    model_config = ConfigDict(populate_by_name=True)

    prompt: Optional[str] = None
    system_prompt: Optional[str] = Field(default=None, alias="systemPrompt")
    model: Optional[str] = None
    max_tokens: Optional[int] = Field(default=None, alias="maxTokens")
    temperature: Optional[float] = None
    top_p: Optional[float] = Field(default=None, alias="topP")


class OpenAIMessage(BaseModel):
    """Message in OpenAI chat format."""
    role: str = "user"
    content: str = ""


class OpenAIChatRequest(BaseModel):
    """OpenAI-compatible request for ``POST /v1/chat/completions``."""
    model: Optional[str] = None
    messages: List[OpenAIMessage] = Field(..., min_length=1, description="Conversation messages")
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
