"""
Outbound response models for the gateway routes.
"""

from typing import List, Literal
from datetime import datetime
from pydantic import BaseModel, Field


class ResponseMessage(BaseModel):
    """Assistant message in an OpenAI-style choice."""
    role: Literal["assistant"] = "assistant"
    content: str = ""


class Choice(BaseModel):
    """A single completion choice."""
    index: int = 0
    finish_reason: str = "stop"
    message: ResponseMessage


class OpenAIChatResponse(BaseModel):
    """
    OpenAI-compatible chat completion envelope.

    The gateway always returns exactly one choice.
    """
    id: str
    object: str = Field(default="chat.completion")
    created: int = Field(default_factory=lambda: int(datetime.now().timestamp()))
    model: str = Field(default="")
    choices: List[Choice] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response body for GET /healthz."""
    ok: bool = True
    ts: datetime
