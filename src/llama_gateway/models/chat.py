"""
Neutral chat model shared by every backend client.

Nothing here knows about a backend wire format; adapters translate to and
from these types.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """A single conversation turn. Role is passed through unvalidated."""
    model_config = ConfigDict(frozen=True)

    role: str
    content: str


class ChatInput(BaseModel):
    """A fully-resolved request ready to dispatch to a backend client."""
    model: Optional[str] = None
    messages: List[ChatMessage] = Field(..., min_length=1)
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None

    def wire_messages(self) -> List[Dict[str, str]]:
        """Messages as plain ``{role, content}`` dicts, order preserved."""
        return [{"role": m.role, "content": m.content} for m in self.messages]


class ChatResult(BaseModel):
    """
    Normalized backend response.

    Serialized on the native route as ``{model, content, finishReason, raw}``.
    """
    model_config = ConfigDict(populate_by_name=True)

    model: Optional[str] = None
    content: Optional[str] = None
    finish_reason: str = Field(default="stop", alias="finishReason")
    raw: Optional[Dict[str, Any]] = None
