"""Models for chat-completion race results."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProviderResult(BaseModel):
    """Outcome of one race participant.

    Only the winning result is ever surfaced; losers are discarded.
    """

    model_config = ConfigDict(frozen=True)

    # Short provider id as reported to the client ("groq", "openai", "mock").
    provider_id: str
    text: str
    latency_ms: int = Field(default=0, ge=0)
