"""
Pydantic models for the chat API.
"""

from typing import List, Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """One conversation turn in wire format."""
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Full conversation history, oldest first."""
    messages: List[ChatMessage] = Field(..., min_length=1)


class ChatResponse(BaseModel):
    """Assistant reply text."""
    response: str


class ErrorResponse(BaseModel):
    """Error body returned for 4xx/5xx responses."""
    error: str
    error_type: str = "error"


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    model: str
