"""Pydantic models for the chat endpoint."""
from pydantic import BaseModel, ConfigDict, Field
from typing import List


class ChatPart(BaseModel):
    text: str


class ChatTurn(BaseModel):
    """One turn of conversation history (Gemini content shape)."""
    role: str = Field(..., description="'user' or 'model'")
    parts: List[ChatPart]


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chat_history: List[ChatTurn] = Field(default_factory=list, alias="chatHistory")
    msg: str


class ChatResponse(BaseModel):
    text: str
