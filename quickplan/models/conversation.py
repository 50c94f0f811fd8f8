"""
Conversation and transcript models.

These models back the AI assistant chat: server-side conversation
summaries and messages, and the client-side transcript.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field

from quickplan.models.api import WireModel
from quickplan.models.enums import MessageAuthor


class ConversationSummary(WireModel):
    """Conversation entry of the sidebar list."""

    id: str
    title: str = "New Chat"
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")
    message_count: Optional[int] = Field(None, alias="messageCount")


class ConversationCreated(WireModel):
    """Payload of a create-conversation response."""

    id: str
    title: Optional[str] = None


class RemoteMessage(WireModel):
    """Stored message of a conversation."""

    id: Union[int, str]
    role: str = Field(..., description="user or assistant")
    content: str = ""
    created_at: Optional[str] = Field(None, alias="createdAt")


class ChatRequest(WireModel):
    memory_id: str = Field(..., alias="memoryId", description="Conversation ID")
    message: str
    user_id: str = Field(..., alias="userId")


class CreateConversationRequest(WireModel):
    user_id: str = Field(..., alias="userId")
    title: str = "New Chat"


class TranscriptMessage(BaseModel):
    """One chat bubble of the active conversation."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    content: str
    author: MessageAuthor
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_user(self) -> bool:
        return self.author == MessageAuthor.USER
