"""
Conversation API interface.

Defines the contract for the AI chat and conversation history endpoints.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from quickplan.models.api import ApiResponse
from quickplan.models.conversation import (
    ChatRequest,
    ConversationCreated,
    ConversationSummary,
    CreateConversationRequest,
    RemoteMessage,
)


class IConversationApi(ABC):
    """Abstract interface for the conversation endpoints."""

    @abstractmethod
    async def send_message(self, request: ChatRequest) -> ApiResponse[Any]:
        """
        Send one chat turn and wait for the full reply.

        The reply text travels in the envelope's message field.

        Args:
            request: Conversation ID, user ID and message text

        Returns:
            Envelope whose message is the assistant reply (or the failure reason)
        """
        pass

    @abstractmethod
    async def create_conversation(self, request: CreateConversationRequest) -> ApiResponse[ConversationCreated]:
        pass

    @abstractmethod
    async def list_conversations(self, user_id: str) -> ApiResponse[list[ConversationSummary]]:
        pass

    @abstractmethod
    async def get_messages(self, conversation_id: str, user_id: str) -> ApiResponse[list[RemoteMessage]]:
        pass

    @abstractmethod
    async def delete_conversation(self, conversation_id: str) -> ApiResponse[Any]:
        pass
