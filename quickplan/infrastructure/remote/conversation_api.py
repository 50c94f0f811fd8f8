"""
REST implementation of the conversation API.
"""

from __future__ import annotations

from typing import Any

from quickplan.infrastructure.remote.http_client import ApiHttpClient
from quickplan.interfaces.conversation_api import IConversationApi
from quickplan.models.api import ApiResponse
from quickplan.models.conversation import (
    ChatRequest,
    ConversationCreated,
    ConversationSummary,
    CreateConversationRequest,
    RemoteMessage,
)


class RestConversationApi(IConversationApi):
    """Conversation endpoints over HTTP."""

    def __init__(self, client: ApiHttpClient):
        self._client = client

    async def send_message(self, request: ChatRequest) -> ApiResponse[Any]:
        return await self._client.request("POST", "/api/ai/chat", json=request)

    async def create_conversation(self, request: CreateConversationRequest) -> ApiResponse[ConversationCreated]:
        return await self._client.request("POST", "/api/ai/chat/new", ConversationCreated, json=request)

    async def list_conversations(self, user_id: str) -> ApiResponse[list[ConversationSummary]]:
        return await self._client.request("GET", f"/api/conversation/list/{user_id}", list[ConversationSummary])

    async def get_messages(self, conversation_id: str, user_id: str) -> ApiResponse[list[RemoteMessage]]:
        return await self._client.request(
            "GET",
            f"/api/conversation/messages/{conversation_id}",
            list[RemoteMessage],
            params={"userId": user_id},
        )

    async def delete_conversation(self, conversation_id: str) -> ApiResponse[Any]:
        return await self._client.request("DELETE", f"/api/conversation/delete/{conversation_id}")
