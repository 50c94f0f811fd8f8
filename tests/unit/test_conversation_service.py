"""
Unit tests for ConversationManager.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from quickplan.core.exceptions import HttpStatusError, TransportError
from quickplan.interfaces.conversation_api import IConversationApi
from quickplan.interfaces.ocr_provider import IOcrProvider
from quickplan.models.api import ApiResponse
from quickplan.models.conversation import ConversationCreated, ConversationSummary, RemoteMessage
from quickplan.models.enums import MessageAuthor
from quickplan.services.conversation_service import (
    OCR_EMPTY_TEXT,
    PENDING_REPLY_TEXT,
    SCHEDULE_TRIGGER_PREFIX,
    SERVICE_UNAVAILABLE_TEXT,
    ConversationManager,
)


def ok(data=None, message=""):
    return ApiResponse(success=True, message=message, data=data)


def failed(message):
    return ApiResponse(success=False, message=message)


@pytest.fixture
def conversation_api():
    api = AsyncMock(spec=IConversationApi)
    api.create_conversation.return_value = ok(ConversationCreated(id="c1", title="New Chat"))
    api.list_conversations.return_value = ok([ConversationSummary(id="c1", title="New Chat")])
    api.send_message.return_value = ok(message="Sure, done.")
    return api


@pytest.fixture
def ocr_provider():
    return AsyncMock(spec=IOcrProvider)


@pytest.fixture
def manager(conversation_api, credential_store, ocr_provider, settings):
    return ConversationManager(conversation_api, credential_store, ocr_provider=ocr_provider, settings=settings)


def contents(manager):
    return [m.content for m in manager.messages.value]


# ============================================
# Sending
# ============================================


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_blank_message_is_ignored(self, manager, conversation_api):
        assert manager.send_message("   ") is None
        assert manager.messages.value == []
        conversation_api.send_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_first_send_creates_conversation_first(self, manager, conversation_api, settings):
        await manager.send_message("hello")

        names = [call[0] for call in conversation_api.mock_calls]
        assert names == ["create_conversation", "list_conversations", "send_message", "list_conversations"]
        request = conversation_api.send_message.call_args[0][0]
        assert request.memory_id == "c1"
        assert request.message == "hello"
        assert request.user_id == settings.GUEST_CHAT_USER_ID
        assert manager.active_conversation_id.value == "c1"

    @pytest.mark.asyncio
    async def test_success_replaces_placeholder(self, manager, conversation_api):
        manager.active_conversation_id.set("c1")
        seen = []
        manager.messages.subscribe(lambda messages: seen.append([m.content for m in messages]))

        await manager.send_message("hello")

        assert seen[0] == ["hello", PENDING_REPLY_TEXT]
        assert contents(manager) == ["hello", "Sure, done."]
        assert [m.author for m in manager.messages.value] == [MessageAuthor.USER, MessageAuthor.ASSISTANT]
        assert manager.is_busy.value is False
        assert manager.error.value is None
        assert manager.conversations.value == [ConversationSummary(id="c1", title="New Chat")]

    @pytest.mark.asyncio
    async def test_uses_logged_in_user(self, manager, conversation_api, credential_store, profile):
        await credential_store.save("access-1", "refresh-1", profile)
        manager.active_conversation_id.set("c1")

        await manager.send_message("hello")

        assert conversation_api.send_message.call_args[0][0].user_id == profile.user_id

    @pytest.mark.asyncio
    async def test_transport_error_drops_placeholder(self, manager, conversation_api):
        manager.active_conversation_id.set("c1")
        conversation_api.send_message.side_effect = TransportError("Network error: down")

        await manager.send_message("hello")

        assert contents(manager) == ["hello"]
        assert manager.error.value == "Network error: down"
        assert manager.is_busy.value is False

    @pytest.mark.asyncio
    async def test_http_error_drops_placeholder(self, manager, conversation_api):
        manager.active_conversation_id.set("c1")
        conversation_api.send_message.side_effect = HttpStatusError("operation failed: HTTP 503", status_code=503)

        await manager.send_message("hello")

        assert contents(manager) == ["hello"]
        assert manager.error.value == "operation failed: HTTP 503"

    @pytest.mark.asyncio
    async def test_failure_payload_replaces_placeholder(self, manager, conversation_api):
        manager.active_conversation_id.set("c1")
        conversation_api.send_message.return_value = failed("model overloaded")

        await manager.send_message("hello")

        assert contents(manager) == ["hello", "model overloaded"]
        assert manager.error.value == "model overloaded"
        conversation_api.list_conversations.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_creation_aborts_send(self, manager, conversation_api):
        conversation_api.create_conversation.return_value = failed("")

        await manager.send_message("hello")

        conversation_api.send_message.assert_not_called()
        assert manager.messages.value == []
        assert manager.active_conversation_id.value is None
        assert manager.error.value == "Failed to create conversation"

    @pytest.mark.asyncio
    async def test_new_send_cancels_previous(self, manager, conversation_api):
        manager.active_conversation_id.set("c1")
        first_started = asyncio.Event()
        release_first = asyncio.Event()

        async def reply(request):
            if request.message == "a":
                first_started.set()
                await release_first.wait()
                return ok(message="reply-a")
            return ok(message="reply-b")

        conversation_api.send_message.side_effect = reply

        first = manager.send_message("a")
        await asyncio.wait_for(first_started.wait(), timeout=1)
        second = manager.send_message("b")
        await second
        release_first.set()
        await asyncio.gather(first, return_exceptions=True)

        assert first.cancelled()
        assert "reply-a" not in contents(manager)
        assert contents(manager)[-2:] == ["b", "reply-b"]
        assert manager.is_busy.value is False


# ============================================
# Conversation list
# ============================================


class TestConversations:
    @pytest.mark.asyncio
    async def test_load_conversations_is_silent_on_failure(self, manager, conversation_api):
        conversation_api.list_conversations.side_effect = TransportError("Network error: down")

        await manager.load_conversations()

        assert manager.error.value is None
        assert manager.conversations.value == []

    @pytest.mark.asyncio
    async def test_load_conversations_skipped_while_busy(self, manager, conversation_api):
        manager.is_busy.set(True)

        await manager.load_conversations()

        conversation_api.list_conversations.assert_not_called()

    @pytest.mark.asyncio
    async def test_load_conversation_adds_unavailable_reply(self, manager, conversation_api):
        conversation_api.get_messages.return_value = ok(
            [
                RemoteMessage(id=1, role="user", content="hi", created_at="2024-03-05T10:00:00Z"),
                RemoteMessage(id=2, role="assistant", content="hello"),
                RemoteMessage(id=3, role="user", content="still there?"),
            ]
        )

        await manager.load_conversation("c7")

        conversation_api.get_messages.assert_awaited_once_with("c7", "guest_user")
        assert manager.active_conversation_id.value == "c7"
        assert contents(manager) == ["hi", "hello", "still there?", SERVICE_UNAVAILABLE_TEXT]
        assert manager.messages.value[0].id == "1"
        assert manager.messages.value[0].timestamp.year == 2024
        assert manager.is_busy.value is False

    @pytest.mark.asyncio
    async def test_load_conversation_ending_with_reply(self, manager, conversation_api):
        conversation_api.get_messages.return_value = ok(
            [RemoteMessage(id="m1", role="user", content="hi"), RemoteMessage(id="m2", role="assistant", content="yo")]
        )

        await manager.load_conversation("c7")

        assert contents(manager) == ["hi", "yo"]

    @pytest.mark.asyncio
    async def test_load_conversation_failure(self, manager, conversation_api):
        manager.active_conversation_id.set("c1")
        conversation_api.get_messages.return_value = failed("")

        await manager.load_conversation("c7")

        assert manager.active_conversation_id.value == "c1"
        assert manager.messages.value == []
        assert manager.error.value == "Failed to load conversation"

    @pytest.mark.asyncio
    async def test_create_new_conversation(self, manager, conversation_api):
        manager.toggle_sidebar()

        assert await manager.create_new_conversation() is True

        assert manager.active_conversation_id.value == "c1"
        assert manager.show_sidebar.value is False
        assert manager.is_busy.value is False
        conversation_api.list_conversations.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_active_conversation_resets_chat(self, manager, conversation_api):
        manager.active_conversation_id.set("c1")
        await manager.send_message("hello")
        conversation_api.delete_conversation.return_value = ok()
        conversation_api.list_conversations.return_value = ok([])

        assert await manager.delete_conversation("c1") is True

        assert manager.active_conversation_id.value is None
        assert manager.messages.value == []
        assert manager.conversations.value == []

    @pytest.mark.asyncio
    async def test_delete_other_conversation_keeps_chat(self, manager, conversation_api):
        manager.active_conversation_id.set("c1")
        conversation_api.delete_conversation.return_value = ok()

        assert await manager.delete_conversation("c2") is True

        assert manager.active_conversation_id.value == "c1"

    @pytest.mark.asyncio
    async def test_delete_failure(self, manager, conversation_api):
        conversation_api.delete_conversation.return_value = failed("forbidden")

        assert await manager.delete_conversation("c2") is False

        assert manager.error.value == "forbidden"
        conversation_api.list_conversations.assert_not_called()

    @pytest.mark.asyncio
    async def test_start_new_conversation_is_local(self, manager, conversation_api):
        manager.active_conversation_id.set("c1")
        manager.error.set("old")
        manager.show_sidebar.set(True)

        manager.start_new_conversation()

        assert manager.active_conversation_id.value is None
        assert manager.messages.value == []
        assert manager.error.value is None
        assert manager.show_sidebar.value is False
        assert conversation_api.mock_calls == []


# ============================================
# Image recognition
# ============================================


class TestOcr:
    @pytest.mark.asyncio
    async def test_recognized_text_is_sent_with_trigger(self, manager, conversation_api, ocr_provider):
        manager.active_conversation_id.set("c1")
        ocr_provider.recognize_text.return_value = "  Team sync at 3pm  "

        task = await manager.process_ocr_image(b"png-bytes")
        await task

        ocr_provider.recognize_text.assert_awaited_once_with(b"png-bytes")
        assert conversation_api.send_message.call_args[0][0].message == f"{SCHEDULE_TRIGGER_PREFIX}Team sync at 3pm"
        assert contents(manager) == ["Recognized image content:\nTeam sync at 3pm", "Sure, done."]

    @pytest.mark.asyncio
    async def test_empty_text(self, manager, conversation_api, ocr_provider):
        ocr_provider.recognize_text.return_value = "   "

        assert await manager.process_ocr_image(b"img") is None

        assert manager.error.value == OCR_EMPTY_TEXT
        assert contents(manager) == [OCR_EMPTY_TEXT]
        assert manager.is_busy.value is False
        conversation_api.send_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_recognizer_failure(self, manager, ocr_provider):
        ocr_provider.recognize_text.side_effect = RuntimeError("model not loaded")

        assert await manager.process_ocr_image(b"img") is None

        assert manager.error.value == "OCR failed: model not loaded"
        assert contents(manager) == ["OCR failed: model not loaded"]
        assert manager.is_busy.value is False

    @pytest.mark.asyncio
    async def test_without_provider(self, conversation_api, credential_store, settings):
        manager = ConversationManager(conversation_api, credential_store, settings=settings)

        assert await manager.process_ocr_image(b"img") is None

        assert manager.error.value == "Image recognition is not available"


@pytest.mark.asyncio
async def test_ui_state_helpers(manager):
    manager.toggle_sidebar()
    assert manager.show_sidebar.value is True
    manager.set_error("boom")
    assert manager.error.value == "boom"
    manager.clear_error()
    assert manager.error.value is None
