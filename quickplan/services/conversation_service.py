"""
Conversation manager for the AI assistant chat.

Holds the active conversation, its transcript and the sidebar list of
conversations. Sending is the one "primary" operation: it runs as an
asyncio task, and starting a new send cancels the previous one.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Optional

from quickplan.core.config import Settings, get_settings
from quickplan.core.exceptions import QuickPlanError
from quickplan.core.logger import setup_logger
from quickplan.core.observable import Observable
from quickplan.interfaces.conversation_api import IConversationApi
from quickplan.interfaces.credential_store import ICredentialStore
from quickplan.interfaces.ocr_provider import IOcrProvider
from quickplan.models.conversation import (
    ChatRequest,
    ConversationSummary,
    CreateConversationRequest,
    RemoteMessage,
    TranscriptMessage,
)
from quickplan.models.enums import MessageAuthor
from quickplan.utils.validators import is_blank

logger = setup_logger(__name__)

NEW_CONVERSATION_TITLE = "New Chat"
PENDING_REPLY_TEXT = "Thinking..."
OCR_PENDING_TEXT = "Recognizing image..."
SERVICE_UNAVAILABLE_TEXT = "AI service unavailable"
OCR_EMPTY_TEXT = "OCR failed: no text was found in the image"

# The backend routes messages starting with this phrase ("add a schedule for
# me:") to its schedule-creation tool.
SCHEDULE_TRIGGER_PREFIX = "帮我添加日程："


def _parse_timestamp(value: Optional[str]) -> datetime:
    if value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            pass
    return datetime.now(timezone.utc)


def remote_to_transcript(message: RemoteMessage) -> TranscriptMessage:
    author = MessageAuthor.USER if message.role == MessageAuthor.USER.value else MessageAuthor.ASSISTANT
    return TranscriptMessage(
        id=str(message.id),
        content=message.content,
        author=author,
        timestamp=_parse_timestamp(message.created_at),
    )


class ConversationManager:
    """Chat state for one screen."""

    def __init__(
        self,
        conversation_api: IConversationApi,
        credential_store: ICredentialStore,
        ocr_provider: Optional[IOcrProvider] = None,
        settings: Optional[Settings] = None,
    ):
        self._api = conversation_api
        self._store = credential_store
        self._ocr = ocr_provider
        self._settings = settings or get_settings()
        self._send_task: Optional[asyncio.Task] = None

        self.active_conversation_id: Observable[Optional[str]] = Observable(None)
        self.messages: Observable[list[TranscriptMessage]] = Observable([])
        self.conversations: Observable[list[ConversationSummary]] = Observable([])
        self.is_busy: Observable[bool] = Observable(False)
        self.error: Observable[Optional[str]] = Observable(None)
        self.show_sidebar: Observable[bool] = Observable(False)

    async def _current_user_id(self) -> str:
        profile = await self._store.get_profile()
        return profile.user_id if profile else self._settings.GUEST_CHAT_USER_ID

    # ===========================================
    # Sending
    # ===========================================

    def send_message(self, text: str) -> Optional[asyncio.Task]:
        """
        Send a chat message.

        Cancels any send still in flight. Must be called from a running
        event loop.

        Returns:
            Task running the send sequence, or None if text is blank
        """
        if is_blank(text):
            return None
        return self._start_send(text, text)

    def _start_send(self, display_text: str, request_text: str) -> asyncio.Task:
        self._cancel_send()
        task = asyncio.create_task(self._send_sequence(display_text, request_text))
        self._send_task = task
        return task

    def _cancel_send(self) -> None:
        if self._send_task and not self._send_task.done():
            self._send_task.cancel()
        self._send_task = None

    def _is_current(self) -> bool:
        return self._send_task is not None and self._send_task is asyncio.current_task()

    async def _send_sequence(self, display_text: str, request_text: str) -> None:
        self.error.set(None)

        if self.active_conversation_id.value is None:
            created = await self._create_conversation(clear_messages=False, set_busy=False)
            if not created:
                self.error.set("Failed to create conversation")
                return

        self.is_busy.set(True)
        try:
            user_id = await self._current_user_id()
            user_message = TranscriptMessage(content=display_text, author=MessageAuthor.USER)
            pending = TranscriptMessage(content=PENDING_REPLY_TEXT, author=MessageAuthor.ASSISTANT)
            self._append(user_message, pending)

            request = ChatRequest(
                memory_id=self.active_conversation_id.value,
                message=request_text,
                user_id=user_id,
            )
            try:
                response = await self._api.send_message(request)
            except QuickPlanError as e:
                # No usable answer: drop the placeholder, keep the user's message.
                self._remove(pending.id)
                self.error.set(e.message)
                return

            if not self._is_current():
                logger.debug("Discarding reply of a superseded send")
                return

            self._replace(pending.id, response.message)
            if response.success:
                await self._refresh_conversations()
            else:
                self.error.set(response.message)
        finally:
            if self._is_current():
                self.is_busy.set(False)

    # ===========================================
    # Conversation list
    # ===========================================

    async def load_conversations(self) -> None:
        """Reload the sidebar list. Failures are ignored."""
        if self.is_busy.value:
            return
        await self._refresh_conversations()

    async def _refresh_conversations(self) -> None:
        try:
            response = await self._api.list_conversations(await self._current_user_id())
        except QuickPlanError as e:
            logger.warning(f"Failed to load conversations: {e.message}")
            return
        if response.success:
            self.conversations.set(response.data or [])
        else:
            logger.warning(f"Failed to load conversations: {response.message}")

    async def load_conversation(self, conversation_id: str) -> None:
        """Switch to a stored conversation and load its messages."""
        self._cancel_send()
        self.is_busy.set(True)
        self.error.set(None)
        # Drop the old transcript first so no pending bubble survives the switch.
        self.messages.set([])
        try:
            response = await self._api.get_messages(conversation_id, await self._current_user_id())
            if not response.success:
                self.error.set(response.message or "Failed to load conversation")
                return

            self.active_conversation_id.set(conversation_id)
            loaded = [remote_to_transcript(message) for message in response.data or []]
            if loaded and loaded[-1].is_user:
                # The assistant never answered the last turn.
                loaded.append(TranscriptMessage(content=SERVICE_UNAVAILABLE_TEXT, author=MessageAuthor.ASSISTANT))
            self.messages.set(loaded)
        except QuickPlanError as e:
            logger.error(f"Failed to load conversation {conversation_id}: {e.message}")
            self.error.set(e.message)
        finally:
            self.is_busy.set(False)

    async def create_new_conversation(self) -> bool:
        """Create an empty conversation on the backend and switch to it."""
        return await self._create_conversation(clear_messages=True, set_busy=True)

    async def _create_conversation(self, clear_messages: bool, set_busy: bool) -> bool:
        if set_busy:
            self.is_busy.set(True)
        self.error.set(None)
        try:
            request = CreateConversationRequest(user_id=await self._current_user_id(), title=NEW_CONVERSATION_TITLE)
            response = await self._api.create_conversation(request)
            created = response.require_data("Failed to create conversation")
        except QuickPlanError as e:
            logger.warning(f"Failed to create conversation: {e.message}")
            self.error.set(e.message)
            return False
        finally:
            if set_busy:
                self.is_busy.set(False)

        self.active_conversation_id.set(created.id)
        if clear_messages:
            self.messages.set([])
        self.show_sidebar.set(False)
        await self._refresh_conversations()
        return True

    async def delete_conversation(self, conversation_id: str) -> bool:
        """Delete a conversation; leaves it if it was the active one."""
        try:
            response = await self._api.delete_conversation(conversation_id)
            response.raise_for_failure("Failed to delete conversation")
        except QuickPlanError as e:
            logger.warning(f"Failed to delete conversation {conversation_id}: {e.message}")
            self.error.set(e.message)
            return False

        if self.active_conversation_id.value == conversation_id:
            self.active_conversation_id.set(None)
            self.messages.set([])
        await self._refresh_conversations()
        return True

    def start_new_conversation(self) -> None:
        """Reset to an empty chat without contacting the backend."""
        self._cancel_send()
        self.active_conversation_id.set(None)
        self.messages.set([])
        self.show_sidebar.set(False)
        self.is_busy.set(False)
        self.error.set(None)

    # ===========================================
    # Image to schedule
    # ===========================================

    async def process_ocr_image(self, image: bytes) -> Optional[asyncio.Task]:
        """
        Recognize text in an image and ask the assistant to schedule it.

        Returns:
            Task of the resulting send, or None if nothing was sent
        """
        if self._ocr is None:
            self.error.set("Image recognition is not available")
            return None

        self.is_busy.set(True)
        self.error.set(None)
        pending = TranscriptMessage(content=OCR_PENDING_TEXT, author=MessageAuthor.ASSISTANT)
        self._append(pending)
        try:
            text = await self._ocr.recognize_text(image)
        except Exception as e:
            logger.warning(f"OCR recognition failed: {e}")
            self.error.set(f"OCR failed: {e}")
            self._remove(pending.id)
            self._append(TranscriptMessage(content=f"OCR failed: {e}", author=MessageAuthor.ASSISTANT))
            return None
        finally:
            self.is_busy.set(False)

        self._remove(pending.id)
        if is_blank(text):
            self.error.set(OCR_EMPTY_TEXT)
            self._append(TranscriptMessage(content=OCR_EMPTY_TEXT, author=MessageAuthor.ASSISTANT))
            return None

        text = text.strip()
        return self._start_send(
            f"Recognized image content:\n{text}",
            f"{SCHEDULE_TRIGGER_PREFIX}{text}",
        )

    # ===========================================
    # UI state
    # ===========================================

    def toggle_sidebar(self) -> None:
        self.show_sidebar.set(not self.show_sidebar.value)

    def clear_error(self) -> None:
        self.error.set(None)

    def set_error(self, message: str) -> None:
        self.error.set(message)

    async def aclose(self) -> None:
        self._cancel_send()

    # ===========================================
    # Transcript helpers
    # ===========================================

    def _append(self, *messages: TranscriptMessage) -> None:
        self.messages.set([*self.messages.value, *messages])

    def _remove(self, message_id: str) -> None:
        self.messages.set([m for m in self.messages.value if m.id != message_id])

    def _replace(self, message_id: str, content: str) -> None:
        self.messages.set(
            [m.model_copy(update={"content": content}) if m.id == message_id else m for m in self.messages.value]
        )
