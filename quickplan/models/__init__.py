"""Pydantic models (schemas) for the client."""

from quickplan.models.api import ApiResponse
from quickplan.models.conversation import (
    ChatRequest,
    ConversationCreated,
    ConversationSummary,
    CreateConversationRequest,
    RemoteMessage,
    TranscriptMessage,
)
from quickplan.models.enums import CodePurpose, LoginType, MessageAuthor
from quickplan.models.schedule import (
    ScheduleCreateRequest,
    ScheduleEntry,
    ScheduleRecord,
    ScheduleUpdateRequest,
)
from quickplan.models.user import LoginData, UserProfile

__all__ = [
    # Enums
    "CodePurpose",
    "LoginType",
    "MessageAuthor",
    # Envelope
    "ApiResponse",
    # Session
    "LoginData",
    "UserProfile",
    # Schedule
    "ScheduleEntry",
    "ScheduleRecord",
    "ScheduleCreateRequest",
    "ScheduleUpdateRequest",
    # Conversation
    "ChatRequest",
    "ConversationCreated",
    "ConversationSummary",
    "CreateConversationRequest",
    "RemoteMessage",
    "TranscriptMessage",
]
