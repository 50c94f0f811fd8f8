"""Abstract interfaces for infrastructure abstraction."""

from quickplan.interfaces.auth_api import IAuthApi
from quickplan.interfaces.conversation_api import IConversationApi
from quickplan.interfaces.credential_store import ICredentialStore
from quickplan.interfaces.ocr_provider import IOcrProvider
from quickplan.interfaces.schedule_api import IScheduleApi

__all__ = [
    "IAuthApi",
    "IConversationApi",
    "ICredentialStore",
    "IOcrProvider",
    "IScheduleApi",
]
