"""
Application context.

Builds the client's components once and hands the same instances to every
consumer. The host application creates one context at startup, keeps it
for the process lifetime and closes it on shutdown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncEngine

from quickplan.core.config import Settings, get_settings
from quickplan.infrastructure.local.credential_store import SqliteCredentialStore
from quickplan.infrastructure.local.database import get_engine, get_session_factory, init_db
from quickplan.infrastructure.remote.auth_api import RestAuthApi
from quickplan.infrastructure.remote.conversation_api import RestConversationApi
from quickplan.infrastructure.remote.http_client import ApiHttpClient
from quickplan.infrastructure.remote.schedule_api import RestScheduleApi
from quickplan.interfaces.auth_api import IAuthApi
from quickplan.interfaces.conversation_api import IConversationApi
from quickplan.interfaces.credential_store import ICredentialStore
from quickplan.interfaces.ocr_provider import IOcrProvider
from quickplan.services.auth_session import AuthSessionManager
from quickplan.services.conversation_service import ConversationManager
from quickplan.services.schedule_repository import ScheduleRepository


@dataclass
class AppContext:
    """Shared components of one running client."""

    settings: Settings
    engine: AsyncEngine
    http_client: ApiHttpClient
    credential_store: ICredentialStore
    auth_api: IAuthApi
    conversation_api: IConversationApi
    schedule_repository: ScheduleRepository

    @classmethod
    async def create(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "AppContext":
        """
        Create the context and initialize local storage.

        Args:
            settings: Settings (default: environment)
            transport: httpx transport override (tests, proxies)
        """
        settings = settings or get_settings()
        engine = get_engine(settings)
        await init_db(engine)

        credential_store = SqliteCredentialStore(
            session_factory=get_session_factory(engine),
            namespace=settings.PREFERENCES_NAMESPACE,
        )
        http_client = ApiHttpClient(settings, transport=transport)

        return cls(
            settings=settings,
            engine=engine,
            http_client=http_client,
            credential_store=credential_store,
            auth_api=RestAuthApi(http_client),
            conversation_api=RestConversationApi(http_client),
            schedule_repository=ScheduleRepository(
                RestScheduleApi(http_client),
                credential_store,
                settings=settings,
            ),
        )

    def auth_manager(self) -> AuthSessionManager:
        """New auth session manager bound to the shared store."""
        return AuthSessionManager(self.auth_api, self.credential_store, settings=self.settings)

    def conversation_manager(self, ocr_provider: Optional[IOcrProvider] = None) -> ConversationManager:
        """New conversation manager bound to the shared store."""
        return ConversationManager(
            self.conversation_api,
            self.credential_store,
            ocr_provider=ocr_provider,
            settings=self.settings,
        )

    async def aclose(self) -> None:
        await self.http_client.aclose()
        await self.engine.dispose()
