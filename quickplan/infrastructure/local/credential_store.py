"""
SQLite implementation of the credential store.
"""

from __future__ import annotations

import json
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import and_, delete, select
from sqlalchemy.exc import SQLAlchemyError

from quickplan.core.exceptions import InfrastructureError
from quickplan.core.logger import setup_logger
from quickplan.infrastructure.local.database import PreferenceORM, get_session_factory
from quickplan.interfaces.credential_store import ICredentialStore
from quickplan.models.user import UserProfile

logger = setup_logger(__name__)

KEY_TOKEN = "token"
KEY_REFRESH_TOKEN = "refresh_token"
KEY_USER_INFO = "user_info"
KEY_IS_LOGGED_IN = "is_logged_in"


class SqliteCredentialStore(ICredentialStore):
    """Credential store backed by the preferences table."""

    def __init__(self, session_factory=None, namespace: str = "user_prefs"):
        self._session_factory = session_factory or get_session_factory()
        self._namespace = namespace

    async def _write(self, values: dict[str, str]) -> None:
        """Upsert several keys in one transaction."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(PreferenceORM).where(
                        and_(
                            PreferenceORM.namespace == self._namespace,
                            PreferenceORM.key.in_(list(values)),
                        )
                    )
                )
                existing = {orm.key: orm for orm in result.scalars().all()}
                for key, value in values.items():
                    orm = existing.get(key)
                    if orm:
                        orm.value = value
                    else:
                        session.add(PreferenceORM(namespace=self._namespace, key=key, value=value))
                await session.commit()
        except SQLAlchemyError as e:
            raise InfrastructureError(f"Failed to write preferences: {e}")

    async def _read(self, key: str) -> Optional[str]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(PreferenceORM.value).where(
                        and_(
                            PreferenceORM.namespace == self._namespace,
                            PreferenceORM.key == key,
                        )
                    )
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.warning(f"Failed to read preference {key}: {e}")
            return None

    async def save(self, token: str, refresh_token: str, profile: UserProfile) -> None:
        """Persist a full session and mark the user as logged in."""
        await self._write(
            {
                KEY_TOKEN: token,
                KEY_REFRESH_TOKEN: refresh_token,
                KEY_USER_INFO: profile.model_dump_json(by_alias=True),
                KEY_IS_LOGGED_IN: "true",
            }
        )

    async def get_token(self) -> Optional[str]:
        return await self._read(KEY_TOKEN)

    async def get_refresh_token(self) -> Optional[str]:
        return await self._read(KEY_REFRESH_TOKEN)

    async def get_profile(self) -> Optional[UserProfile]:
        """Get the cached profile; a corrupt entry reads as absent."""
        raw = await self._read(KEY_USER_INFO)
        if raw is None:
            return None
        try:
            return UserProfile.model_validate(json.loads(raw))
        except (ValueError, PydanticValidationError) as e:
            logger.warning(f"Ignoring unreadable stored profile: {e}")
            return None

    async def is_logged_in(self) -> bool:
        flag = await self._read(KEY_IS_LOGGED_IN)
        return flag == "true" and await self.get_token() is not None

    async def update_token(self, token: str, refresh_token: str) -> None:
        await self._write({KEY_TOKEN: token, KEY_REFRESH_TOKEN: refresh_token})

    async def clear(self) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(delete(PreferenceORM).where(PreferenceORM.namespace == self._namespace))
                await session.commit()
        except SQLAlchemyError as e:
            raise InfrastructureError(f"Failed to clear preferences: {e}")
