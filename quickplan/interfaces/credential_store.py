"""
Credential store interface.

Defines the contract for persisting the session on the device.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from quickplan.models.user import UserProfile


class ICredentialStore(ABC):
    """Abstract interface for session token persistence."""

    @abstractmethod
    async def save(self, token: str, refresh_token: str, profile: UserProfile) -> None:
        """
        Persist a full session and mark the user as logged in.

        All fields are written together or not at all.

        Args:
            token: Access token
            refresh_token: Refresh token
            profile: User profile

        Raises:
            InfrastructureError: If the write fails
        """
        pass

    @abstractmethod
    async def get_token(self) -> Optional[str]:
        """Get the access token, or None if absent."""
        pass

    @abstractmethod
    async def get_refresh_token(self) -> Optional[str]:
        """Get the refresh token, or None if absent."""
        pass

    @abstractmethod
    async def get_profile(self) -> Optional[UserProfile]:
        """
        Get the cached user profile.

        Returns:
            Profile, or None if never stored or unreadable
        """
        pass

    @abstractmethod
    async def is_logged_in(self) -> bool:
        """True iff the logged-in flag is set and a token is present."""
        pass

    @abstractmethod
    async def update_token(self, token: str, refresh_token: str) -> None:
        """Replace both tokens, leaving the profile untouched."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Erase every stored field."""
        pass
