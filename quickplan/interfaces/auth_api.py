"""
Authentication API interface.

Every method performs exactly one request. A 2xx answer is returned as
its envelope, whatever its success flag says.

Raises (all methods):
    HttpStatusError: Non-2xx status
    TransportError: No response
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from quickplan.models.api import ApiResponse
from quickplan.models.user import (
    EmailLoginRequest,
    EmailRegisterRequest,
    LoginData,
    PhoneLoginRequest,
    PhoneRegisterRequest,
    QQLoginRequest,
    RefreshTokenRequest,
    SendCodeData,
    SendCodeRequest,
    UserProfile,
    WechatLoginRequest,
)


class IAuthApi(ABC):
    """Abstract interface for the auth endpoints."""

    @abstractmethod
    async def send_verification_code(self, request: SendCodeRequest) -> ApiResponse[SendCodeData]:
        pass

    @abstractmethod
    async def phone_register(self, request: PhoneRegisterRequest) -> ApiResponse[LoginData]:
        pass

    @abstractmethod
    async def email_register(self, request: EmailRegisterRequest) -> ApiResponse[LoginData]:
        pass

    @abstractmethod
    async def phone_login(self, request: PhoneLoginRequest) -> ApiResponse[LoginData]:
        pass

    @abstractmethod
    async def email_login(self, request: EmailLoginRequest) -> ApiResponse[LoginData]:
        pass

    @abstractmethod
    async def wechat_login(self, request: WechatLoginRequest) -> ApiResponse[LoginData]:
        pass

    @abstractmethod
    async def qq_login(self, request: QQLoginRequest) -> ApiResponse[LoginData]:
        pass

    @abstractmethod
    async def refresh_token(self, request: RefreshTokenRequest) -> ApiResponse[LoginData]:
        pass

    @abstractmethod
    async def logout(self, token: str) -> ApiResponse[Any]:
        """
        Invalidate a session on the backend.

        Args:
            token: Raw access token (sent as a Bearer header)
        """
        pass

    @abstractmethod
    async def get_user_info(self, token: str) -> ApiResponse[UserProfile]:
        pass
