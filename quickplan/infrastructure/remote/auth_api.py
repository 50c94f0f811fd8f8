"""
REST implementation of the auth API.
"""

from __future__ import annotations

from typing import Any

from quickplan.infrastructure.remote.http_client import ApiHttpClient, bearer
from quickplan.interfaces.auth_api import IAuthApi
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


class RestAuthApi(IAuthApi):
    """Auth endpoints over HTTP."""

    def __init__(self, client: ApiHttpClient):
        self._client = client

    async def send_verification_code(self, request: SendCodeRequest) -> ApiResponse[SendCodeData]:
        return await self._client.request("POST", "/api/auth/phone/send-code", SendCodeData, json=request)

    async def phone_register(self, request: PhoneRegisterRequest) -> ApiResponse[LoginData]:
        return await self._client.request("POST", "/api/auth/phone/register", LoginData, json=request)

    async def email_register(self, request: EmailRegisterRequest) -> ApiResponse[LoginData]:
        return await self._client.request("POST", "/api/auth/email/register", LoginData, json=request)

    async def phone_login(self, request: PhoneLoginRequest) -> ApiResponse[LoginData]:
        return await self._client.request("POST", "/api/auth/phone/login", LoginData, json=request)

    async def email_login(self, request: EmailLoginRequest) -> ApiResponse[LoginData]:
        return await self._client.request("POST", "/api/auth/email/login", LoginData, json=request)

    async def wechat_login(self, request: WechatLoginRequest) -> ApiResponse[LoginData]:
        return await self._client.request("POST", "/api/auth/wechat/login", LoginData, json=request)

    async def qq_login(self, request: QQLoginRequest) -> ApiResponse[LoginData]:
        return await self._client.request("POST", "/api/auth/qq/login", LoginData, json=request)

    async def refresh_token(self, request: RefreshTokenRequest) -> ApiResponse[LoginData]:
        return await self._client.request("POST", "/api/auth/refresh-token", LoginData, json=request)

    async def logout(self, token: str) -> ApiResponse[Any]:
        return await self._client.request("POST", "/api/auth/logout", headers=bearer(token))

    async def get_user_info(self, token: str) -> ApiResponse[UserProfile]:
        return await self._client.request("GET", "/api/user/info", UserProfile, headers=bearer(token))
