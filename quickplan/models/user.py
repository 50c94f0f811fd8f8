"""
Session and authentication models.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from quickplan.models.api import WireModel
from quickplan.models.enums import CodePurpose, LoginType


class UserProfile(WireModel):
    """User profile cached alongside the session tokens."""

    user_id: str = Field(..., alias="userId")
    phone: Optional[str] = None
    email: Optional[str] = None
    nickname: Optional[str] = None
    avatar: Optional[str] = Field(None, description="Avatar URL")
    created_at: str = Field(..., alias="createdAt")
    login_type: LoginType = Field(..., alias="loginType")


class LoginData(WireModel):
    """Payload of every successful login/registration/refresh response."""

    user_id: str = Field(..., alias="userId")
    token: str
    refresh_token: str = Field(..., alias="refreshToken")
    expires_in: int = Field(0, alias="expiresIn", description="Token lifetime in seconds")
    user_info: UserProfile = Field(..., alias="userInfo")


class SendCodeData(WireModel):
    """Payload of a send-code response."""

    expires_in: int = Field(..., alias="expiresIn", description="Code lifetime in seconds")


# ===========================================
# Requests
# ===========================================


class SendCodeRequest(WireModel):
    phone: str
    type: CodePurpose = CodePurpose.LOGIN


class PhoneLoginRequest(WireModel):
    phone: str
    code: str


class PhoneRegisterRequest(WireModel):
    phone: str
    code: str
    password: str
    nickname: Optional[str] = None


class EmailLoginRequest(WireModel):
    email: str
    password: str


class EmailRegisterRequest(WireModel):
    email: str
    password: str
    nickname: Optional[str] = None


class WechatUserInfo(WireModel):
    """Profile hint obtained from the WeChat SDK."""

    nickname: str
    avatar_url: str = Field(..., alias="avatarUrl")
    open_id: str = Field(..., alias="openId")


class WechatLoginRequest(WireModel):
    code: str = Field(..., description="WeChat authorization code")
    user_info: Optional[WechatUserInfo] = Field(None, alias="userInfo")


class QQUserInfo(WireModel):
    """Profile hint obtained from the QQ SDK."""

    nickname: str
    avatar_url: str = Field(..., alias="avatarUrl")


class QQLoginRequest(WireModel):
    access_token: str = Field(..., alias="accessToken")
    open_id: str = Field(..., alias="openId")
    user_info: Optional[QQUserInfo] = Field(None, alias="userInfo")


class RefreshTokenRequest(WireModel):
    refresh_token: str = Field(..., alias="refreshToken")
