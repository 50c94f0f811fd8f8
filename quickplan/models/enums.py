"""
Enum definitions for the client.

These enums are shared by wire models and in-memory state.
"""

from enum import Enum


class LoginType(str, Enum):
    """Identity provider a session was created with."""

    PHONE = "phone"
    EMAIL = "email"
    WECHAT = "wechat"
    QQ = "qq"


class CodePurpose(str, Enum):
    """What a phone verification code will be used for."""

    LOGIN = "login"
    REGISTER = "register"


class MessageAuthor(str, Enum):
    """Author of a transcript entry."""

    USER = "user"
    ASSISTANT = "assistant"
