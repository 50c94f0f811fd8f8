"""
In-process fake of the QuickPlan backend.

A small FastAPI app with in-memory state that speaks the same envelope
and routes as the real service. Tests reach it through
httpx.ASGITransport, so the whole REST gateway runs unmodified.
"""

from itertools import count
from typing import Optional

import httpx
import pytest
import pytest_asyncio
from fastapi import Body, FastAPI, Header
from fastapi.responses import JSONResponse

from quickplan.app_context import AppContext

VALID_CODE = "123456"


def envelope(data=None, message="", success=True):
    body = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    return body


def not_found(message):
    return JSONResponse(status_code=404, content=envelope(message=message, success=False))


class FakeBackend:
    """In-memory users, sessions, schedules and conversations."""

    def __init__(self):
        self._ids = count(1)
        self.users: dict[str, dict] = {}
        self.passwords: dict[str, str] = {}
        self.tokens: dict[str, str] = {}
        self.refresh_tokens: dict[str, str] = {}
        self.sent_codes: list[dict] = []
        self.schedules: dict[str, dict] = {}
        self.conversations: dict[str, dict] = {}
        self.messages: dict[str, list[dict]] = {}
        self.chat_requests: list[dict] = []
        self.reply_enabled = True
        self.app = self._build_app()

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def _user(self, key: str, login_type: str, **fields) -> dict:
        if key not in self.users:
            self.users[key] = {
                "userId": self._next_id("u"),
                "nickname": fields.pop("nickname", None) or key,
                "createdAt": "2024-03-01T08:00:00",
                "loginType": login_type,
                **fields,
            }
        return self.users[key]

    def _session(self, user: dict) -> dict:
        token = self._next_id("tok")
        refresh = self._next_id("ref")
        self.tokens[token] = user["userId"]
        self.refresh_tokens[refresh] = user["userId"]
        return {
            "userId": user["userId"],
            "token": token,
            "refreshToken": refresh,
            "expiresIn": 7200,
            "userInfo": user,
        }

    def _user_by_id(self, user_id: str) -> Optional[dict]:
        return next((u for u in self.users.values() if u["userId"] == user_id), None)

    def _build_app(self) -> FastAPI:
        app = FastAPI()
        backend = self

        # ---------------- auth ----------------

        @app.post("/api/auth/phone/send-code")
        async def send_code(payload: dict = Body(...)):
            backend.sent_codes.append(payload)
            return envelope({"expiresIn": 300}, "Code sent")

        @app.post("/api/auth/phone/login")
        async def phone_login(payload: dict = Body(...)):
            if payload.get("code") != VALID_CODE:
                return envelope(message="Invalid verification code", success=False)
            user = backend._user(payload["phone"], "phone", phone=payload["phone"])
            return envelope(backend._session(user), "Login successful")

        @app.post("/api/auth/phone/register")
        async def phone_register(payload: dict = Body(...)):
            if payload["phone"] in backend.users:
                return envelope(message="Phone number already registered", success=False)
            user = backend._user(payload["phone"], "phone", phone=payload["phone"], nickname=payload.get("nickname"))
            backend.passwords[payload["phone"]] = payload["password"]
            return envelope(backend._session(user), "Registered")

        @app.post("/api/auth/email/register")
        async def email_register(payload: dict = Body(...)):
            if payload["email"] in backend.users:
                return envelope(message="Email already registered", success=False)
            user = backend._user(payload["email"], "email", email=payload["email"], nickname=payload.get("nickname"))
            backend.passwords[payload["email"]] = payload["password"]
            return envelope(backend._session(user), "Registered")

        @app.post("/api/auth/email/login")
        async def email_login(payload: dict = Body(...)):
            if backend.passwords.get(payload["email"]) != payload["password"]:
                return envelope(message="Wrong email or password", success=False)
            return envelope(backend._session(backend.users[payload["email"]]), "Login successful")

        @app.post("/api/auth/wechat/login")
        async def wechat_login(payload: dict = Body(...)):
            hint = payload.get("userInfo") or {}
            user = backend._user(f"wx:{payload['code']}", "wechat", nickname=hint.get("nickname"))
            return envelope(backend._session(user))

        @app.post("/api/auth/qq/login")
        async def qq_login(payload: dict = Body(...)):
            user = backend._user(f"qq:{payload['openId']}", "qq")
            return envelope(backend._session(user))

        @app.post("/api/auth/refresh-token")
        async def refresh_token(payload: dict = Body(...)):
            user_id = backend.refresh_tokens.pop(payload["refreshToken"], None)
            if user_id is None:
                return JSONResponse(status_code=401, content=envelope(message="Invalid refresh token", success=False))
            return envelope(backend._session(backend._user_by_id(user_id)))

        @app.post("/api/auth/logout")
        async def logout(authorization: str = Header("")):
            token = authorization.removeprefix("Bearer ")
            if backend.tokens.pop(token, None) is None:
                return JSONResponse(status_code=401, content=envelope(message="Unauthorized", success=False))
            return envelope(message="Logged out")

        @app.get("/api/user/info")
        async def user_info(authorization: str = Header("")):
            user_id = backend.tokens.get(authorization.removeprefix("Bearer "))
            if user_id is None:
                return JSONResponse(status_code=401, content=envelope(message="Unauthorized", success=False))
            return envelope(backend._user_by_id(user_id))

        # ---------------- schedules ----------------

        def owned_by(user_id: str) -> list[dict]:
            return [s for s in backend.schedules.values() if s["userId"] == user_id]

        @app.get("/api/schedule/list/{user_id}")
        async def list_schedules(user_id: str):
            return envelope(owned_by(user_id))

        @app.post("/api/schedule/create")
        async def create_schedule(payload: dict = Body(...)):
            schedule = {**payload, "id": backend._next_id("s")}
            backend.schedules[schedule["id"]] = schedule
            return envelope(schedule, "Created")

        @app.put("/api/schedule/update")
        async def update_schedule(payload: dict = Body(...)):
            if payload["id"] not in backend.schedules:
                return not_found("Schedule not found")
            backend.schedules[payload["id"]] = payload
            return envelope(payload, "Updated")

        @app.delete("/api/schedule/delete/{schedule_id}")
        async def delete_schedule(schedule_id: str):
            if backend.schedules.pop(schedule_id, None) is None:
                return envelope(message="Schedule not found", success=False)
            return envelope({"id": schedule_id}, "Deleted")

        @app.get("/api/schedule/date")
        async def schedules_on(userId: str, date: str):
            return envelope([s for s in owned_by(userId) if s["date"] == date])

        @app.get("/api/schedule/range")
        async def schedules_between(userId: str, startDate: str, endDate: str):
            return envelope([s for s in owned_by(userId) if startDate <= s["date"] <= endDate])

        @app.get("/api/schedule/detail/{schedule_id}")
        async def schedule_detail(schedule_id: str):
            schedule = backend.schedules.get(schedule_id)
            if schedule is None:
                return not_found("Schedule not found")
            return envelope(schedule)

        # ---------------- chat ----------------

        @app.post("/api/ai/chat/new")
        async def new_conversation(payload: dict = Body(...)):
            conversation_id = backend._next_id("c")
            backend.conversations[conversation_id] = {
                "id": conversation_id,
                "title": payload.get("title", "New Chat"),
                "userId": payload["userId"],
                "createdAt": "2024-03-05T10:00:00",
                "updatedAt": "2024-03-05T10:00:00",
            }
            backend.messages[conversation_id] = []
            return envelope({"id": conversation_id, "title": payload.get("title")})

        @app.post("/api/ai/chat")
        async def chat(payload: dict = Body(...)):
            backend.chat_requests.append(payload)
            conversation_id = payload["memoryId"]
            if conversation_id not in backend.conversations:
                return envelope(message="Conversation not found", success=False)
            history = backend.messages[conversation_id]
            history.append({"id": len(history) + 1, "role": "user", "content": payload["message"]})
            if not backend.reply_enabled:
                return JSONResponse(status_code=503, content=envelope(message="AI service busy", success=False))
            reply = f"Echo: {payload['message']}"
            history.append({"id": len(history) + 1, "role": "assistant", "content": reply})
            return envelope({"memoryId": conversation_id}, reply)

        @app.get("/api/conversation/list/{user_id}")
        async def list_conversations(user_id: str):
            items = [
                {**c, "messageCount": len(backend.messages[c["id"]])}
                for c in backend.conversations.values()
                if c["userId"] == user_id
            ]
            return envelope(items)

        @app.get("/api/conversation/messages/{conversation_id}")
        async def conversation_messages(conversation_id: str, userId: str):
            conversation = backend.conversations.get(conversation_id)
            if conversation is None or conversation["userId"] != userId:
                return envelope(message="Conversation not found", success=False)
            return envelope(backend.messages[conversation_id])

        @app.delete("/api/conversation/delete/{conversation_id}")
        async def delete_conversation(conversation_id: str):
            if backend.conversations.pop(conversation_id, None) is None:
                return envelope(message="Conversation not found", success=False)
            backend.messages.pop(conversation_id, None)
            return envelope(message="Deleted")

        return app


@pytest.fixture
def backend():
    return FakeBackend()


@pytest_asyncio.fixture
async def app_context(settings, backend):
    """AppContext wired to the fake backend."""
    context = await AppContext.create(settings, transport=httpx.ASGITransport(app=backend.app))
    yield context
    await context.aclose()
