"""
Auth session manager.

Owns the single source of truth for "is a user logged in": drives the
login/registration/logout flows of the four identity providers, writes
sessions into the credential store and runs the verification-code
resend cooldown.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from quickplan.core.config import Settings, get_settings
from quickplan.core.exceptions import InfrastructureError, QuickPlanError, TransportError, ValidationError
from quickplan.core.logger import setup_logger
from quickplan.core.observable import Observable
from quickplan.interfaces.auth_api import IAuthApi
from quickplan.interfaces.credential_store import ICredentialStore
from quickplan.models.api import ApiResponse
from quickplan.models.enums import CodePurpose
from quickplan.models.user import (
    EmailLoginRequest,
    EmailRegisterRequest,
    LoginData,
    PhoneLoginRequest,
    PhoneRegisterRequest,
    QQLoginRequest,
    QQUserInfo,
    RefreshTokenRequest,
    SendCodeRequest,
    UserProfile,
    WechatLoginRequest,
    WechatUserInfo,
)
from quickplan.utils.validators import is_blank, require_email, require_new_password, require_phone

logger = setup_logger(__name__)


class AuthSessionManager:
    """
    Session lifecycle for one client.

    Every remote operation follows the same pattern: busy on, error
    cleared, exactly one request, session written on success, error set on
    failure, busy off. Local validation failures set the error without any
    request.
    """

    def __init__(
        self,
        auth_api: IAuthApi,
        credential_store: ICredentialStore,
        settings: Optional[Settings] = None,
    ):
        self._auth_api = auth_api
        self._store = credential_store
        self._settings = settings or get_settings()
        self._cooldown_task: Optional[asyncio.Task] = None

        self.profile: Observable[Optional[UserProfile]] = Observable(None)
        self.is_logged_in: Observable[bool] = Observable(False)
        self.is_busy: Observable[bool] = Observable(False)
        self.error: Observable[Optional[str]] = Observable(None)
        self.cooldown: Observable[int] = Observable(0)

    async def restore(self) -> None:
        """Load the persisted session into memory (app start)."""
        logged_in = await self._store.is_logged_in()
        self.is_logged_in.set(logged_in)
        self.profile.set(await self._store.get_profile() if logged_in else None)

    # ===========================================
    # Verification code
    # ===========================================

    async def send_verification_code(self, phone: str, purpose: CodePurpose = CodePurpose.LOGIN) -> bool:
        """Request an SMS code and start the resend cooldown."""

        def validate() -> None:
            require_phone(phone)
            if self.cooldown.value > 0:
                raise ValidationError("Please try again later")

        async def on_success(response: ApiResponse) -> None:
            response.raise_for_failure("Failed to send verification code")
            self._start_cooldown(self._settings.CODE_COOLDOWN_SECONDS)

        return await self._perform(
            "send verification code",
            lambda: self._auth_api.send_verification_code(SendCodeRequest(phone=phone, type=purpose)),
            on_success,
            validate,
        )

    def _start_cooldown(self, seconds: int) -> None:
        # The value is set before the task starts so callers see it immediately.
        self.cooldown.set(seconds)
        self._cooldown_task = asyncio.create_task(self._run_cooldown(seconds))

    async def _run_cooldown(self, seconds: int) -> None:
        for _ in range(seconds):
            await asyncio.sleep(self._settings.COOLDOWN_TICK_SECONDS)
            self.cooldown.set(max(self.cooldown.value - 1, 0))

    # ===========================================
    # Login / registration
    # ===========================================

    async def phone_login(self, phone: str, code: str) -> bool:
        def validate() -> None:
            if is_blank(phone) or is_blank(code):
                raise ValidationError("Please enter phone number and verification code")
            require_phone(phone)

        return await self._login(
            "phone login",
            lambda: self._auth_api.phone_login(PhoneLoginRequest(phone=phone, code=code)),
            "Login failed",
            validate,
        )

    async def email_login(self, email: str, password: str) -> bool:
        def validate() -> None:
            if is_blank(email) or is_blank(password):
                raise ValidationError("Please enter email and password")
            require_email(email)

        return await self._login(
            "email login",
            lambda: self._auth_api.email_login(EmailLoginRequest(email=email, password=password)),
            "Login failed",
            validate,
        )

    async def phone_register(
        self,
        phone: str,
        code: str,
        password: str,
        confirm_password: str,
        nickname: Optional[str] = None,
    ) -> bool:
        def validate() -> None:
            require_phone(phone)
            if is_blank(code):
                raise ValidationError("Please enter the verification code")
            require_new_password(password, confirm_password)

        return await self._login(
            "phone registration",
            lambda: self._auth_api.phone_register(
                PhoneRegisterRequest(phone=phone, code=code, password=password, nickname=nickname)
            ),
            "Registration failed",
            validate,
        )

    async def email_register(
        self,
        email: str,
        password: str,
        confirm_password: str,
        nickname: Optional[str] = None,
    ) -> bool:
        def validate() -> None:
            require_email(email)
            require_new_password(password, confirm_password)

        return await self._login(
            "email registration",
            lambda: self._auth_api.email_register(
                EmailRegisterRequest(email=email, password=password, nickname=nickname)
            ),
            "Registration failed",
            validate,
        )

    async def wechat_login(self, code: str, user_info: Optional[WechatUserInfo] = None) -> bool:
        """Exchange a WeChat authorization code for a session."""
        return await self._login(
            "wechat login",
            lambda: self._auth_api.wechat_login(WechatLoginRequest(code=code, user_info=user_info)),
            "WeChat login failed",
        )

    async def qq_login(self, access_token: str, open_id: str, user_info: Optional[QQUserInfo] = None) -> bool:
        """Exchange a QQ access token for a session."""
        request = QQLoginRequest(access_token=access_token, open_id=open_id, user_info=user_info)
        return await self._login(
            "qq login",
            lambda: self._auth_api.qq_login(request),
            "QQ login failed",
        )

    async def handle_login_success(self, login_data: LoginData) -> None:
        """Persist a new session and publish it."""
        await self._store.save(login_data.token, login_data.refresh_token, login_data.user_info)
        self.profile.set(login_data.user_info)
        self.is_logged_in.set(True)
        logger.info(f"Logged in: {login_data.user_info.user_id}")

    # ===========================================
    # Session maintenance
    # ===========================================

    async def refresh_session(self) -> bool:
        """Trade the stored refresh token for a new token pair."""
        refresh_token = await self._store.get_refresh_token()
        if is_blank(refresh_token):
            return self._reject("Session expired, please log in again")

        async def on_success(response: ApiResponse) -> None:
            data = response.require_data("Failed to refresh session")
            await self._store.update_token(data.token, data.refresh_token)

        return await self._perform(
            "refresh session",
            lambda: self._auth_api.refresh_token(RefreshTokenRequest(refresh_token=refresh_token)),
            on_success,
        )

    async def fetch_profile(self) -> bool:
        """Reload the profile of the logged-in user from the backend."""
        token = await self._store.get_token()
        if token is None:
            return self._reject("Not logged in")

        async def on_success(response: ApiResponse) -> None:
            profile = response.require_data("Failed to load user info")
            refresh_token = await self._store.get_refresh_token()
            await self._store.save(token, refresh_token or "", profile)
            self.profile.set(profile)

        return await self._perform(
            "fetch profile",
            lambda: self._auth_api.get_user_info(token),
            on_success,
        )

    async def get_auth_token(self) -> Optional[str]:
        return await self._store.get_token()

    async def logout(self) -> None:
        """
        End the session.

        The backend is told on a best-effort basis; the local session is
        cleared whatever happens to that request.
        """
        try:
            token = await self._store.get_token()
            if token is not None:
                response = await self._auth_api.logout(token)
                if not response.success:
                    logger.warning(f"Logout rejected by server: {response.message}")
        except QuickPlanError as e:
            logger.warning(f"Logout request failed: {e.message}")
        finally:
            try:
                await self._store.clear()
            except InfrastructureError as e:
                logger.error(f"Failed to clear stored session: {e.message}")
            self.profile.set(None)
            self.is_logged_in.set(False)

    def clear_error(self) -> None:
        self.error.set(None)

    async def aclose(self) -> None:
        """Stop the cooldown countdown (shutdown only)."""
        if self._cooldown_task and not self._cooldown_task.done():
            self._cooldown_task.cancel()

    # ===========================================
    # Helpers
    # ===========================================

    def _reject(self, message: str) -> bool:
        self.error.set(message)
        return False

    async def _login(
        self,
        action: str,
        call: Callable[[], Awaitable[ApiResponse[LoginData]]],
        failure_message: str,
        validate: Optional[Callable[[], None]] = None,
    ) -> bool:
        async def on_success(response: ApiResponse[LoginData]) -> None:
            await self.handle_login_success(response.require_data(failure_message))

        return await self._perform(action, call, on_success, validate)

    async def _perform(
        self,
        action: str,
        call: Callable[[], Awaitable[ApiResponse]],
        on_success: Callable[[ApiResponse], Awaitable[None]],
        validate: Optional[Callable[[], None]] = None,
    ) -> bool:
        """
        Run one remote operation.

        validate runs first; a ValidationError it raises becomes the error
        message and no request is sent.
        """
        if validate is not None:
            try:
                validate()
            except ValidationError as e:
                logger.debug(f"{action} rejected locally: {e.message}")
                return self._reject(e.message)

        self.is_busy.set(True)
        self.error.set(None)
        try:
            response = await call()
            await on_success(response)
            return True
        except TransportError as e:
            logger.error(f"{action} failed: {e.message}")
            self.error.set(e.message)
        except QuickPlanError as e:
            logger.warning(f"{action} failed: {e.message}")
            self.error.set(e.message)
        finally:
            self.is_busy.set(False)
        return False
