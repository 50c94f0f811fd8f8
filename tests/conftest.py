"""
Shared fixtures.
"""

import pytest
import pytest_asyncio

from quickplan.core.config import Settings
from quickplan.infrastructure.local.credential_store import SqliteCredentialStore
from quickplan.infrastructure.local.database import get_engine, get_session_factory, init_db
from quickplan.models.enums import LoginType
from quickplan.models.user import LoginData, UserProfile


@pytest.fixture
def settings(tmp_path):
    """Test settings with an isolated SQLite file and a fast cooldown."""
    return Settings(
        ENVIRONMENT="test",
        API_BASE_URL="http://test",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'prefs.db'}",
        COOLDOWN_TICK_SECONDS=0.01,
    )


@pytest_asyncio.fixture
async def session_factory(settings):
    """Session factory on a freshly initialized database."""
    engine = get_engine(settings)
    await init_db(engine)
    yield get_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def credential_store(session_factory):
    return SqliteCredentialStore(session_factory=session_factory)


@pytest.fixture
def test_user_id():
    return "user-42"


@pytest.fixture
def profile(test_user_id):
    return UserProfile(
        user_id=test_user_id,
        phone="13800138000",
        nickname="Tester",
        created_at="2024-03-01T08:00:00",
        login_type=LoginType.PHONE,
    )


@pytest.fixture
def login_data(profile):
    return LoginData(
        user_id=profile.user_id,
        token="access-1",
        refresh_token="refresh-1",
        expires_in=7200,
        user_info=profile,
    )
