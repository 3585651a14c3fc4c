import fakeredis
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from todo_api.core.config import settings
from todo_api.core.security import sign_session_id
from todo_api.db.base import Base
from todo_api.db.session import enable_sqlite_foreign_keys, get_db
from todo_api.dependencies.session import get_oauth_client, get_session_store
from todo_api.main import create_app
from todo_api.models import category, tag, todo, todo_tag  # noqa: F401
from todo_api.models.user import User
from todo_api.schemas.user import ProfileValue, ProviderProfile
from todo_api.services.session_service import SessionStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeOAuthClient:
    """Stands in for Google: hands back whatever profile the test set."""

    is_configured = True

    def __init__(self):
        self.profile = ProviderProfile(
            id="google-sub-1",
            display_name="Alice Example",
            emails=[ProfileValue(value="alice@gmail.com")],
            photos=[ProfileValue(value="https://lh3.googleusercontent.com/a/alice")],
        )
        self.codes = []

    def authorization_url(self, state: str) -> str:
        return f"https://accounts.google.com/o/oauth2/auth?state={state}"

    async def fetch_profile(self, code: str) -> ProviderProfile:
        self.codes.append(code)
        return self.profile


@pytest.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine.sync_engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def redis():
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def session_store(redis):
    return SessionStore(
        redis,
        ttl_seconds=settings.session_max_age_seconds,
        key_prefix=settings.session_key_prefix,
    )


@pytest.fixture
def oauth_client():
    return FakeOAuthClient()


@pytest.fixture
def app(session_factory, session_store, oauth_client):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_oauth_client] = lambda: oauth_client
    return app


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _make_user(session_factory, google_id: str, email: str, name: str) -> User:
    async with session_factory() as session:
        user = User(google_id=google_id, email=email, name=name, password="!unusable")
        session.add(user)
        await session.commit()
        return user


@pytest.fixture
async def user(session_factory):
    return await _make_user(session_factory, "google-alice", "alice@gmail.com", "Alice")


@pytest.fixture
async def other_user(session_factory):
    return await _make_user(session_factory, "google-bob", "bob@gmail.com", "Bob")


async def login(client: AsyncClient, session_store: SessionStore, user: User) -> str:
    """Create a session for ``user`` and attach its cookie to the client."""
    session_id = await session_store.create(user.id)
    client.cookies.clear()
    client.cookies.set(settings.session_cookie_name, sign_session_id(session_id))
    return session_id


@pytest.fixture
async def auth_client(client, session_store, user):
    await login(client, session_store, user)
    return client
