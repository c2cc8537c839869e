"""Pytest configuration and fixtures for the case file API.

Environment is set before the app is imported so get_settings() sees a
secret and a throwaway storage root. HTTP tests use app.main:app with the
service dependencies overridden by in-memory fakes; repository tests need
Postgres and are marked requires_db.
"""

import os
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("STORAGE_BACKEND", "local")
os.environ.setdefault("STORAGE_ROOT", tempfile.mkdtemp(prefix="case-file-tests-"))

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.api.v1 import dependencies as deps  # noqa: E402
from app.application.services.upload_policy import UploadPolicy  # noqa: E402
from app.application.use_cases.cases import (  # noqa: E402
    CaseAttachmentService,
    CaseService,
)
from app.application.use_cases.notes import NoteService  # noqa: E402
from app.core.limiter import limiter  # noqa: E402
from app.infrastructure.persistence import database  # noqa: E402
from app.infrastructure.security.jwt import create_access_token  # noqa: E402
from app.main import app  # noqa: E402
from tests.fakes import (  # noqa: E402
    InMemoryCaseRepository,
    InMemoryNoteRepository,
    InMemoryStorage,
)

OWNER_ID = "user-owner-1"
OTHER_USER_ID = "user-other-2"


@pytest.fixture(autouse=True)
def _reset_rate_limits() -> None:
    limiter.reset()


@pytest.fixture
def events() -> list[str]:
    """Shared log of persistence/storage side effects, in call order."""
    return []


@pytest.fixture
def case_repo(events: list[str]) -> InMemoryCaseRepository:
    return InMemoryCaseRepository(events)


@pytest.fixture
def note_repo(events: list[str]) -> InMemoryNoteRepository:
    return InMemoryNoteRepository(events)


@pytest.fixture
def storage(events: list[str]) -> InMemoryStorage:
    return InMemoryStorage(events)


@pytest.fixture
def case_service(case_repo, note_repo, storage) -> CaseService:
    return CaseService(case_repo, note_repo, storage)


@pytest.fixture
def attachment_service(case_repo, note_repo, storage) -> CaseAttachmentService:
    return CaseAttachmentService(case_repo, note_repo, storage, UploadPolicy())


@pytest.fixture
def note_service(note_repo) -> NoteService:
    return NoteService(note_repo)


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI), no dependency overrides."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def api_client(case_service, attachment_service, note_service) -> AsyncClient:
    """Client whose case and note services run on the in-memory fakes."""
    app.dependency_overrides.update({
        deps.get_case_service: lambda: case_service,
        deps.get_case_service_for_write: lambda: case_service,
        deps.get_attachment_service: lambda: attachment_service,
        deps.get_attachment_service_for_write: lambda: attachment_service,
        deps.get_note_service: lambda: note_service,
        deps.get_note_service_for_write: lambda: note_service,
    })
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Bearer headers for OWNER_ID."""
    return {"Authorization": f"Bearer {create_access_token(OWNER_ID)}"}


@pytest.fixture
def other_auth_headers() -> dict[str, str]:
    """Bearer headers for a second user."""
    return {"Authorization": f"Bearer {create_access_token(OTHER_USER_ID)}"}


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository tests. Rolls back after test.

    Requires DATABASE_URL pointing at a migrated Postgres database. Skips
    when it is not configured. Run without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
    # Each test runs on its own event loop; the pool must not outlive it.
    await database.dispose_engine()
