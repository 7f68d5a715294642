"""Pytest configuration and shared fixtures."""

import uuid
from collections.abc import AsyncGenerator, Callable, Generator
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from medexplain.api.deps import get_webhook_client
from medexplain.core.access import Principal
from medexplain.core.config import settings
from medexplain.db import (
    AppAdmin,
    Base,
    Citation,
    Drug,
    EvidenceLevel,
    Gene,
    Guideline,
    Interaction,
    Phenotype,
    Source,
    get_db,
)
from medexplain.main import app
from medexplain.services.webhooks import WebhookClient

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a synchronous test client for FastAPI."""
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# Database
# =============================================================================


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the full schema."""
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
    webhook_stub: "WebhookStub",
) -> AsyncGenerator[AsyncClient, None]:
    """Create an asynchronous test client for FastAPI with DB and webhook overrides."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    async def override_get_webhook_client() -> AsyncGenerator[WebhookClient, None]:
        async with webhook_stub.client() as client:
            yield client

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_webhook_client] = override_get_webhook_client

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client_no_db() -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client without DB (for non-DB endpoints)."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# =============================================================================
# Webhooks
# =============================================================================


class WebhookStub:
    """
    Stands in for the external ingestion pipelines.

    Records every request; set ``status_code`` or ``error`` to change how
    the next triggers are answered.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code)

    def client(self) -> WebhookClient:
        return WebhookClient(transport=httpx.MockTransport(self))


@pytest.fixture
def webhook_stub() -> WebhookStub:
    return WebhookStub()


# =============================================================================
# Principals and tokens
# =============================================================================


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Factory for bearer tokens signed like the auth provider's."""

    def _make(
        user_id: uuid.UUID,
        email: str | None = "user@example.org",
        expires_in: timedelta = timedelta(hours=1),
        **claims: Any,
    ) -> str:
        payload = {
            "sub": str(user_id),
            "aud": settings.auth_jwt_audience,
            "exp": datetime.now(UTC) + expires_in,
            **claims,
        }
        if email:
            payload["email"] = email
        return jwt.encode(payload, settings.auth_jwt_secret, algorithm=settings.auth_jwt_algorithm)

    return _make


@pytest.fixture
def user() -> Principal:
    return Principal(user_id=uuid.uuid4(), email="user@example.org")


@pytest.fixture
def other_user() -> Principal:
    return Principal(user_id=uuid.uuid4(), email="other@example.org")


@pytest.fixture
def admin() -> Principal:
    return Principal(user_id=uuid.uuid4(), is_admin=True, email="admin@example.org")


@pytest_asyncio.fixture
async def admin_row(db_session: AsyncSession, admin: Principal) -> AppAdmin:
    """Persist the admin principal's app_admins row."""
    row = AppAdmin(user_id=admin.user_id, email=admin.email)
    db_session.add(row)
    await db_session.commit()
    return row


@pytest.fixture
def auth_headers(make_token: Callable[..., str], user: Principal) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user.user_id)}"}


@pytest.fixture
def admin_headers(
    make_token: Callable[..., str],
    admin: Principal,
    admin_row: AppAdmin,
) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(admin.user_id, email=admin.email)}"}


# =============================================================================
# Reference data
# =============================================================================


@pytest_asyncio.fixture
async def reference_data(db_session: AsyncSession) -> dict[str, Any]:
    """
    Warfarin/CYP2C9 with a guideline, one citation and one interaction,
    plus a second drug and gene with no interaction between them.
    """
    source = Source(name="CPIC", url="https://cpicpgx.org")
    warfarin = Drug(name="Warfarin", aliases=["Coumadin"])
    ibuprofen = Drug(name="Ibuprofen")
    cyp2c9 = Gene(symbol="CYP2C9", name="Cytochrome P450 2C9")
    cyp2d6 = Gene(symbol="CYP2D6", name="Cytochrome P450 2D6")
    db_session.add_all([source, warfarin, ibuprofen, cyp2c9, cyp2d6])
    await db_session.flush()

    phenotype = Phenotype(gene_id=cyp2c9.id, phenotype="Poor Metabolizer")
    guideline = Guideline(
        drug_id=warfarin.id,
        gene_id=cyp2c9.id,
        source_id=source.id,
        recommendation="Reduce starting dose",
        evidence_level=EvidenceLevel.HIGH.value,
        patient_summary="Reduce dose",
        clinician_summary="Reduce initial dose by 25-50% and titrate by INR.",
    )
    db_session.add_all([phenotype, guideline])
    await db_session.flush()

    citation = Citation(
        guideline_id=guideline.id,
        title="CPIC Guideline for Warfarin Dosing",
        authors="Johnson JA",
        journal="Clin Pharmacol Ther",
        year=2017,
    )
    interaction = Interaction(
        drug_id=warfarin.id,
        gene_id=cyp2c9.id,
        phenotype_id=phenotype.id,
        guideline_id=guideline.id,
        action="Reduce dose",
        summary="Reduced warfarin clearance",
        evidence="Prospective dosing studies",
    )
    db_session.add_all([citation, interaction])
    await db_session.commit()

    return {
        "source": source,
        "drug": warfarin,
        "unpaired_drug": ibuprofen,
        "gene": cyp2c9,
        "unpaired_gene": cyp2d6,
        "phenotype": phenotype,
        "guideline": guideline,
        "citation": citation,
        "interaction": interaction,
    }
