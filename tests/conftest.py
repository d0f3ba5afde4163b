"""
Pytest fixtures for ProjectNinjas tests.

Every test gets its own SQLite database (aiosqlite) and content directory
under tmp_path.
"""

import io
import os
import uuid
from typing import AsyncGenerator, List, Tuple

# Settings are read when projectninjas.main is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only-0123456789")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./projectninjas-test.db")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from reportlab.pdfgen import canvas
from sqlalchemy.ext.asyncio import AsyncSession

from projectninjas.config import Settings
from projectninjas.database import Database
from projectninjas.kernel.files.storage import ContentStore
from projectninjas.kernel.identity import password as password_module
from projectninjas.kernel.identity.jwt import JWTManager
from projectninjas.kernel.identity.password import hash_password
from projectninjas.kernel.models.project import Project
from projectninjas.kernel.models.user import User
from projectninjas.main import create_app

TEST_SECRET_KEY = "test-secret-key-for-testing-only-0123456789"
TEST_PASSWORD = "TestPassword123"


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Use the cheapest bcrypt cost so hashing does not dominate test time."""
    monkeypatch.setattr(password_module, "BCRYPT_ROUNDS", 4)


@pytest_asyncio.fixture(scope="function")
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """Create a fresh SQLite database with all tables."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with database.session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def content_store(tmp_path) -> ContentStore:
    store = ContentStore(tmp_path / "uploads")
    store.ensure_root()
    return store


@pytest.fixture
def jwt_manager() -> JWTManager:
    """Create a JWT manager for tests."""
    return JWTManager(
        secret_key=TEST_SECRET_KEY,
        algorithm="HS256",
        access_token_expire_minutes=30,
    )


@pytest.fixture
def app(tmp_path, database: Database, content_store: ContentStore, jwt_manager: JWTManager):
    """
    Application wired to the per-test database and content directory.

    httpx does not run the lifespan, so app.state is filled in here.
    """
    settings = Settings(
        secret_key=TEST_SECRET_KEY,
        database_url=database.url,
        upload_dir=str(content_store.root),
        environment="test",
    )
    application = create_app(settings)
    application.state.database = database
    application.state.content_store = content_store
    application.state.jwt_manager = jwt_manager
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _create_user(session: AsyncSession, email: str) -> User:
    user = User(
        id=uuid.uuid4(),
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
    )
    session.add(user)
    await session.commit()
    return user


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession) -> User:
    """Project owner."""
    return await _create_user(db_session, "owner@example.com")


@pytest_asyncio.fixture
async def requester(db_session: AsyncSession) -> User:
    """A second user who asks for access."""
    return await _create_user(db_session, "requester@example.com")


@pytest_asyncio.fixture
async def project(db_session: AsyncSession, owner: User) -> Project:
    """Create a test project owned by `owner`."""
    project = Project(
        id=uuid.uuid4(),
        title="Autonomous Greenhouse Controller",
        abstract="Sensor network and control loop for a small greenhouse.",
        keywords=["iot", "control"],
        owner_id=owner.id,
    )
    db_session.add(project)
    await db_session.commit()
    return project


def make_pdf(page_sizes: List[Tuple[float, float]] = ((612, 792),)) -> bytes:
    """Build a small PDF with one page per (width, height)."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer)
    for width, height in page_sizes:
        pdf.setPageSize((width, height))
        pdf.drawString(72, 72, "Quarterly report")
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def make_image(size: Tuple[int, int] = (320, 200), mode: str = "RGB", fmt: str = "PNG") -> bytes:
    """Build an image of the given pixel size in memory."""
    color = (30, 120, 200, 255)[: len(mode)] if mode in ("RGB", "RGBA") else 128
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf([(612, 792), (842, 595)])


@pytest.fixture
def png_bytes() -> bytes:
    return make_image((320, 200))


@pytest.fixture
def pdf_factory():
    """The make_pdf builder, for tests that need specific page sizes."""
    return make_pdf


@pytest.fixture
def image_factory():
    """The make_image builder, for tests that need specific sizes or modes."""
    return make_image
