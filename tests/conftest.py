import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# In-memory DB and no provider key for tests
os.environ["TRANSCRIPTION_API_KEY"] = ""
os.environ["GROQ_API_KEY"] = ""
os.environ["DATABASE_PATH"] = ":memory:"
os.environ["DATABASE_URL"] = ""
os.environ["SEED_DEMO_DATA"] = "false"

from scribe.database import close_db, init_db
from scribe.main import app


@pytest.fixture
def dummy_mode(monkeypatch):
    """Serve synthetic transcripts instead of calling the provider."""
    import scribe.services.transcription as transcription_mod

    monkeypatch.setattr(transcription_mod, "DUMMY_MODE", True)


@pytest_asyncio.fixture
async def db():
    """Provide a fresh in-memory database for each test."""
    import scribe.database as db_mod

    # Close any existing connection
    if db_mod._db is not None:
        await db_mod._db.close()
    db_mod._db = None

    # Override module-level config directly (avoids fragile importlib.reload)
    db_mod.DATABASE_PATH = ":memory:"
    db_mod.DATABASE_URL = ""
    db_mod.SEED_DEMO_DATA = False

    await init_db()
    database = await db_mod.get_db()
    yield database
    await close_db()


@pytest_asyncio.fixture
async def team_user(db):
    """A team with one member; returns ``{"id", "team_id"}``."""
    team_id = await db.insert("INSERT INTO teams (name) VALUES (?)", ("Acme",))
    user_id = await db.insert(
        "INSERT INTO users (email, team_id) VALUES (?, ?)", ("ada@acme.test", team_id)
    )
    await db.commit()
    return {"id": user_id, "team_id": team_id}


@pytest_asyncio.fixture
async def lone_user(db):
    """A user that belongs to no team."""
    user_id = await db.insert("INSERT INTO users (email) VALUES (?)", ("solo@nowhere.test",))
    await db.commit()
    return {"id": user_id, "team_id": None}


@pytest_asyncio.fixture
async def async_client(db):
    """Provide an async httpx client for async HTTP tests."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
