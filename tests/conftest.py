import os

# Keep test runs from writing log files or waiting on real feedback windows
os.environ.setdefault("LOG_DIR", "")
os.environ.setdefault("SAVED_FEEDBACK_SECONDS", "0.05")

import pytest
import pytest_asyncio

from warboard.database.database import Database
from warboard.operations import ClanOperations, PlayerOperations


@pytest_asyncio.fixture
async def db(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'warboard_test.db'}")
    await database.initialize()
    yield database
    await database.close()


@pytest.fixture
def clan_ops(db):
    return ClanOperations(db.session_factory)


@pytest.fixture
def player_ops(db):
    return PlayerOperations(db.session_factory)


@pytest_asyncio.fixture
async def clan(clan_ops):
    return await clan_ops.create_clan("owner-1", "Night Raiders")
