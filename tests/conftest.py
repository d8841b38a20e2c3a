import pytest

from pm_toolkit import db


@pytest.fixture
async def fresh_db(tmp_path, monkeypatch):
    """Point the store at a throwaway directory and create the schema."""
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    await db.close_db()
    await db.init_db()
    yield tmp_path
    await db.close_db()


@pytest.fixture
def sample_records():
    return [
        {"id": "a1", "title": "Dark mode support", "owner": "You", "reach": 200, "impact": 2, "confidence": 80, "effort": 2},
        {"id": "b2", "title": "Global search bar", "owner": "You", "reach": 120, "impact": 2, "confidence": 85, "effort": 1},
    ]
