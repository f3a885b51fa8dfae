"""
Shared fixtures: the FastAPI app wired to an in-memory SQLite database.
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from main import app
from services.db import Base, get_session

SQLITE_URL = "sqlite+aiosqlite://"


@pytest.fixture
def client():
    eng = create_async_engine(SQLITE_URL, poolclass=StaticPool)
    maker = async_sessionmaker(eng, expire_on_commit=False)
    schema_ready = False

    async def _session_override():
        nonlocal schema_ready
        if not schema_ready:
            async with eng.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            schema_ready = True
        async with maker() as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    with TestClient(app) as c:
        yield c
        c.portal.call(eng.dispose)
    app.dependency_overrides.clear()
