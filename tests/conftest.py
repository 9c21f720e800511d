import asyncio
import pathlib
from typing import Any, Dict, List, Optional

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from src.blog.domain.media import DestroyResult, UploadedMedia
from src.config import Settings
from src.main import create_app
from src.shared.database import Database

SCHEMA = pathlib.Path(__file__).parent / "fixtures" / "schema.sql"


class FakeMediaStorage:
    """Records every call; `outcomes` maps a public id to a destroy result string or an exception."""

    def __init__(self):
        self.uploads: List[Dict[str, Any]] = []
        self.destroyed: List[str] = []
        self.outcomes: Dict[str, Any] = {}

    async def upload(self, data: bytes, filename: str, folder: str) -> UploadedMedia:
        stem = filename.rsplit(".", 1)[0]
        public_id = f"{folder}/{stem}-{len(self.uploads) + 1}"
        self.uploads.append({"filename": filename, "folder": folder, "size": len(data), "public_id": public_id})
        return UploadedMedia(url=f"https://media.test/{public_id}.jpg", public_id=public_id)

    async def destroy(self, public_id: str) -> DestroyResult:
        self.destroyed.append(public_id)
        outcome = self.outcomes.get(public_id, "ok")
        if isinstance(outcome, Exception):
            raise outcome
        return DestroyResult(result=outcome, raw={"result": outcome})


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        LOG_FORMAT="console",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        JWT_SECRET="test-secret-for-pytest-only-0123456789",
        JWT_ALGORITHM="HS256",
    )


@pytest.fixture
def engine(settings):
    # NullPool: seeding runs on its own loop, the app on the TestClient's loop
    engine = create_async_engine(settings.DATABASE_URL, poolclass=NullPool)

    async def _create_schema():
        statements = [s.strip() for s in SCHEMA.read_text(encoding="utf-8").split(";") if s.strip()]
        async with engine.begin() as conn:
            for statement in statements:
                await conn.exec_driver_sql(statement)

    asyncio.run(_create_schema())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def db(engine) -> Database:
    return Database(engine)


@pytest.fixture
def sql(db):
    """Run one statement synchronously: rows for a SELECT, rowcount otherwise."""

    def _run(statement: str, params: Optional[Dict[str, Any]] = None):
        if statement.lstrip().upper().startswith("SELECT"):
            return asyncio.run(db.fetch_all(text(statement), params))
        return asyncio.run(db.execute(text(statement), params))

    return _run


@pytest.fixture
def media() -> FakeMediaStorage:
    return FakeMediaStorage()


@pytest.fixture
def client(settings, db, media):
    app = create_app(settings, database=db, media_storage=media)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_token(settings):
    def _make(sub: Any, role: Optional[str] = None, **extra: Any) -> str:
        payload: Dict[str, Any] = {"sub": sub, **extra}
        if role is not None:
            payload["role"] = role
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    return _make


@pytest.fixture
def auth(make_token):
    """Authorization header for a caller; admin by default."""

    def _auth(sub: Any = 1, role: Optional[str] = "Admin") -> Dict[str, str]:
        return {"Authorization": f"Bearer {make_token(sub, role)}"}

    return _auth
