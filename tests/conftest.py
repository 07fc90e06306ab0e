"""
Test Suite Configuration
"""
from typing import AsyncGenerator

import httpx
import pytest
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from syntera.config import Settings
from syntera.database.connection import get_db_dependency
from syntera.database.models import Base
from syntera.database.store import RecordStore
from syntera.serving.api import create_api_app


def _memory_engine():
    # One shared connection so every session sees the same in-memory database
    return create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
async def test_engine():
    """Create test database engine with the schema in place"""
    engine = _memory_engine()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(test_db) -> RecordStore:
    return RecordStore(test_db)


@pytest.fixture
async def broken_db() -> AsyncGenerator[AsyncSession, None]:
    """Session on a database with no tables, so every query faults"""
    engine = _memory_engine()
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


def _app_with_db(factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    app = create_api_app()

    async def override_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db_dependency] = override_db
    return app


@pytest.fixture
def app(session_factory) -> FastAPI:
    return _app_with_db(session_factory)


@pytest.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest.fixture
async def broken_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """API client whose database has no tables"""
    engine = _memory_engine()
    app = _app_with_db(async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False))
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    await engine.dispose()


@pytest.fixture
def consumer_payload() -> dict:
    return {
        "email": "a@x.com",
        "password": "12345678",
        "type": "consumer",
        "username": "abc",
        "uniqueCode": "ABCD",
        "whatsapp": "+15550001111",
    }


@pytest.fixture
def business_payload() -> dict:
    return {
        "businessName": "Acme Retail",
        "email": "sales@acme.example",
        "password": "secret1",
        "type": "business",
        "category": "Sales",
    }
