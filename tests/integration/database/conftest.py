# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for database integration tests.

Provides database sessions and engines for testing, plus seeded content.
Runs against in-memory SQLite unless TEST_DATABASE_URL points elsewhere.
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.infrastructure.database.models import OERResource, UnifiedCourse
from src.infrastructure.database.models.base import Base


@pytest.fixture(scope="session")
def database_url() -> str:
    """Get database URL for tests."""
    return os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest_asyncio.fixture(scope="function")
async def db_engine(database_url: str):
    """Create async engine with a fresh schema."""
    if database_url.startswith("sqlite"):
        # One shared connection, so every session sees the same memory database
        engine = create_async_engine(
            database_url,
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session configured like the application's."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def course(db_session: AsyncSession) -> UnifiedCourse:
    """Create a committed course."""
    course = UnifiedCourse(
        original_id="moodle-101",
        title="Basic Algebra",
        short_title="ALG101",
        description="Linear equations and inequalities",
        source="moodle",
        type="course",
        format="online",
        language="en",
        approved=True,
        nerdc_topic_code="MTH.JSS1.ALG",
        curriculum_tags=["NERDC", "WAEC"],
        subjects=["mathematics"],
        download_count=0,
        course_metadata={"level": "JSS1"},
    )
    db_session.add(course)
    await db_session.commit()
    await db_session.refresh(course)
    return course


@pytest_asyncio.fixture
async def oer_resource(db_session: AsyncSession) -> OERResource:
    """Create a committed OER resource."""
    resource = OERResource(
        title="Photosynthesis Explained",
        description="Short video on how plants make food",
        provider="Khan Academy",
        url="https://example.org/photosynthesis",
        type="video",
        language="en",
        license="CC BY-NC-SA",
        subjects=["biology"],
        curriculum_tags=["NERDC"],
        nerdc_topic_code="BIO.SS1.PHO",
        download_count=3,
        resource_metadata={"duration": 540},
    )
    db_session.add(resource)
    await db_session.commit()
    await db_session.refresh(resource)
    return resource
