"""Pytest fixtures for the task tracker"""
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import tasktracker.models  # noqa: F401
from tasktracker.database.base import Base
from tasktracker.database.store import SqlEntityStore

TEAM_ID = "team-core"
ADMIN_ID = "user-ada"
MEMBER_ID = "user-ben"
OUTSIDER_ID = "user-cy"


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine):
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def store(db_session) -> SqlEntityStore:
    """
    Store seeded with one team: Ada (admin), Ben (member), and Cy who has a
    profile but no membership.
    """
    store = SqlEntityStore(db_session)
    store.insert("team", {"id": TEAM_ID, "name": "Core"})
    store.insert("profile", {"user_id": ADMIN_ID, "full_name": "Ada Lovelace"})
    store.insert("profile", {"user_id": MEMBER_ID, "full_name": "Ben Okri"})
    store.insert("profile", {"user_id": OUTSIDER_ID, "full_name": "Cy Twombly"})
    store.insert("team_member", {
        "team_id": TEAM_ID, "user_id": ADMIN_ID, "role": "admin",
        "created_at": datetime(2024, 1, 1, 9, 0),
    })
    store.insert("team_member", {
        "team_id": TEAM_ID, "user_id": MEMBER_ID, "role": "member",
        "created_at": datetime(2024, 1, 2, 9, 0),
    })
    return store


@pytest.fixture()
def make_task(store):
    """Inserts a task in the seeded team; Ada creates it unless told otherwise."""
    def _make(title="Task", **fields):
        values = {"team_id": TEAM_ID, "title": title, "creator_id": ADMIN_ID, "status": "todo"}
        values.update(fields)
        return store.insert("task", values)
    return _make
