"""Shared fixtures: a fresh file-backed SQLite database per test."""

import os
import tempfile
import uuid

# Keep the application's module-level engine away from the working directory
os.environ.setdefault(
    "DATABASE_URL", f"sqlite:///{os.path.join(tempfile.mkdtemp(prefix='bounty-'), 'app.db')}"
)
os.environ.setdefault("OPERATOR_USER_IDS", "operator")

import pytest
from sqlalchemy.orm import sessionmaker

from bounty.database import create_db_and_tables, make_engine
from bounty.models.team import Team


@pytest.fixture
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'bounty.db'}")
    create_db_and_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def catalog(session_factory):
    """One team per seed 1-16; returns {seed: team_id}."""
    ids = {}
    session = session_factory()
    try:
        for seed in range(1, 17):
            team_id = str(uuid.uuid4())
            session.add(Team(id=team_id, name=f"Seed {seed} U", seed=seed))
            ids[seed] = team_id
        session.commit()
    finally:
        session.close()
    return ids


def pick_set(catalog, favorite=1, upsets=(9, 10, 11)) -> list[str]:
    """Team ids for a legal pick set: three upset seeds plus one favorite."""
    return [catalog[s] for s in upsets] + [catalog[favorite]]
