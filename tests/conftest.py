"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from continental.db.models import Base
from continental.records import Competition, ContinentalMatch, ContinentalSeason


@pytest.fixture(scope="session")
def test_engine():
    """
    Create a test database engine.

    Uses SQLite in-memory; the snapshot tables use no
    dialect-specific features.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
    )
    return engine


@pytest.fixture(scope="session")
def tables(test_engine):
    """
    Create all tables for testing.

    This fixture runs once per test session.
    """
    Base.metadata.create_all(test_engine)
    yield
    Base.metadata.drop_all(test_engine)


@pytest.fixture
def db_session(test_engine, tables):
    """
    Create a database session for a test.

    Each test gets its own session with automatic rollback,
    ensuring tests don't affect each other.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    Session = sessionmaker(bind=connection)
    session = Session()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def competitions():
    """One premier and one challenger competition."""
    return [
        Competition(id="vcc", name="Vastland Champions Cup", short_name="VCC"),
        Competition(id="ccc", name="Vastland Challenge Cup", short_name="CCC"),
    ]


def make_match(season_id="s1", round="Final", home=("Club A", "Avalon"),
               away=("Club B", "Borland"), leg1=None, leg2=None, single=False):
    """Build a tie: home/away are (club, nation), legs are (home, away) scores."""
    home_leg1, away_leg1 = leg1 if leg1 else (None, None)
    home_leg2, away_leg2 = leg2 if leg2 else (None, None)
    return ContinentalMatch(
        season_id=season_id,
        round=round,
        home_club_name=home[0],
        home_club_nation=home[1],
        away_club_name=away[0],
        away_club_nation=away[1],
        home_score_leg1=home_leg1,
        away_score_leg1=away_leg1,
        home_score_leg2=home_leg2,
        away_score_leg2=away_leg2,
        is_single_leg=single,
    )


def make_season(season_id, year, competition_id="vcc", champion_nation=None):
    return ContinentalSeason(
        id=season_id,
        competition_id=competition_id,
        year=year,
        champion_nation=champion_nation,
    )
