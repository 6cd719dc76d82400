from datetime import date

import pytest

from tests.fakes import FakeDatabase, make_problem, run

DAY = date(2024, 1, 15)


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def day():
    return DAY


@pytest.fixture
def seeded_db(db, day):
    """Database with today's problem cached and one reviewer"""
    db.problems[day] = make_problem(day)
    run(db.upsert_user_profile("reviewer", display_name="Rita", is_admin=True))
    return db
