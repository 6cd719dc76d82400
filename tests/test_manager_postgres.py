"""
DatabaseManager against a real PostgreSQL server.

Skipped unless TEST_DATABASE_URL points at a database the tests may create
tables in. Rows are keyed on a random user id and a far-future date and are
deleted afterwards.
"""

import asyncio
import os
import uuid
from datetime import date, datetime, timedelta, timezone

import pytest

from database.manager import DatabaseManager
from database.models import Submission
from utils.logic import SubmissionStatus, make_submission_id
from tests.fakes import make_problem, run

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")

pytestmark = pytest.mark.skipif(not TEST_DATABASE_URL, reason="TEST_DATABASE_URL not set")


def with_database(scenario):
    """Run `scenario(db, day, uid)` on a fresh pool, cleaning up its rows"""
    uid = f"test-{uuid.uuid4().hex[:12]}"
    day = date(2100, 1, 1) + timedelta(days=uuid.uuid4().int % 30000)

    async def main():
        db = DatabaseManager(TEST_DATABASE_URL)
        await db.connect()
        try:
            await db.initialize_tables()
            await db.put_daily_problem(make_problem(day))
            await db.upsert_user_profile(uid, display_name="Pat")
            return await scenario(db, day, uid)
        finally:
            async with db.pool.acquire() as conn:
                await conn.execute("DELETE FROM daily_submissions WHERE user_id = $1", uid)
                await conn.execute("DELETE FROM users WHERE uid = $1", uid)
                await conn.execute("DELETE FROM daily_problems WHERE challenge_date = $1", day)
            await db.close()

    return run(main())


def submission(uid, day, code="print(1)"):
    return Submission(
        submission_id=make_submission_id(uid, day),
        user_id=uid,
        challenge_date=day,
        challenge_id="Leet-1",
        code=code,
        language="python",
        status=SubmissionStatus.REVIEW,
        submitted_at=datetime.now(timezone.utc),
        challenge_points=10,
    )


def test_second_submission_for_the_day_is_refused():
    async def scenario(db, day, uid):
        first = await db.create_submission(submission(uid, day))
        second = await db.create_submission(submission(uid, day, code="print(2)"))
        stored = await db.get_submission(first.submission_id)
        return first, second, stored

    first, second, stored = with_database(scenario)
    assert first.status is SubmissionStatus.REVIEW
    assert second is None
    assert stored.code == "print(1)"


def test_problem_cache_is_write_once():
    async def scenario(db, day, uid):
        return await db.put_daily_problem(make_problem(day, "Leet-99"))

    assert with_database(scenario).id == "Leet-1"


def test_review_transition_updates_ledger():
    async def scenario(db, day, uid):
        created = await db.create_submission(submission(uid, day))
        approved = await db.apply_review_transition(
            created.submission_id, SubmissionStatus.REVIEW, SubmissionStatus.APPROVED,
            "reviewer", datetime.now(timezone.utc), None, 10, 1
        )
        return approved, await db.get_user_profile(uid)

    approved, profile = with_database(scenario)
    assert approved.status is SubmissionStatus.APPROVED
    assert approved.points_awarded == 10
    assert (profile.points, profile.daily_challenge_streak) == (10, 1)


def test_review_transition_with_stale_status_writes_nothing():
    async def scenario(db, day, uid):
        created = await db.create_submission(submission(uid, day))
        stale = await db.apply_review_transition(
            created.submission_id, SubmissionStatus.APPROVED, SubmissionStatus.REJECTED,
            "reviewer", datetime.now(timezone.utc), "nope", -10, -1
        )
        return stale, await db.get_submission(created.submission_id), await db.get_user_profile(uid)

    stale, stored, profile = with_database(scenario)
    assert stale is None
    assert stored.status is SubmissionStatus.REVIEW
    assert profile.points == 0


def test_concurrent_approvals_award_once():
    async def scenario(db, day, uid):
        created = await db.create_submission(submission(uid, day))

        def approve():
            return db.apply_review_transition(
                created.submission_id, SubmissionStatus.REVIEW, SubmissionStatus.APPROVED,
                "reviewer", datetime.now(timezone.utc), None, 10, 1
            )

        results = await asyncio.gather(approve(), approve())
        return results, await db.get_user_profile(uid)

    results, profile = with_database(scenario)
    assert sum(r is not None for r in results) == 1
    assert profile.points == 10
