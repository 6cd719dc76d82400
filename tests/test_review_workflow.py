import asyncio

import pytest

from utils.errors import (
    ConcurrentModification,
    InvalidSubmission,
    NotesRequired,
    NotFound,
    PermissionDenied,
)
from utils.logic import Difficulty, SubmissionStatus
from utils.review import review_submission
from utils.submissions import submit_daily_solution
from tests.fakes import make_problem, run


@pytest.fixture
def submission(seeded_db, day):
    return run(submit_daily_solution(seeded_db, "alice", day, "print(1)", "python", today=day))


def ledger(db, uid="alice"):
    user = db.users[uid]
    return user.points, user.daily_challenge_streak


def test_approve_reject_reopen_cycle(seeded_db, day):
    seeded_db.problems[day] = make_problem(day, "Leet-7", Difficulty.MEDIUM)
    submitted = run(submit_daily_solution(seeded_db, "alice", day, "print(1)", "python", today=day))
    sid = submitted.submission_id

    approved = run(review_submission(seeded_db, sid, "reviewer", "approved"))
    assert approved.status is SubmissionStatus.APPROVED
    assert approved.reviewed_by == "reviewer"
    assert approved.reviewed_at is not None
    assert approved.points_awarded == 25
    assert ledger(seeded_db) == (25, 1)

    rejected = run(review_submission(seeded_db, sid, "reviewer", "rejected", "Wrong output for n=0"))
    assert rejected.status is SubmissionStatus.REJECTED
    assert rejected.admin_notes == "Wrong output for n=0"
    assert rejected.points_awarded == 0
    assert ledger(seeded_db) == (0, 0)

    reopened = run(review_submission(seeded_db, sid, "reviewer", "review"))
    assert reopened.status is SubmissionStatus.REVIEW
    assert reopened.admin_notes is None
    assert ledger(seeded_db) == (0, 0)


def test_reject_requires_notes(seeded_db, submission):
    for notes in (None, "", "   "):
        with pytest.raises(NotesRequired) as excinfo:
            run(review_submission(seeded_db, submission.submission_id, "reviewer", "rejected", notes))
        assert excinfo.value.code == "NOTES_REQUIRED"
    assert seeded_db.submissions[submission.submission_id].status is SubmissionStatus.REVIEW


def test_non_reviewer_is_forbidden(seeded_db, submission):
    run(seeded_db.upsert_user_profile("mallory"))
    with pytest.raises(PermissionDenied):
        run(review_submission(seeded_db, submission.submission_id, "mallory", "approved"))
    with pytest.raises(PermissionDenied):
        run(review_submission(seeded_db, submission.submission_id, "ghost", "approved"))
    assert ledger(seeded_db) == (0, 0)


def test_reviewer_cannot_review_own_submission(seeded_db, day):
    own = run(submit_daily_solution(seeded_db, "reviewer", day, "x", "python", today=day))
    with pytest.raises(PermissionDenied):
        run(review_submission(seeded_db, own.submission_id, "reviewer", "approved"))


def test_unknown_submission(seeded_db):
    with pytest.raises(NotFound):
        run(review_submission(seeded_db, "2024-01-15_nobody", "reviewer", "approved"))


def test_unknown_decision(seeded_db, submission):
    with pytest.raises(InvalidSubmission):
        run(review_submission(seeded_db, submission.submission_id, "reviewer", "maybe"))


def test_reapproving_is_a_no_op(seeded_db, submission):
    sid = submission.submission_id
    run(review_submission(seeded_db, sid, "reviewer", "approved"))
    again = run(review_submission(seeded_db, sid, "reviewer", "approved"))

    assert again.status is SubmissionStatus.APPROVED
    assert ledger(seeded_db) == (10, 1)


def test_direct_switch_between_outcomes(seeded_db, submission):
    sid = submission.submission_id
    run(review_submission(seeded_db, sid, "reviewer", "rejected", "nope"))
    assert ledger(seeded_db) == (0, 0)
    run(review_submission(seeded_db, sid, "reviewer", "approved"))
    assert ledger(seeded_db) == (10, 1)
    run(review_submission(seeded_db, sid, "reviewer", "rejected", "nope again"))
    assert ledger(seeded_db) == (0, 0)


def test_ledger_matches_approved_submissions(seeded_db, day):
    run(seeded_db.upsert_user_profile("second", is_admin=True))
    ids = []
    for user in ("alice", "bob", "carol"):
        ids.append(run(submit_daily_solution(seeded_db, user, day, "x", "python", today=day)).submission_id)

    steps = [
        (ids[0], "approved", None),
        (ids[1], "approved", None),
        (ids[1], "rejected", "bad"),
        (ids[2], "approved", None),
        (ids[2], "review", None),
        (ids[0], "rejected", "bad"),
        (ids[0], "approved", None),
    ]
    for n, (sid, decision, notes) in enumerate(steps):
        reviewer = "reviewer" if n % 2 else "second"
        run(review_submission(seeded_db, sid, reviewer, decision, notes))

    for user in ("alice", "bob", "carol"):
        approved = [
            s for s in seeded_db.submissions.values()
            if s.user_id == user and s.status is SubmissionStatus.APPROVED
        ]
        assert ledger(seeded_db, user) == (sum(s.challenge_points for s in approved), len(approved))
        assert sum(s.points_awarded for s in seeded_db.submissions.values() if s.user_id == user) == ledger(seeded_db, user)[0]


def test_concurrent_identical_approvals_award_once(seeded_db, submission):
    async def race():
        return await asyncio.gather(*[
            review_submission(seeded_db, submission.submission_id, "reviewer", "approved")
            for _ in range(5)
        ])

    results = run(race())

    assert all(r.status is SubmissionStatus.APPROVED for r in results)
    assert ledger(seeded_db) == (10, 1)


def test_concurrent_conflicting_decisions(seeded_db, submission):
    async def race():
        return await asyncio.gather(
            review_submission(seeded_db, submission.submission_id, "reviewer", "approved"),
            review_submission(seeded_db, submission.submission_id, "reviewer", "rejected", "nope"),
            return_exceptions=True
        )

    first, second = run(race())

    assert first.status is SubmissionStatus.APPROVED
    assert isinstance(second, ConcurrentModification)
    assert second.code == "CONFLICT"
    assert ledger(seeded_db) == (10, 1)
