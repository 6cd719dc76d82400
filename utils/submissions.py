"""
Submission Store & Profile Ledger access
Accepts one solution per user per day and keeps user profiles around.

Uniqueness is enforced by the insert itself (the submission id is derived
from user and date), never by checking for an existing row first.
"""

import logging
from datetime import date
from typing import Optional, List

import config
from database.models import Submission, UserProfile
from utils.errors import AlreadySubmitted, InvalidSubmission, NotFound
from utils.logic import (
    SubmissionStatus,
    make_submission_id,
    normalize_language,
    parse_challenge_date,
    today_utc,
    utc_now,
)

logger = logging.getLogger(__name__)


# ==========================
# Profiles
# ==========================

async def ensure_user_profile(
    db,
    uid: str,
    email: Optional[str] = None,
    display_name: Optional[str] = None
) -> UserProfile:
    """Create the profile on first use (zero points and streak), refresh names otherwise"""
    return await db.upsert_user_profile(
        uid,
        email=email,
        display_name=display_name,
        is_admin=uid in config.ADMIN_USER_IDS
    )


async def get_user_profile(db, uid: str) -> Optional[UserProfile]:
    return await db.get_user_profile(uid)


async def get_leaderboard(db, limit: Optional[int] = None) -> List[UserProfile]:
    return await db.get_leaderboard(limit or config.LEADERBOARD_SIZE)


# ==========================
# Submissions
# ==========================

async def submit_daily_solution(
    db,
    user_id: str,
    challenge_date,
    code: str,
    language: str,
    user_name: Optional[str] = None,
    user_email: Optional[str] = None,
    today: Optional[date] = None
) -> Submission:
    """
    Record a user's solution for `challenge_date`.

    Raises:
        InvalidSubmission: empty/oversized code, unsupported language, or a day other than today
        NotFound: no problem is cached for that day
        AlreadySubmitted: the user already has a submission for that day
    """
    challenge_date = parse_challenge_date(challenge_date)
    if challenge_date != (today or today_utc()):
        raise InvalidSubmission("Submissions are only open for today's challenge.")

    if not code or not code.strip():
        raise InvalidSubmission("Your solution is empty.")
    if len(code) > config.MAX_CODE_LENGTH:
        raise InvalidSubmission(f"Your solution is longer than {config.MAX_CODE_LENGTH} characters.")

    canonical_language = normalize_language(language)
    if canonical_language is None:
        raise InvalidSubmission(
            f"Unsupported language `{language}`. Use one of: {', '.join(config.SUPPORTED_LANGUAGES)}"
        )

    problem = await db.get_daily_problem(challenge_date)
    if problem is None:
        raise NotFound(f"There is no challenge for {challenge_date.isoformat()}.")

    await ensure_user_profile(db, user_id, email=user_email, display_name=user_name)

    stored = await db.create_submission(Submission(
        submission_id=make_submission_id(user_id, challenge_date),
        user_id=user_id,
        challenge_date=challenge_date,
        challenge_id=problem.id,
        code=code,
        language=canonical_language,
        status=SubmissionStatus.REVIEW,
        submitted_at=utc_now(),
        challenge_points=problem.points,
        user_name=user_name,
        user_email=user_email,
    ))
    if stored is None:
        raise AlreadySubmitted()

    logger.info(f"Submission {stored.submission_id} recorded ({canonical_language}, {problem.id})")
    return stored


async def get_submission(db, user_id: str, challenge_date) -> Optional[Submission]:
    return await db.get_submission(make_submission_id(user_id, parse_challenge_date(challenge_date)))


async def list_submissions_for_date(
    db,
    challenge_date,
    status: Optional[SubmissionStatus] = None
) -> List[Submission]:
    """Submissions for a day in the order they were made"""
    return await db.list_submissions(parse_challenge_date(challenge_date), status)


async def list_user_submissions(db, user_id: str, limit: Optional[int] = None) -> List[Submission]:
    return await db.list_user_submissions(user_id, limit or config.RECENT_SUBMISSIONS_LIMIT)
