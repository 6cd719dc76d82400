"""
Core Business Logic for the Daily Challenge Bot
Handles difficulty tiers, scoring, review transitions and identifiers.
Everything here is pure: no I/O, no database, no clock unless passed in.
"""
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Tuple

import config
from utils.errors import InvalidSubmission


# ==========================
# Enums & Constants
# ==========================

class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SubmissionStatus(Enum):
    REVIEW = "review"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApplicationStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CampaignStatus(Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    PAST = "past"


DIFFICULTY_POINTS = {
    Difficulty.EASY: 10,
    Difficulty.MEDIUM: 25,
    Difficulty.HARD: 50,
}

# Codeforces rating tiers: below EASY_MAX is easy, below MEDIUM_MAX is medium
RATING_EASY_MAX = 1200
RATING_MEDIUM_MAX = 1800


# ==========================
# Difficulty & Points
# ==========================

def difficulty_from_rating(rating: Optional[int]) -> Difficulty:
    if not isinstance(rating, int) or isinstance(rating, bool):
        return Difficulty.MEDIUM
    if rating < RATING_EASY_MAX:
        return Difficulty.EASY
    if rating < RATING_MEDIUM_MAX:
        return Difficulty.MEDIUM
    return Difficulty.HARD


def difficulty_from_label(label: Optional[str]) -> Difficulty:
    """Map a label like 'Easy' / 'MEDIUM' to a tier; unknown labels are medium."""
    try:
        return Difficulty(label.strip().lower() if isinstance(label, str) else "")
    except ValueError:
        return Difficulty.MEDIUM


def points_for_difficulty(difficulty: Difficulty) -> int:
    return DIFFICULTY_POINTS[difficulty]


# ==========================
# Dates & Identifiers
# ==========================

def today_utc(now: Optional[datetime] = None) -> date:
    """The challenge day. Always UTC so every caller agrees on 'today'."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_challenge_date(value) -> date:
    """Accepts a date, datetime or 'YYYY-MM-DD' string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as e:
        raise InvalidSubmission(f"`{value}` is not a date (expected YYYY-MM-DD).") from e


def make_submission_id(user_id: str, challenge_date: date) -> str:
    return f"{challenge_date.isoformat()}_{user_id}"


def make_application_id(user_id: str, campaign_id: str) -> str:
    return f"{campaign_id}_{user_id}"


# ==========================
# Submission Validation
# ==========================

def normalize_language(language: str) -> Optional[str]:
    """Returns the canonical language key, or None if unsupported."""
    aliases = {"py": "python", "js": "javascript", "ts": "typescript", "c++": "cpp", "c#": "csharp", "golang": "go"}
    key = (language or "").strip().lower()
    key = aliases.get(key, key)
    return key if key in config.SUPPORTED_LANGUAGES else None


# ==========================
# Review Transitions
# ==========================

def award_for_status(status: SubmissionStatus, challenge_points: int) -> Tuple[int, int]:
    """(points, streak) a submission contributes to its author while in `status`."""
    if status is SubmissionStatus.APPROVED:
        return challenge_points, 1
    return 0, 0


def transition_deltas(
    prior: SubmissionStatus,
    new: SubmissionStatus,
    challenge_points: int
) -> Tuple[int, int]:
    """
    Ledger change for moving a submission from `prior` to `new`.

    Defined as award(new) - award(prior), so any sequence of transitions
    nets out to the award of the final status.
    """
    new_points, new_streak = award_for_status(new, challenge_points)
    old_points, old_streak = award_for_status(prior, challenge_points)
    return new_points - old_points, new_streak - old_streak


def format_streak_message(streak: int) -> str:
    return f"🔥 {streak} Day{'s' if streak != 1 else ''}"
