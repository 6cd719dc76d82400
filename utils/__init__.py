# Utility functions and helpers
# Services (daily_challenge, submissions, review, campaigns) and the problem
# sources import database.models, so they are imported from their modules
# directly rather than re-exported here.
from .errors import (
    ChallengeError,
    SourceUnavailable,
    AlreadySubmitted,
    AlreadyApplied,
    PermissionDenied,
    NotesRequired,
    NotFound,
    ConcurrentModification,
    InvalidSubmission,
    StorageError,
)

from .logic import (
    Difficulty,
    SubmissionStatus,
    ApplicationStatus,
    CampaignStatus,
    DIFFICULTY_POINTS,
    difficulty_from_rating,
    difficulty_from_label,
    points_for_difficulty,
    today_utc,
    make_submission_id,
    transition_deltas,
)

__all__ = [
    'ChallengeError',
    'SourceUnavailable',
    'AlreadySubmitted',
    'AlreadyApplied',
    'PermissionDenied',
    'NotesRequired',
    'NotFound',
    'ConcurrentModification',
    'InvalidSubmission',
    'StorageError',
    'Difficulty',
    'SubmissionStatus',
    'ApplicationStatus',
    'CampaignStatus',
    'DIFFICULTY_POINTS',
    'difficulty_from_rating',
    'difficulty_from_label',
    'points_for_difficulty',
    'today_utc',
    'make_submission_id',
    'transition_deltas',
]
