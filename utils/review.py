"""
Review Workflow
---------------
State machine for daily submissions:

    review --approve--> approved
    review --reject---> rejected        (notes required)
    approved/rejected --revert--> review

Direct approved <-> rejected switches are also accepted. Whatever the
path, the author's ledger changes by award(new) - award(prior), where only
`approved` carries an award (the challenge's points and one streak day),
so points and streak always equal the sum over currently approved
submissions.

The status change and the ledger change are written together by
DatabaseManager.apply_review_transition, conditional on the status read
here. Reviewer identity is always passed in explicitly.
"""

import logging
from typing import Optional, Union

from database.models import Submission, UserProfile
from utils.errors import (
    ConcurrentModification,
    InvalidSubmission,
    NotesRequired,
    NotFound,
    PermissionDenied,
)
from utils.logic import SubmissionStatus, transition_deltas, utc_now

logger = logging.getLogger(__name__)


def parse_decision(decision: Union[str, SubmissionStatus]) -> SubmissionStatus:
    if isinstance(decision, SubmissionStatus):
        return decision
    try:
        return SubmissionStatus(str(decision).strip().lower())
    except ValueError as e:
        raise InvalidSubmission(f"Unknown review decision `{decision}`.") from e


async def require_reviewer(db, reviewer_id: str) -> UserProfile:
    """The reviewer's profile, if it carries the admin capability"""
    profile = await db.get_user_profile(reviewer_id)
    if profile is None or not profile.is_admin:
        raise PermissionDenied("Only reviewers can do that.")
    return profile


class ReviewWorkflow:

    def __init__(self, db, clock=utc_now):
        self.db = db
        self.clock = clock

    async def review_submission(
        self,
        submission_id: str,
        reviewer_id: str,
        decision: Union[str, SubmissionStatus],
        notes: Optional[str] = None
    ) -> Submission:
        """
        Move a submission to `decision` on behalf of `reviewer_id`.

        Re-issuing the decision a submission already has is a no-op and
        returns it unchanged.

        Raises:
            PermissionDenied: reviewer is not an admin, or reviews their own submission
            NotFound: no such submission
            NotesRequired: rejecting without notes
            ConcurrentModification: another reviewer moved it first
        """
        new_status = parse_decision(decision)
        notes = (notes or "").strip() or None

        await require_reviewer(self.db, reviewer_id)

        submission = await self.db.get_submission(submission_id)
        if submission is None:
            raise NotFound(f"Submission `{submission_id}` not found.")
        if submission.user_id == reviewer_id:
            raise PermissionDenied("You cannot review your own submission.")
        if new_status is SubmissionStatus.REJECTED and not notes:
            raise NotesRequired()

        if submission.status is new_status:
            logger.info(f"Submission {submission_id} already {new_status.value}, nothing to do")
            return submission

        points_delta, streak_delta = transition_deltas(
            submission.status, new_status, submission.challenge_points
        )
        updated = await self.db.apply_review_transition(
            submission_id,
            expected_status=submission.status,
            new_status=new_status,
            reviewed_by=reviewer_id,
            reviewed_at=self.clock(),
            admin_notes=None if new_status is SubmissionStatus.REVIEW else notes,
            points_delta=points_delta,
            streak_delta=streak_delta,
        )
        if updated is not None:
            logger.info(
                f"Submission {submission_id}: {submission.status.value} -> {new_status.value} "
                f"by {reviewer_id} (points {points_delta:+d}, streak {streak_delta:+d})"
            )
            return updated

        # The status moved between our read and the guarded write
        current = await self.db.get_submission(submission_id)
        if current is None:
            raise NotFound(f"Submission `{submission_id}` not found.")
        if current.status is new_status:
            return current
        logger.warning(
            f"Submission {submission_id} moved to {current.status.value} while {reviewer_id} "
            f"was setting {new_status.value}"
        )
        raise ConcurrentModification(
            f"Someone else already marked this submission as {current.status.value}."
        )


async def review_submission(
    db,
    submission_id: str,
    reviewer_id: str,
    decision: Union[str, SubmissionStatus],
    notes: Optional[str] = None
) -> Submission:
    return await ReviewWorkflow(db).review_submission(submission_id, reviewer_id, decision, notes)
