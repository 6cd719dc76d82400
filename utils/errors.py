"""
Error taxonomy for the daily challenge core.

Every error carries a machine readable ``code`` and a message that is safe
to show to the user. Storage and network failures are translated into this
taxonomy at the component boundary (DatabaseManager, problem sources), so
cogs only ever need to catch ``ChallengeError``.
"""

from typing import Optional


class ChallengeError(Exception):
    code = "ERROR"
    default_message = "Something went wrong."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class SourceUnavailable(ChallengeError):
    code = "SOURCE_UNAVAILABLE"
    default_message = "The problem source is unavailable right now."


class AlreadySubmitted(ChallengeError):
    code = "ALREADY_SUBMITTED"
    default_message = "You have already submitted a solution for this day."


class AlreadyApplied(ChallengeError):
    code = "ALREADY_APPLIED"
    default_message = "You have already applied to this campaign."


class PermissionDenied(ChallengeError):
    code = "FORBIDDEN"
    default_message = "You are not allowed to do that."


class NotesRequired(ChallengeError):
    code = "NOTES_REQUIRED"
    default_message = "A rejection needs a note explaining why."


class NotFound(ChallengeError):
    code = "NOT_FOUND"
    default_message = "Not found."


class ConcurrentModification(ChallengeError):
    code = "CONFLICT"
    default_message = "Someone else already reviewed this."


class InvalidSubmission(ChallengeError):
    code = "INVALID_SUBMISSION"
    default_message = "This submission is not valid."


class StorageError(ChallengeError):
    code = "STORAGE_ERROR"
    default_message = "The database is unavailable right now."
