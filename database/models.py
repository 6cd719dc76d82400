"""
Row models for the daily challenge tables.
Each model knows how to build itself from an asyncpg Record (or any mapping).
"""

import json
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from typing import Optional, List

from utils.logic import (
    Difficulty,
    SubmissionStatus,
    ApplicationStatus,
    CampaignStatus,
)


@dataclass
class ChallengeExample:
    input: str
    output: str
    explanation: Optional[str] = None


@dataclass
class DailyProblem:
    id: str
    title: str
    description: str
    difficulty: Difficulty
    points: int
    date: date
    examples: List[ChallengeExample] = field(default_factory=list)
    source: str = ""
    url: Optional[str] = None

    @classmethod
    def from_record(cls, row) -> "DailyProblem":
        raw_examples = row["examples"]
        if isinstance(raw_examples, str):
            raw_examples = json.loads(raw_examples)
        return cls(
            id=row["problem_id"],
            title=row["title"],
            description=row["description"],
            difficulty=Difficulty(row["difficulty"]),
            points=row["points"],
            date=row["challenge_date"],
            examples=[ChallengeExample(**e) for e in (raw_examples or [])],
            source=row["source"],
            url=row["url"],
        )

    def examples_json(self) -> str:
        return json.dumps([asdict(e) for e in self.examples])


@dataclass
class Submission:
    submission_id: str
    user_id: str
    challenge_date: date
    challenge_id: str
    code: str
    language: str
    status: SubmissionStatus
    submitted_at: datetime
    challenge_points: int
    points_awarded: int = 0
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    admin_notes: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None

    @classmethod
    def from_record(cls, row) -> "Submission":
        return cls(
            submission_id=row["submission_id"],
            user_id=row["user_id"],
            challenge_date=row["challenge_date"],
            challenge_id=row["challenge_id"],
            code=row["code"],
            language=row["language"],
            status=SubmissionStatus(row["status"]),
            submitted_at=row["submitted_at"],
            challenge_points=row["challenge_points"],
            points_awarded=row["points_awarded"],
            reviewed_at=row["reviewed_at"],
            reviewed_by=row["reviewed_by"],
            admin_notes=row["admin_notes"],
            user_name=row["user_name"],
            user_email=row["user_email"],
        )


@dataclass
class UserProfile:
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    points: int = 0
    daily_challenge_streak: int = 0
    is_admin: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, row) -> "UserProfile":
        return cls(
            uid=row["uid"],
            email=row["email"],
            display_name=row["display_name"],
            points=row["points"],
            daily_challenge_streak=row["daily_challenge_streak"],
            is_admin=row["is_admin"],
            created_at=row["created_at"],
        )


@dataclass
class Campaign:
    id: str
    name: str
    description: str
    status: CampaignStatus
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, row) -> "Campaign":
        return cls(
            id=row["campaign_id"],
            name=row["name"],
            description=row["description"],
            status=CampaignStatus(row["status"]),
            created_at=row["created_at"],
        )


@dataclass
class CampaignApplication:
    application_id: str
    user_id: str
    campaign_id: str
    status: ApplicationStatus
    applied_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    campaign_name: Optional[str] = None

    @classmethod
    def from_record(cls, row) -> "CampaignApplication":
        return cls(
            application_id=row["application_id"],
            user_id=row["user_id"],
            campaign_id=row["campaign_id"],
            status=ApplicationStatus(row["status"]),
            applied_at=row["applied_at"],
            reviewed_at=row["reviewed_at"],
            reviewed_by=row["reviewed_by"],
            user_name=row["user_name"],
            user_email=row["user_email"],
            campaign_name=row["campaign_name"],
        )
