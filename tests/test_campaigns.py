import asyncio

import pytest

from utils.campaigns import (
    apply_to_campaign,
    create_campaign,
    list_campaign_applications,
    list_user_applications,
    review_application,
)
from utils.errors import AlreadyApplied, ConcurrentModification, InvalidSubmission, NotFound, PermissionDenied
from utils.logic import ApplicationStatus, CampaignStatus
from tests.fakes import make_campaign, run


@pytest.fixture
def campaign_db(seeded_db):
    seeded_db.campaigns["c1"] = make_campaign("c1")
    return seeded_db


def test_reviewer_creates_campaign(seeded_db):
    campaign = run(create_campaign(seeded_db, "reviewer", "  Summer of Code ", "Ship it"))

    assert campaign.name == "Summer of Code"
    assert campaign.status is CampaignStatus.UPCOMING
    assert seeded_db.campaigns[campaign.id].description == "Ship it"


def test_only_reviewers_create_campaigns(seeded_db):
    with pytest.raises(PermissionDenied):
        run(create_campaign(seeded_db, "alice", "Nope"))
    with pytest.raises(InvalidSubmission):
        run(create_campaign(seeded_db, "reviewer", "   "))


def test_apply_once(campaign_db):
    application = run(apply_to_campaign(campaign_db, "alice", "c1", user_name="Alice"))

    assert application.application_id == "c1_alice"
    assert application.status is ApplicationStatus.PENDING
    assert application.campaign_name == "Winter Sprint"
    assert "alice" in campaign_db.users

    with pytest.raises(AlreadyApplied) as excinfo:
        run(apply_to_campaign(campaign_db, "alice", "c1"))
    assert excinfo.value.code == "ALREADY_APPLIED"


def test_concurrent_applications_one_wins(campaign_db):
    async def race():
        return await asyncio.gather(*[
            apply_to_campaign(campaign_db, "alice", "c1") for _ in range(6)
        ], return_exceptions=True)

    results = run(race())

    assert sum(not isinstance(r, Exception) for r in results) == 1
    assert len(campaign_db.applications) == 1


def test_apply_to_missing_or_past_campaign(campaign_db):
    campaign_db.campaigns["old"] = make_campaign("old", CampaignStatus.PAST)
    with pytest.raises(NotFound):
        run(apply_to_campaign(campaign_db, "alice", "nope"))
    with pytest.raises(InvalidSubmission):
        run(apply_to_campaign(campaign_db, "alice", "old"))


def test_review_application(campaign_db):
    run(apply_to_campaign(campaign_db, "alice", "c1"))

    approved = run(review_application(campaign_db, "c1_alice", "reviewer", "approved"))
    assert approved.status is ApplicationStatus.APPROVED
    assert approved.reviewed_by == "reviewer"

    again = run(review_application(campaign_db, "c1_alice", "reviewer", ApplicationStatus.APPROVED))
    assert again.status is ApplicationStatus.APPROVED

    assert [a.status for a in run(list_user_applications(campaign_db, "alice"))] == [ApplicationStatus.APPROVED]


def test_review_application_permissions(campaign_db):
    run(apply_to_campaign(campaign_db, "alice", "c1"))
    run(apply_to_campaign(campaign_db, "reviewer", "c1"))

    with pytest.raises(PermissionDenied):
        run(review_application(campaign_db, "c1_alice", "alice", "approved"))
    with pytest.raises(PermissionDenied):
        run(review_application(campaign_db, "c1_reviewer", "reviewer", "approved"))
    with pytest.raises(PermissionDenied):
        run(list_campaign_applications(campaign_db, "alice", "c1"))
    with pytest.raises(NotFound):
        run(review_application(campaign_db, "c1_bob", "reviewer", "approved"))
    with pytest.raises(InvalidSubmission):
        run(review_application(campaign_db, "c1_alice", "reviewer", "perhaps"))

    assert len(run(list_campaign_applications(campaign_db, "reviewer", "c1"))) == 2


def test_conflicting_application_reviews(campaign_db):
    run(apply_to_campaign(campaign_db, "alice", "c1"))

    async def race():
        return await asyncio.gather(
            review_application(campaign_db, "c1_alice", "reviewer", "approved"),
            review_application(campaign_db, "c1_alice", "reviewer", "rejected"),
            return_exceptions=True
        )

    first, second = run(race())
    assert first.status is ApplicationStatus.APPROVED
    assert isinstance(second, ConcurrentModification)
