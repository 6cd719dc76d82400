"""
Campaigns & Applications
One application per user per campaign, reviewed by admins with the same
guarded status write as daily submissions (no points involved).
"""

import logging
import uuid
from typing import Optional, List, Union

from database.models import Campaign, CampaignApplication
from utils.errors import (
    AlreadyApplied,
    ConcurrentModification,
    InvalidSubmission,
    NotFound,
    PermissionDenied,
)
from utils.logic import (
    ApplicationStatus,
    CampaignStatus,
    make_application_id,
    utc_now,
)
from utils.review import require_reviewer
from utils.submissions import ensure_user_profile

logger = logging.getLogger(__name__)


async def create_campaign(
    db,
    reviewer_id: str,
    name: str,
    description: str = "",
    status: CampaignStatus = CampaignStatus.UPCOMING
) -> Campaign:
    await require_reviewer(db, reviewer_id)
    if not name or not name.strip():
        raise InvalidSubmission("A campaign needs a name.")

    campaign = await db.create_campaign(Campaign(
        id=uuid.uuid4().hex[:8],
        name=name.strip(),
        description=(description or "").strip(),
        status=status,
        created_at=utc_now(),
    ))
    if campaign is None:
        raise ConcurrentModification("Could not allocate a campaign id, please retry.")
    logger.info(f"Campaign {campaign.id} '{campaign.name}' created by {reviewer_id}")
    return campaign


async def list_campaigns(db) -> List[Campaign]:
    return await db.list_campaigns()


async def apply_to_campaign(
    db,
    user_id: str,
    campaign_id: str,
    user_name: Optional[str] = None,
    user_email: Optional[str] = None
) -> CampaignApplication:
    campaign = await db.get_campaign(campaign_id)
    if campaign is None:
        raise NotFound(f"Campaign `{campaign_id}` not found.")
    if campaign.status is CampaignStatus.PAST:
        raise InvalidSubmission(f"**{campaign.name}** has already ended.")

    await ensure_user_profile(db, user_id, email=user_email, display_name=user_name)

    application = await db.create_campaign_application(CampaignApplication(
        application_id=make_application_id(user_id, campaign_id),
        user_id=user_id,
        campaign_id=campaign_id,
        status=ApplicationStatus.PENDING,
        applied_at=utc_now(),
        user_name=user_name,
        user_email=user_email,
        campaign_name=campaign.name,
    ))
    if application is None:
        raise AlreadyApplied()
    logger.info(f"Application {application.application_id} recorded")
    return application


async def list_user_applications(db, user_id: str) -> List[CampaignApplication]:
    return await db.list_user_applications(user_id)


async def list_campaign_applications(db, reviewer_id: str, campaign_id: str) -> List[CampaignApplication]:
    await require_reviewer(db, reviewer_id)
    return await db.list_campaign_applications(campaign_id)


async def review_application(
    db,
    application_id: str,
    reviewer_id: str,
    decision: Union[str, ApplicationStatus]
) -> CampaignApplication:
    try:
        new_status = decision if isinstance(decision, ApplicationStatus) else ApplicationStatus(str(decision).strip().lower())
    except ValueError as e:
        raise InvalidSubmission(f"Unknown application decision `{decision}`.") from e

    await require_reviewer(db, reviewer_id)

    application = await db.get_campaign_application(application_id)
    if application is None:
        raise NotFound(f"Application `{application_id}` not found.")
    if application.user_id == reviewer_id:
        raise PermissionDenied("You cannot review your own application.")
    if application.status is new_status:
        return application

    updated = await db.update_application_status(
        application_id, application.status, new_status, reviewer_id, utc_now()
    )
    if updated is not None:
        logger.info(f"Application {application_id}: {application.status.value} -> {new_status.value} by {reviewer_id}")
        return updated

    current = await db.get_campaign_application(application_id)
    if current is not None and current.status is new_status:
        return current
    raise ConcurrentModification("Someone else already reviewed this application.")
