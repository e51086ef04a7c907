"""Seller applications: submission and the review state machine.

An application starts ``pending`` and moves exactly once to ``approved`` or
``rejected``. Reviewed applications cannot be reopened.
"""
import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError

from bazario import db
from bazario.models import SellerApplication
from bazario.models.application import PENDING, APPROVED, REJECTED

logger = logging.getLogger(__name__)

REVIEW_ACTIONS = {
    'approve': APPROVED,
    'reject': REJECTED,
}


class MatchingError(Exception):
    status_code = 400
    code = 'matching_error'

    def __init__(self, message, detail=None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self):
        body = {'message': self.message, 'code': self.code}
        if self.detail:
            body['error'] = self.detail
        return body


class CampaignUnavailable(MatchingError):
    status_code = 404
    code = 'campaign_unavailable'


class AlreadyApplied(MatchingError):
    status_code = 409
    code = 'already_applied'


class NotCampaignOwner(MatchingError):
    status_code = 403
    code = 'not_campaign_owner'


class AlreadyReviewed(MatchingError):
    status_code = 409
    code = 'already_reviewed'


def find_existing_application(campaign_id, seller_id):
    return SellerApplication.query.filter_by(
        campaign_id=campaign_id,
        seller_id=seller_id
    ).first()


def submit_application(campaign, seller, message=None, check_existing=True):
    """Create a pending application for ``seller`` on ``campaign``.

    With ``check_existing`` the (campaign, seller) pair is looked up first and
    an existing row of any status raises AlreadyApplied. Without it the insert
    goes straight to the database and the unique constraint is the only guard.
    """
    if campaign is None or not campaign.is_active:
        raise CampaignUnavailable('Campaign not found or no longer active')

    if check_existing and find_existing_application(campaign.id, seller.id):
        raise AlreadyApplied('You have already applied to this campaign.')

    application = SellerApplication(
        campaign_id=campaign.id,
        seller_id=seller.id,
        application_message=message,
        status=PENDING
    )
    db.session.add(application)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.warning("Duplicate application for campaign=%s seller=%s", campaign.id, seller.id)
        raise AlreadyApplied('You have already applied to this campaign.', detail=str(e.orig)) from e

    logger.info("Application %s submitted: campaign=%s seller=%s", application.id, campaign.id, seller.id)
    return application


def review_application(application, reviewer, action):
    """Move a pending application to approved or rejected and stamp reviewed_at."""
    if action not in REVIEW_ACTIONS:
        raise MatchingError(f'Unknown review action: {action}')

    campaign = application.campaign
    if campaign is None or not campaign.is_owned_by(reviewer.id):
        raise NotCampaignOwner('Only the campaign owner can review this application')

    if application.is_reviewed:
        raise AlreadyReviewed('Application has already been reviewed')

    application.status = REVIEW_ACTIONS[action]
    application.reviewed_at = datetime.utcnow()
    db.session.commit()

    logger.info("Application %s %s by %s", application.id, application.status, reviewer.id)
    return application
