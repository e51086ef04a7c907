import logging
from flask import Blueprint, request, jsonify
from sqlalchemy.orm import joinedload
from sqlalchemy.exc import SQLAlchemyError
from bazario import db
from bazario.models import Campaign, SellerApplication
from bazario.schemas import (
    application_create_schema, application_schema,
    review_applications_schema, seller_applications_schema, campaign_stats_schema
)
from bazario.utils.auth import current_identity, seller_required, startup_required
from bazario.utils.campaign_stats import CampaignStatsCalculator
from bazario.utils.matching import MatchingError, submit_application, review_application

applications_bp = Blueprint('applications', __name__)
logger = logging.getLogger(__name__)


# -------------------- SUBMISSION -------------------- #

@applications_bp.route('', methods=['POST'])
@seller_required
def apply_with_message():
    data = application_create_schema.load(request.get_json(silent=True) or {})
    campaign = db.session.get(Campaign, data['campaign_id'])

    try:
        application = submit_application(
            campaign,
            current_identity(),
            message=data['application_message'],
            check_existing=True
        )
    except MatchingError as e:
        return jsonify(e.to_dict()), e.status_code
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error submitting application to %s", data['campaign_id'])
        return jsonify({'message': 'Failed to submit application. Please try again.', 'error': str(e)}), 500

    return jsonify({
        'message': 'Your application has been submitted successfully.',
        'application': application_schema.dump(application),
        'redirect': '/dashboard'
    }), 201


@applications_bp.route('/mine', methods=['GET'])
@seller_required
def my_applications():
    applications = (
        SellerApplication.query
        .options(joinedload(SellerApplication.campaign))
        .filter_by(seller_id=current_identity().id)
        .order_by(SellerApplication.applied_at.desc())
        .all()
    )
    return jsonify({'applications': seller_applications_schema.dump(applications)}), 200


# -------------------- REVIEW -------------------- #

@applications_bp.route('/review', methods=['GET'])
@startup_required
def review_queue():
    try:
        applications = (
            SellerApplication.query
            .join(Campaign, SellerApplication.campaign_id == Campaign.id)
            .options(joinedload(SellerApplication.campaign), joinedload(SellerApplication.seller))
            .filter(Campaign.user_id == current_identity().id)
            .order_by(SellerApplication.applied_at.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching applications for review")
        return jsonify({'message': 'Failed to load applications. Please try again.'}), 500

    pending = [a for a in applications if a.is_pending]
    reviewed = [a for a in applications if not a.is_pending]
    return jsonify({
        'applications': review_applications_schema.dump(applications),
        'pending': review_applications_schema.dump(pending),
        'reviewed': review_applications_schema.dump(reviewed)
    }), 200


@applications_bp.route('/stats', methods=['GET'])
@startup_required
def campaign_stats():
    try:
        stats = CampaignStatsCalculator.owner_campaign_stats(current_identity().id)
    except SQLAlchemyError:
        logger.exception("Error fetching campaign stats")
        return jsonify({'message': 'Failed to load campaign stats.'}), 500
    return jsonify({'campaigns': campaign_stats_schema.dump(stats)}), 200


@applications_bp.route('/<application_id>/<action>', methods=['POST'])
@startup_required
def review(application_id, action):
    if action not in ('approve', 'reject'):
        return jsonify({'message': f'Unknown action: {action}'}), 404

    application = db.session.get(SellerApplication, application_id)
    if not application:
        return jsonify({'message': 'Application not found'}), 404

    try:
        application = review_application(application, current_identity(), action)
    except MatchingError as e:
        return jsonify(e.to_dict()), e.status_code
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error reviewing application %s", application_id)
        return jsonify({'message': f'Failed to {action} application. Please try again.', 'error': str(e)}), 500

    return jsonify({
        'message': f'The seller application has been {application.status}.',
        'application': application_schema.dump(application),
        'campaign_stats': CampaignStatsCalculator.campaign_summary(application.campaign)
    }), 200
