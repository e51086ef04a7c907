import logging
from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from bazario import db
from bazario.models import Campaign
from bazario.schemas import (
    campaign_schema, campaigns_schema, application_schema,
    INDIAN_STATES, AGE_GROUPS, INCOME_LEVELS
)
from bazario.utils.auth import current_identity, startup_required, seller_required
from bazario.utils.catalog import load_active_campaigns, filter_campaigns, collect_regions
from bazario.utils.matching import MatchingError, submit_application

campaigns_bp = Blueprint('campaigns', __name__)
logger = logging.getLogger(__name__)

EDITABLE_FIELDS = [
    'title', 'description', 'product_images', 'commission_rate', 'commission_type',
    'target_regions', 'target_demographics', 'sales_materials'
]


def get_owned_campaign(campaign_id):
    """Returns (campaign, error_response)."""
    campaign = db.session.get(Campaign, campaign_id)
    if not campaign:
        return None, (jsonify({'message': 'Campaign not found'}), 404)
    if not campaign.is_owned_by(current_identity().id):
        return None, (jsonify({'message': 'Only the campaign owner can change this campaign'}), 403)
    return campaign, None


# -------------------- CATALOG -------------------- #

@campaigns_bp.route('', methods=['GET'])
def list_campaigns():
    search_term = request.args.get('search') or ''
    region = (request.args.get('region') or '').strip()

    try:
        campaigns = load_active_campaigns()
    except SQLAlchemyError:
        logger.exception("Error fetching campaigns")
        return jsonify({'message': 'Failed to load campaigns. Please try again.', 'campaigns': []}), 500

    filtered = filter_campaigns(campaigns, search_term, region)
    return jsonify({
        'campaigns': campaigns_schema.dump(filtered),
        'regions': collect_regions(campaigns),
        'total': len(filtered)
    }), 200


@campaigns_bp.route('/regions', methods=['GET'])
def list_regions():
    try:
        campaigns = load_active_campaigns()
    except SQLAlchemyError:
        logger.exception("Error fetching campaign regions")
        return jsonify({'message': 'Failed to load regions. Please try again.'}), 500
    return jsonify({'regions': collect_regions(campaigns)}), 200


@campaigns_bp.route('/options', methods=['GET'])
def authoring_options():
    """Picklists offered by the campaign form"""
    return jsonify({
        'regions': INDIAN_STATES,
        'age_groups': AGE_GROUPS,
        'income_levels': INCOME_LEVELS,
        'commission_types': ['percentage', 'flat']
    }), 200


@campaigns_bp.route('/mine', methods=['GET'])
@startup_required
def my_campaigns():
    campaigns = Campaign.query.filter_by(
        user_id=current_identity().id
    ).order_by(Campaign.created_at.desc()).all()
    return jsonify({'campaigns': campaigns_schema.dump(campaigns)}), 200


@campaigns_bp.route('/<campaign_id>', methods=['GET'])
def get_campaign(campaign_id):
    campaign = db.session.get(Campaign, campaign_id)
    if not campaign:
        return jsonify({'message': 'Campaign not found'}), 404

    if not campaign.is_active:
        viewer = current_identity()
        if viewer is None or not campaign.is_owned_by(viewer.id):
            return jsonify({'message': 'Campaign not found'}), 404

    return jsonify(campaign_schema.dump(campaign)), 200


# -------------------- AUTHORING -------------------- #

@campaigns_bp.route('', methods=['POST'])
@startup_required
def create_campaign():
    data = campaign_schema.load(request.get_json(silent=True) or {})
    owner = current_identity()

    campaign = Campaign(
        user_id=owner.id,
        status='active',
        **data
    )

    try:
        db.session.add(campaign)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error creating campaign for %s", owner.id)
        return jsonify({'message': 'Failed to create campaign. Please try again.', 'error': str(e)}), 500

    logger.info("Campaign %s created by %s", campaign.id, owner.id)
    return jsonify({
        'message': 'Your product campaign has been listed successfully.',
        'campaign': campaign_schema.dump(campaign),
        'redirect': '/bazar'
    }), 201


@campaigns_bp.route('/<campaign_id>', methods=['PUT', 'PATCH'])
@startup_required
def update_campaign(campaign_id):
    campaign, error = get_owned_campaign(campaign_id)
    if error:
        return error

    data = campaign_schema.load(request.get_json(silent=True) or {}, partial=True)
    for field in EDITABLE_FIELDS:
        if field in data:
            setattr(campaign, field, data[field])

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error updating campaign %s", campaign_id)
        return jsonify({'message': 'Failed to update campaign. Please try again.', 'error': str(e)}), 500

    return jsonify({
        'message': 'Campaign updated successfully',
        'campaign': campaign_schema.dump(campaign)
    }), 200


@campaigns_bp.route('/<campaign_id>/toggle', methods=['POST'])
@startup_required
def toggle_campaign_status(campaign_id):
    campaign, error = get_owned_campaign(campaign_id)
    if error:
        return error

    campaign.status = 'inactive' if campaign.is_active else 'active'

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error toggling campaign %s", campaign_id)
        return jsonify({'message': 'Failed to update campaign status', 'error': str(e)}), 500

    return jsonify({
        'message': f"Campaign status toggled to {campaign.status}",
        'id': campaign.id,
        'status': campaign.status
    }), 200


# -------------------- ONE-CLICK APPLY -------------------- #

@campaigns_bp.route('/<campaign_id>/apply', methods=['POST'])
@seller_required
def quick_apply(campaign_id):
    campaign = db.session.get(Campaign, campaign_id)

    try:
        application = submit_application(campaign, current_identity(), check_existing=False)
    except MatchingError as e:
        return jsonify(e.to_dict()), e.status_code
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error applying to campaign %s", campaign_id)
        return jsonify({'message': 'Failed to submit application. Please try again.', 'error': str(e)}), 500

    return jsonify({
        'message': 'Application submitted successfully.',
        'application': application_schema.dump(application),
        'redirect': '/dashboard'
    }), 201
