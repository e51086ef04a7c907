import logging
from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError
from bazario.schemas import profile_schema
from bazario.utils.auth import login_required, current_identity
from bazario.utils.campaign_stats import CampaignStatsCalculator

dashboard_bp = Blueprint('dashboard', __name__)
logger = logging.getLogger(__name__)

QUICK_ACTIONS = {
    'startup': [
        {'label': 'Create Campaign', 'path': '/list-product'},
        {'label': 'Manage Sellers', 'path': '/match-onboard'},
        {'label': 'Browse Catalog', 'path': '/bazar'},
    ],
    'seller': [
        {'label': 'Browse Products', 'path': '/find-sellers'},
        {'label': 'View Catalog', 'path': '/bazar'},
    ],
}


@dashboard_bp.route('', methods=['GET'])
@login_required
def get_dashboard():
    """Profile summary plus role-conditioned figures for the signed-in user."""
    profile = current_identity()

    try:
        if profile.is_startup:
            stats = CampaignStatsCalculator.startup_dashboard(profile.id)
        else:
            stats = CampaignStatsCalculator.seller_dashboard(profile.id)
        activity = CampaignStatsCalculator.recent_activity(profile)
    except SQLAlchemyError as e:
        logger.exception("Error building dashboard for %s", profile.id)
        return jsonify({
            'message': 'Error fetching dashboard data',
            'error': str(e),
            'profile': profile_schema.dump(profile)
        }), 500

    return jsonify({
        'profile': profile_schema.dump(profile),
        'is_startup': profile.is_startup,
        'welcome': f"Welcome back, {profile.full_name or 'User'}!",
        'stats': stats,
        'recent_activity': activity,
        'quick_actions': QUICK_ACTIONS.get(profile.user_type, [])
    }), 200
