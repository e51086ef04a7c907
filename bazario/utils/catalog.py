import logging
from sqlalchemy.orm import joinedload
from bazario.models import Campaign

logger = logging.getLogger(__name__)


def load_active_campaigns():
    """Active campaigns, newest first, with their owner profile loaded."""
    return (
        Campaign.query
        .options(joinedload(Campaign.owner))
        .filter(Campaign.status == 'active')
        .order_by(Campaign.created_at.desc())
        .all()
    )


def matches_search(campaign, search_term):
    if not search_term:
        return True
    needle = search_term.lower()
    return needle in (campaign.title or '').lower() or needle in (campaign.description or '').lower()


def matches_region(campaign, region):
    if not region:
        return True
    return region in (campaign.target_regions or [])


def filter_campaigns(campaigns, search_term=None, region=None):
    return [
        c for c in campaigns
        if matches_search(c, search_term) and matches_region(c, region)
    ]


def collect_regions(campaigns):
    regions = set()
    for campaign in campaigns:
        regions.update(campaign.target_regions or [])
    return sorted(regions)
