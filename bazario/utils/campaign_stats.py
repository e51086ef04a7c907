from sqlalchemy import func
from sqlalchemy.orm import joinedload, selectinload
from bazario import db
from bazario.models import Campaign, SellerApplication


class CampaignStatsCalculator:
    """Aggregate application counts and dashboard figures"""

    @staticmethod
    def campaign_summary(campaign):
        """Counts for a single campaign from its loaded applications"""
        statuses = [a.status for a in campaign.applications]
        return {
            'id': campaign.id,
            'title': campaign.title,
            'commission_rate': float(campaign.commission_rate) if campaign.commission_rate is not None else 0,
            'status': campaign.status,
            'applications_count': len(statuses),
            'approved_count': statuses.count('approved'),
            'pending_count': statuses.count('pending'),
        }

    @staticmethod
    def owner_campaign_stats(owner_id):
        """Per-campaign counts for every campaign owned by ``owner_id``"""
        campaigns = (
            Campaign.query
            .options(selectinload(Campaign.applications))
            .filter_by(user_id=owner_id)
            .order_by(Campaign.created_at.desc())
            .all()
        )
        return [CampaignStatsCalculator.campaign_summary(c) for c in campaigns]

    @staticmethod
    def startup_dashboard(owner_id):
        campaigns = Campaign.query.filter_by(user_id=owner_id).all()
        campaign_ids = [c.id for c in campaigns]

        partner_sellers = 0
        pending_applications = 0
        if campaign_ids:
            partner_sellers = db.session.query(
                func.count(func.distinct(SellerApplication.seller_id))
            ).filter(
                SellerApplication.campaign_id.in_(campaign_ids),
                SellerApplication.status == 'approved'
            ).scalar() or 0
            pending_applications = SellerApplication.query.filter(
                SellerApplication.campaign_id.in_(campaign_ids),
                SellerApplication.status == 'pending'
            ).count()

        active = [c for c in campaigns if c.is_active]
        regions = set()
        for campaign in active:
            regions.update(campaign.target_regions or [])

        return {
            'active_campaigns': len(active),
            'partner_sellers': partner_sellers,
            'pending_applications': pending_applications,
            'regions_covered': len(regions),
        }

    @staticmethod
    def seller_dashboard(seller_id):
        applications = (
            SellerApplication.query
            .options(joinedload(SellerApplication.campaign))
            .filter_by(seller_id=seller_id)
            .all()
        )
        approved = [a for a in applications if a.status == 'approved']
        active_products = [a for a in approved if a.campaign and a.campaign.is_active]
        rates = [float(a.campaign.commission_rate) for a in approved if a.campaign]

        return {
            'active_products': len(active_products),
            'pending_applications': len([a for a in applications if a.status == 'pending']),
            'total_applications': len(applications),
            'average_commission_rate': round(sum(rates) / len(rates), 2) if rates else 0,
        }

    @staticmethod
    def recent_activity(profile, limit=5):
        """Latest applications received (startup) or submitted (seller)"""
        query = SellerApplication.query.options(
            joinedload(SellerApplication.campaign),
            joinedload(SellerApplication.seller)
        )
        if profile.is_startup:
            query = query.join(Campaign, SellerApplication.campaign_id == Campaign.id).filter(
                Campaign.user_id == profile.id
            )
        else:
            query = query.filter(SellerApplication.seller_id == profile.id)

        activity = []
        for application in query.order_by(SellerApplication.applied_at.desc()).limit(limit).all():
            campaign_title = application.campaign.title if application.campaign else None
            if profile.is_startup:
                seller_name = application.seller.full_name if application.seller else 'A seller'
                summary = f'{seller_name} applied to {campaign_title}'
            else:
                summary = f'Application to {campaign_title} is {application.status}'
            activity.append({
                'application_id': application.id,
                'campaign_id': application.campaign_id,
                'campaign_title': campaign_title,
                'status': application.status,
                'summary': summary,
                'applied_at': application.applied_at.isoformat() if application.applied_at else None,
                'reviewed_at': application.reviewed_at.isoformat() if application.reviewed_at else None,
            })
        return activity
