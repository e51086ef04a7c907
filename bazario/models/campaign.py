from bazario import db
from datetime import datetime
import uuid

CAMPAIGN_STATUSES = ('active', 'inactive')
COMMISSION_TYPES = ('percentage', 'flat')


def empty_demographics():
    return {'age_groups': [], 'income_levels': [], 'interests': ''}


def empty_sales_materials():
    return {'brochures': None, 'videos': None, 'training_docs': None}


class Campaign(db.Model):
    __tablename__ = 'campaigns'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('profiles.id'), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    product_images = db.Column(db.JSON, default=list)
    commission_rate = db.Column(db.Numeric(5, 2), nullable=False)
    commission_type = db.Column(db.String(20), default='percentage', nullable=False)
    target_regions = db.Column(db.JSON, default=list)
    target_demographics = db.Column(db.JSON, default=empty_demographics)  # age_groups/income_levels/interests
    sales_materials = db.Column(db.JSON, default=empty_sales_materials)  # brochures/videos/training_docs
    status = db.Column(db.String(20), default='active', nullable=False)  # active/inactive
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    owner = db.relationship('Profile', back_populates='campaigns')
    applications = db.relationship('SellerApplication', back_populates='campaign', lazy=True,
                                   order_by='SellerApplication.applied_at.desc()')

    @property
    def is_active(self):
        return self.status == 'active'

    def is_owned_by(self, profile_id):
        return self.user_id == profile_id
