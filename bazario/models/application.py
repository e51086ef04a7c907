from bazario import db
from datetime import datetime
import uuid

PENDING = 'pending'
APPROVED = 'approved'
REJECTED = 'rejected'
APPLICATION_STATUSES = (PENDING, APPROVED, REJECTED)
TERMINAL_STATUSES = (APPROVED, REJECTED)


class SellerApplication(db.Model):
    __tablename__ = 'seller_applications'
    __table_args__ = (
        db.UniqueConstraint('campaign_id', 'seller_id', name='uq_application_campaign_seller'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    campaign_id = db.Column(db.String(36), db.ForeignKey('campaigns.id'), nullable=False)
    seller_id = db.Column(db.String(36), db.ForeignKey('profiles.id'), nullable=False)
    application_message = db.Column(db.Text)
    status = db.Column(db.String(20), default=PENDING, nullable=False)  # pending/approved/rejected
    applied_at = db.Column(db.DateTime, default=datetime.utcnow)
    reviewed_at = db.Column(db.DateTime)

    # Relationships
    campaign = db.relationship('Campaign', back_populates='applications')
    seller = db.relationship('Profile', back_populates='applications')

    @property
    def is_pending(self):
        return self.status == PENDING

    @property
    def is_reviewed(self):
        return self.status in TERMINAL_STATUSES
