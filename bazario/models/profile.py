from bazario import db
from datetime import datetime
import uuid

USER_TYPES = ('startup', 'seller')


class Profile(db.Model):
    __tablename__ = 'profiles'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    user_type = db.Column(db.String(20), nullable=False)  # startup/seller
    company_name = db.Column(db.String(255))
    city = db.Column(db.String(100))
    state = db.Column(db.String(100))
    phone = db.Column(db.String(30))
    bio = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    campaigns = db.relationship('Campaign', back_populates='owner', lazy=True)
    applications = db.relationship('SellerApplication', back_populates='seller', lazy=True)

    @property
    def is_startup(self):
        return self.user_type == 'startup'

    @property
    def is_seller(self):
        return self.user_type == 'seller'

    @property
    def display_name(self):
        return self.company_name or self.full_name or 'Anonymous'
