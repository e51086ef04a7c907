from .profile import Profile
from .campaign import Campaign
from .application import SellerApplication

__all__ = [
    'Profile', 'Campaign', 'SellerApplication'
]
