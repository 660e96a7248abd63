# __init__.py
from customer_profiles.models.customer_profile import CustomerProfile
from customer_profiles.models.user import User

__all__ = [
	"CustomerProfile",
	"User",
]
