# __init__.py
from customer_profiles.schemas.customer_profile import (
	CustomerProfileInput,
	CustomerProfileMessageResponse,
	CustomerProfileRead,
	CustomerProfileResponse,
	MessageResponse,
	UploadedImage,
	ValidationErrorResponse,
)
from customer_profiles.schemas.user import TokenData, UserRead

__all__ = [
	"CustomerProfileInput",
	"CustomerProfileMessageResponse",
	"CustomerProfileRead",
	"CustomerProfileResponse",
	"MessageResponse",
	"UploadedImage",
	"ValidationErrorResponse",
	"TokenData",
	"UserRead",
]
