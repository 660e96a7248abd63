# customer_profile.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, StringConstraints, ValidationError

from customer_profiles.schemas.user import UserRead


ALLOWED_IMAGE_EXTENSIONS = ("jpeg", "png", "jpg")

_Str20 = Annotated[str, StringConstraints(strict=True, max_length=20)]
_Str100 = Annotated[str, StringConstraints(strict=True, max_length=100)]
_Str255 = Annotated[str, StringConstraints(strict=True, max_length=255)]
_Str1000 = Annotated[str, StringConstraints(strict=True, max_length=1000)]

# Content signatures -> canonical extension. Only jpeg/png are accepted, the rest
# are recognised so that "is an image" and "allowed type" can be reported separately.
_IMAGE_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\xff\xd8\xff", "jpg"),
    (b"\x89PNG\r\n\x1a\n", "png"),
    (b"GIF87a", "gif"),
    (b"GIF89a", "gif"),
)

# BITMAPCOREHEADER through BITMAPV5HEADER.
_BMP_DIB_HEADER_SIZES = (12, 40, 52, 56, 64, 108, 124)


class CustomerProfileInput(BaseModel):
    """Declarative rules for the scalar profile fields.

    Every field is nullable; strings are strict so numbers or lists sent in a
    JSON body are rejected instead of coerced.
    """

    model_config = ConfigDict(extra="ignore")

    phone_number: Optional[_Str20] = None
    address: Optional[_Str255] = None
    city: Optional[_Str100] = None
    state: Optional[_Str100] = None
    postal_code: Optional[_Str20] = None
    bio: Optional[_Str1000] = None
    preferences: Optional[dict[str, Any]] = None


FIELD_ORDER = (
    "phone_number",
    "address",
    "city",
    "state",
    "postal_code",
    "profile_image",
    "bio",
    "preferences",
)


@dataclass
class UploadedImage:
    """An uploaded file part, already read into memory."""

    content: bytes
    filename: Optional[str] = None
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class ProfileValidationResult:
    data: dict[str, Any] = field(default_factory=dict)
    image: Optional[UploadedImage] = None
    image_extension: Optional[str] = None
    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def _label(field_name: str) -> str:
    return field_name.replace("_", " ")


def _message_for(field_name: str, error: dict[str, Any]) -> str:
    label = _label(field_name)
    kind = error.get("type")
    ctx = error.get("ctx") or {}
    if kind == "string_type":
        return f"The {label} field must be a string."
    if kind == "string_too_long":
        return f"The {label} field must not be greater than {ctx.get('max_length')} characters."
    if kind == "dict_type":
        if isinstance(error.get("input"), list):
            return f"The {label} field must be an associative array."
        return f"The {label} field must be an array."
    return f"The {label} field is invalid."


def _looks_like_bmp(content: bytes) -> bool:
    # "BM", total file size, two reserved words, pixel offset, then the DIB header size.
    if len(content) < 26 or not content.startswith(b"BM"):
        return False
    file_size = int.from_bytes(content[2:6], "little")
    pixel_offset = int.from_bytes(content[10:14], "little")
    dib_size = int.from_bytes(content[14:18], "little")
    return (
        file_size == len(content)
        and dib_size in _BMP_DIB_HEADER_SIZES
        and 14 + dib_size <= pixel_offset <= file_size
    )


def detect_image_extension(content: bytes) -> Optional[str]:
    for signature, extension in _IMAGE_SIGNATURES:
        if content.startswith(signature):
            return extension
    if _looks_like_bmp(content):
        return "bmp"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "webp"
    return None


def validate_profile_image(value: Any, *, max_kb: int) -> tuple[Optional[str], list[str]]:
    """Check an uploaded profile image; returns (extension, messages)."""

    label = _label("profile_image")
    if not isinstance(value, UploadedImage):
        return None, [
            f"The {label} field must be an image.",
            f"The {label} field must be a file of type: {', '.join(ALLOWED_IMAGE_EXTENSIONS)}.",
        ]

    messages: list[str] = []
    extension = detect_image_extension(value.content)
    if extension is None:
        messages.append(f"The {label} field must be an image.")
    if extension not in ALLOWED_IMAGE_EXTENSIONS:
        messages.append(f"The {label} field must be a file of type: {', '.join(ALLOWED_IMAGE_EXTENSIONS)}.")
    if value.size > max_kb * 1024:
        messages.append(f"The {label} field must not be greater than {max_kb} kilobytes.")
    return (extension if not messages else None), messages


def validate_profile_input(payload: dict[str, Any], *, max_image_kb: int) -> ProfileValidationResult:
    """Validate a normalized request payload against the profile rules.

    Only keys present in ``payload`` end up in ``result.data``, which keeps
    update requests sparse. Nothing is raised: failures are collected per field.
    """

    result = ProfileValidationResult()
    scalars = {k: v for k, v in payload.items() if k in CustomerProfileInput.model_fields}

    try:
        parsed = CustomerProfileInput.model_validate(scalars)
    except ValidationError as exc:
        for error in exc.errors():
            name = str(error["loc"][0]) if error.get("loc") else "input"
            result.errors.setdefault(name, []).append(_message_for(name, error))
    else:
        dumped = parsed.model_dump()
        result.data = {k: dumped[k] for k in scalars}

    if "profile_image" in payload:
        image = payload["profile_image"]
        if image is None:
            result.data["profile_image"] = None
        else:
            extension, messages = validate_profile_image(image, max_kb=max_image_kb)
            if messages:
                result.errors["profile_image"] = messages
            else:
                result.image = image
                result.image_extension = extension

    if result.errors:
        result.data = {}
        result.errors = {k: result.errors[k] for k in sorted(result.errors, key=_field_rank)}
    return result


def _field_rank(name: str) -> int:
    try:
        return FIELD_ORDER.index(name)
    except ValueError:
        return len(FIELD_ORDER)


class CustomerProfileRead(BaseModel):
    id: int
    user_id: int
    phone_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    profile_image: Optional[str] = None
    bio: Optional[str] = None
    preferences: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserRead] = None

    model_config = ConfigDict(from_attributes=True)


class CustomerProfileResponse(BaseModel):
    profile: CustomerProfileRead


class CustomerProfileMessageResponse(BaseModel):
    message: str
    profile: CustomerProfileRead


class MessageResponse(BaseModel):
    message: str


class ValidationErrorResponse(BaseModel):
    errors: dict[str, list[str]]
