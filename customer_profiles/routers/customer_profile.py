# customer_profile.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from customer_profiles.config import settings
from customer_profiles.database import get_db
from customer_profiles.models.user import User
from customer_profiles.routers.dependencies import ProfilePayload, get_current_user, get_storage, read_profile_payload
from customer_profiles.schemas.customer_profile import (
    CustomerProfileMessageResponse,
    CustomerProfileRead,
    CustomerProfileResponse,
    MessageResponse,
    ValidationErrorResponse,
    validate_profile_input,
)
from customer_profiles.services.customer_profile_service import (
    CustomerProfileError,
    ProfileAlreadyExistsError,
    ProfileNotFoundError,
    create_profile,
    delete_profile,
    load_with_owner,
    profile_exists,
    require_profile,
    update_profile,
)
from customer_profiles.services.storage_service import PublicDiskStorage


router = APIRouter(prefix="/customer-profile", tags=["customer-profile"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": MessageResponse},
    status.HTTP_404_NOT_FOUND: {"model": MessageResponse},
    status.HTTP_422_UNPROCESSABLE_CONTENT: {"model": ValidationErrorResponse},
}


def _message(status_code: int, exc: CustomerProfileError) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": exc.message})


def _errors(errors: dict[str, list[str]]) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, content={"errors": errors})


@router.get("", response_model=CustomerProfileResponse, responses=_ERROR_RESPONSES)
def show_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CustomerProfileResponse | JSONResponse:
    try:
        profile = require_profile(db, current_user.id)
    except ProfileNotFoundError as exc:
        return _message(status.HTTP_404_NOT_FOUND, exc)
    return CustomerProfileResponse(profile=CustomerProfileRead.model_validate(load_with_owner(db, profile)))


@router.post(
    "",
    response_model=CustomerProfileMessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
def store_profile(
    current_user: User = Depends(get_current_user),
    payload: ProfilePayload = Depends(read_profile_payload),
    db: Session = Depends(get_db),
    storage: PublicDiskStorage = Depends(get_storage),
) -> CustomerProfileMessageResponse | JSONResponse:
    # Existence is checked before the input is looked at, malformed bodies included.
    if profile_exists(db, current_user.id):
        return _message(status.HTTP_400_BAD_REQUEST, ProfileAlreadyExistsError())

    result = validate_profile_input(payload.require(), max_image_kb=settings.profile_image_max_kb)
    if not result.ok:
        return _errors(result.errors)

    try:
        profile = create_profile(
            db, storage, current_user.id, result, namespace=settings.profile_image_namespace
        )
    except ProfileAlreadyExistsError as exc:
        return _message(status.HTTP_400_BAD_REQUEST, exc)

    return CustomerProfileMessageResponse(
        message="Profile created successfully",
        profile=CustomerProfileRead.model_validate(load_with_owner(db, profile)),
    )


@router.put("", response_model=CustomerProfileMessageResponse, responses=_ERROR_RESPONSES)
def update_my_profile(
    current_user: User = Depends(get_current_user),
    payload: ProfilePayload = Depends(read_profile_payload),
    db: Session = Depends(get_db),
    storage: PublicDiskStorage = Depends(get_storage),
) -> CustomerProfileMessageResponse | JSONResponse:
    try:
        profile = require_profile(db, current_user.id)
    except ProfileNotFoundError as exc:
        return _message(status.HTTP_404_NOT_FOUND, exc)

    result = validate_profile_input(payload.require(), max_image_kb=settings.profile_image_max_kb)
    if not result.ok:
        return _errors(result.errors)

    profile = update_profile(db, storage, profile, result, namespace=settings.profile_image_namespace)
    return CustomerProfileMessageResponse(
        message="Profile updated successfully",
        profile=CustomerProfileRead.model_validate(load_with_owner(db, profile)),
    )


@router.delete("", response_model=MessageResponse, responses=_ERROR_RESPONSES)
def destroy_profile(
    db: Session = Depends(get_db),
    storage: PublicDiskStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
) -> MessageResponse | JSONResponse:
    try:
        profile = require_profile(db, current_user.id)
    except ProfileNotFoundError as exc:
        return _message(status.HTTP_404_NOT_FOUND, exc)

    delete_profile(db, storage, profile)
    return MessageResponse(message="Profile deleted successfully")
