# customer_profile_service.py
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from customer_profiles.models.customer_profile import CustomerProfile
from customer_profiles.schemas.customer_profile import ProfileValidationResult
from customer_profiles.services.storage_service import PublicDiskStorage


logger = logging.getLogger(__name__)


class CustomerProfileError(Exception):
    message = "Customer profile error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class ProfileNotFoundError(CustomerProfileError):
    message = "Profile not found"


class ProfileAlreadyExistsError(CustomerProfileError):
    message = "Profile already exists"


def find_profile(db: Session, owner_id: int) -> CustomerProfile | None:
    return db.query(CustomerProfile).filter(CustomerProfile.user_id == owner_id).first()


def profile_exists(db: Session, owner_id: int) -> bool:
    return db.query(CustomerProfile.id).filter(CustomerProfile.user_id == owner_id).first() is not None


def require_profile(db: Session, owner_id: int) -> CustomerProfile:
    profile = find_profile(db, owner_id)
    if profile is None:
        raise ProfileNotFoundError()
    return profile


def load_with_owner(db: Session, profile: CustomerProfile) -> CustomerProfile:
    """Re-read the profile with its owning user eagerly joined."""

    return (
        db.query(CustomerProfile)
        .options(joinedload(CustomerProfile.user))
        .filter(CustomerProfile.id == profile.id)
        .one()
    )


def _store_image(storage: PublicDiskStorage, result: ProfileValidationResult, namespace: str) -> str | None:
    if result.image is None:
        return None
    return storage.store(result.image, namespace, extension=result.image_extension or "jpg")


def create_profile(
    db: Session,
    storage: PublicDiskStorage,
    owner_id: int,
    result: ProfileValidationResult,
    *,
    namespace: str,
) -> CustomerProfile:
    values: dict[str, Any] = {name: result.data.get(name) for name in CustomerProfile.FILLABLE}
    stored_path = _store_image(storage, result, namespace)
    if stored_path is not None:
        values["profile_image"] = stored_path

    profile = CustomerProfile(user_id=owner_id, **values)
    db.add(profile)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        # The record never landed, so the image would be orphaned.
        if stored_path is not None:
            storage.delete(stored_path)
        if isinstance(exc, IntegrityError):
            raise ProfileAlreadyExistsError() from exc
        raise
    db.refresh(profile)
    logger.info("customer_profile.create user_id=%s profile_id=%s image=%s", owner_id, profile.id, stored_path)
    return profile


def update_profile(
    db: Session,
    storage: PublicDiskStorage,
    profile: CustomerProfile,
    result: ProfileValidationResult,
    *,
    namespace: str,
) -> CustomerProfile:
    # Sparse update: only keys present in the request are written.
    values: dict[str, Any] = {k: v for k, v in result.data.items() if k in CustomerProfile.FILLABLE}

    if result.image is not None:
        if profile.profile_image:
            storage.delete(profile.profile_image)
        values["profile_image"] = _store_image(storage, result, namespace)

    for name, value in values.items():
        setattr(profile, name, value)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("customer_profile.update user_id=%s fields=%s", profile.user_id, ",".join(sorted(values)))
    return profile


def delete_profile(db: Session, storage: PublicDiskStorage, profile: CustomerProfile) -> None:
    if profile.profile_image:
        storage.delete(profile.profile_image)
    owner_id = profile.user_id
    db.delete(profile)
    db.commit()
    logger.info("customer_profile.delete user_id=%s", owner_id)
