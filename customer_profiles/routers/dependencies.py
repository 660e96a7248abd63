# dependencies.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from customer_profiles.database import get_db
from customer_profiles.models.user import User
from customer_profiles.schemas.customer_profile import UploadedImage
from customer_profiles.schemas.user import TokenData
from customer_profiles.services.storage_service import PublicDiskStorage, get_public_storage
from customer_profiles.utils.jwt_handler import decode_access_token


# Tokens are issued by the surrounding application's auth service.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

_BRACKET_RE = re.compile(r"\[([^\[\]]*)\]")


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    try:
        token_data = TokenData(user_id=int(user_id))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject") from exc
    user = db.query(User).filter(User.id == token_data.user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def get_storage() -> PublicDiskStorage:
    return get_public_storage()


def _normalize(value: Any) -> Any:
    """Trim strings and turn empty strings into None, recursively."""

    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, dict):
        return {k: _normalize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize(v) for v in value]
    return value


def _split_form_key(key: str) -> list[str]:
    # "preferences[notify][email]" -> ["preferences", "notify", "email"]
    head = key.split("[", 1)[0]
    return [head] + _BRACKET_RE.findall(key[len(head):])


def _assign(target: dict[str, Any], parts: list[str], value: Any) -> None:
    # An empty segment ("tags[]") appends to a list instead of naming a key.
    node: Any = target
    for part, next_part in zip(parts, parts[1:]):
        container = list if next_part == "" else dict
        if isinstance(node, list):
            child = container()
            node.append(child)
        else:
            child = node.get(part)
            if not isinstance(child, container):
                child = container()
                node[part] = child
        node = child
    if isinstance(node, list):
        node.append(value)
    else:
        node[parts[-1]] = value


def _coerce_form_preferences(payload: dict[str, Any]) -> None:
    raw = payload.get("preferences")
    if isinstance(raw, str) and raw.strip().startswith("{"):
        try:
            payload["preferences"] = json.loads(raw)
        except ValueError:
            # Left as a string; validation reports it as not an array.
            pass


@dataclass
class ProfilePayload:
    """Normalized request input, or the reason the body could not be read.

    A body error is only raised by ``require()`` so handlers can run their
    existence checks first.
    """

    data: dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    def require(self) -> dict[str, Any]:
        if self.error:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=self.error)
        return self.data


async def read_profile_payload(request: Request) -> ProfilePayload:
    """Collect request input from a JSON body or a (multipart) form.

    File parts are read into memory as ``UploadedImage``; everything else is
    trimmed and empty strings become None before validation sees it.
    """

    content_type = (request.headers.get("content-type") or "").lower()
    payload: dict[str, Any] = {}

    if content_type.startswith("application/json"):
        body = await request.body()
        if body.strip():
            try:
                parsed = json.loads(body)
            except ValueError:
                return ProfilePayload(error="Malformed JSON body")
            if not isinstance(parsed, dict):
                return ProfilePayload(error="JSON body must be an object")
            payload = parsed
        return ProfilePayload(data=_normalize(payload))

    form = await request.form()
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            content = await value.read()
            # Browsers send an empty, unnamed part for an untouched file input.
            if not content and not value.filename:
                value = None
            else:
                value = UploadedImage(content=content, filename=value.filename, content_type=value.content_type)
        _assign(payload, _split_form_key(key), value)

    _coerce_form_preferences(payload)
    return ProfilePayload(data=_normalize(payload))
