from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ["ORM_DB_URL"] = "sqlite:///./test.db"
    os.environ["ORM_USE_MYSQL"] = "false"
    os.environ["ENVIRONMENT"] = "test"
    os.environ.setdefault("JWT_SECRET", "test-secret")

    # Public disk lives in a throwaway directory for the whole session.
    os.environ["PUBLIC_STORAGE_ROOT"] = tempfile.mkdtemp(prefix="customer-profiles-storage-")


def _wipe_storage(root: Path) -> None:
    root.mkdir(parents=True, exist_ok=True)
    for child in root.iterdir():
        if child.is_dir():
            shutil.rmtree(child)
        else:
            child.unlink()


@pytest.fixture()
def storage_root() -> Path:
    from customer_profiles.config import settings

    return Path(settings.public_storage_root)


@pytest.fixture()
def storage(storage_root: Path):
    from customer_profiles.services.storage_service import PublicDiskStorage

    return PublicDiskStorage(storage_root)


@pytest.fixture()
def client(storage_root: Path) -> Any:
    from customer_profiles.database import Base, engine
    from customer_profiles.main import create_app

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    _wipe_storage(storage_root)

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_user() -> Callable[..., int]:
    from customer_profiles.database import SessionLocal
    from customer_profiles.models.user import User

    def _make(email: str, name: str | None = None) -> int:
        with SessionLocal() as db:
            user = User(email=email, name=name)
            db.add(user)
            db.commit()
            db.refresh(user)
            return user.id

    return _make


@pytest.fixture()
def auth_headers(make_user: Callable[..., int]) -> Callable[..., dict[str, str]]:
    from customer_profiles.utils.jwt_handler import create_access_token

    def _headers(email: str = "customer@example.com", name: str | None = "Customer") -> dict[str, str]:
        user_id = make_user(email, name)
        token = create_access_token({"sub": str(user_id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers
