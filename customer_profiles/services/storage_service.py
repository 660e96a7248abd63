# storage_service.py
from __future__ import annotations

import logging
import secrets
import string
from pathlib import Path

from customer_profiles.config import settings
from customer_profiles.schemas.customer_profile import UploadedImage


logger = logging.getLogger(__name__)

_NAME_ALPHABET = string.ascii_letters + string.digits


def _random_name(length: int = 40) -> str:
    return "".join(secrets.choice(_NAME_ALPHABET) for _ in range(length))


class PublicDiskStorage:
    """Local directory whose contents are served publicly by the app.

    Stored files are addressed by a path relative to ``root``
    (e.g. ``profile_images/<name>.png``), which is what gets persisted on records.
    """

    def __init__(self, root: str | Path, base_url: str = "/storage") -> None:
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        try:
            target.relative_to(self.root)
        except ValueError as exc:
            raise ValueError(f"path escapes storage root: {path!r}") from exc
        if target == self.root:
            raise ValueError("path must name a file inside the storage root")
        return target

    def store(self, upload: UploadedImage, namespace: str, *, extension: str) -> str:
        relative = f"{namespace.strip('/')}/{_random_name()}.{extension}"
        target = self._resolve(relative)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(upload.content)
        logger.info("storage.store path=%s bytes=%d", relative, upload.size)
        return relative

    def delete(self, path: str) -> bool:
        target = self._resolve(path)
        if not target.is_file():
            return False
        target.unlink()
        logger.info("storage.delete path=%s", path)
        return True

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"


def get_public_storage() -> PublicDiskStorage:
    return PublicDiskStorage(settings.public_storage_root, settings.public_storage_url)
