# main.py
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from customer_profiles.config import settings
from customer_profiles.config import build_sqlalchemy_db_url
from customer_profiles.database import Base, engine
from customer_profiles.models import CustomerProfile, User  # noqa: F401  # register tables
from customer_profiles.api.routes.health import router as health_router
from customer_profiles.routers.customer_profile import router as customer_profile_router


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoints (do not depend on API_PREFIX)
    application.include_router(health_router)
    application.include_router(customer_profile_router, prefix=settings.api_prefix)

    # Public disk, the equivalent of a `storage` symlink into the web root.
    storage_root = Path(settings.public_storage_root)
    storage_root.mkdir(parents=True, exist_ok=True)
    application.mount(
        settings.public_storage_url,
        StaticFiles(directory=storage_root),
        name="public-storage",
    )

    # Avoid accidental schema changes in shared MySQL databases.
    # For local/test sqlite usage, auto-create ORM tables is still convenient.
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
