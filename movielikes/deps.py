from __future__ import annotations

from fastapi import Depends, Request

from movielikes.catalog_client import CatalogClient
from movielikes.settings import Settings, get_settings
from movielikes.user_store import InMemoryUserStore


def get_settings_dep() -> Settings:
    """FastAPI dependency for settings.

    Delegates to movielikes.settings.get_settings (canonical constructor).
    """
    return get_settings()


def get_user_store(request: Request) -> InMemoryUserStore:
    # The store is created once per app in main.py; tests override this
    # dependency with their own instance.
    return request.app.state.user_store


# NOTE: Do not cache across process lifetime. Tests toggle env vars and
# override this dependency; caching breaks determinism.


def get_catalog_client(settings: Settings = Depends(get_settings_dep)) -> CatalogClient:
    return CatalogClient(
        api_key=settings.omdb_api_key,
        host=settings.omdb_host,
        scheme=settings.omdb_scheme,
        timeout_seconds=settings.omdb_timeout_seconds,
    )
