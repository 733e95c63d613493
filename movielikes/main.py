from __future__ import annotations

import logging

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from movielikes import deps
from movielikes.logging_config import configure_logging
from movielikes.routers.movies import router as movies_router
from movielikes.routers.users import router as users_router
from movielikes.settings import Settings, get_settings
from movielikes.user_store import InMemoryUserStore

configure_logging(get_settings().log_level)

logger = logging.getLogger("movie_likes")

APP_VERSION = "1.0.0"

app = FastAPI(title="Movie Likes", version=APP_VERSION)
app.include_router(users_router)
app.include_router(movies_router)

# One directory per process; volatile, seeded with the demo users.
app.state.user_store = InMemoryUserStore.with_default_seed()


@app.get("/healthz")
def healthz(store: InMemoryUserStore = Depends(deps.get_user_store)):
    return JSONResponse(
        {
            "ok": True,
            "service": "movie-likes",
            "version": APP_VERSION,
            "users": len(store),
        }
    )


@app.get("/configz")
def configz(settings: Settings = Depends(deps.get_settings_dep)):
    # Never return the key itself.
    return JSONResponse(
        {
            "omdb_api_key_set": bool((settings.omdb_api_key or "").strip()),
            "omdb_host": settings.omdb_host,
            "omdb_scheme": settings.omdb_scheme,
        }
    )
