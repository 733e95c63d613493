from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, HTTPException, status

from movielikes.catalog_client import CatalogClient, CatalogError
from movielikes.deps import get_catalog_client, get_user_store
from movielikes.models import CreateUserRequest, LikeResult, MovieOut, UserOut
from movielikes.user_store import InMemoryUserStore, UserNotFoundError

logger = logging.getLogger("movie_likes")

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: CreateUserRequest = Body(...),
    store: InMemoryUserStore = Depends(get_user_store),
) -> UserOut:
    try:
        user = store.create(payload.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return UserOut.from_user(user)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, store: InMemoryUserStore = Depends(get_user_store)) -> UserOut:
    try:
        return UserOut.from_user(store.get(user_id))
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{user_id}/likes/{movie_id}", response_model=LikeResult)
def like_movie(
    user_id: str,
    movie_id: str,
    store: InMemoryUserStore = Depends(get_user_store),
) -> LikeResult:
    """Idempotently add ``movie_id`` to the user's likes.

    The movie id is not checked against the catalog here.
    """
    try:
        added = store.like(user_id, movie_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return LikeResult(user_id=user_id, movie_id=movie_id, added=added)


@router.get("/{user_id}/likes", response_model=list[MovieOut])
async def list_liked_movies(
    user_id: str,
    store: InMemoryUserStore = Depends(get_user_store),
    catalog: CatalogClient = Depends(get_catalog_client),
) -> list[MovieOut]:
    try:
        # Snapshot first: no store lock is held while the catalog is awaited.
        liked = store.get(user_id).likes
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        movies = await catalog.get_many(liked)
    except CatalogError as e:
        logger.warning("Resolving liked movies failed", extra={"user_id": user_id, "status_code": e.status_code})
        raise HTTPException(status_code=502, detail=str(e))
    return [MovieOut.from_movie(m) for m in movies]
