from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from movielikes.catalog_client import CatalogClient, CatalogError
from movielikes.deps import get_catalog_client
from movielikes.models import MovieOut

router = APIRouter(prefix="/movies", tags=["movies"])


@router.get("", response_model=list[MovieOut])
async def search_movies(
    search: str = Query(..., min_length=1, description="Search term"),
    catalog: CatalogClient = Depends(get_catalog_client),
) -> list[MovieOut]:
    try:
        movies = await catalog.search(search)
    except CatalogError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return [MovieOut.from_movie(m) for m in movies]


@router.get("/{movie_id}", response_model=MovieOut)
async def get_movie(movie_id: str, catalog: CatalogClient = Depends(get_catalog_client)) -> MovieOut:
    try:
        movie = await catalog.get(movie_id)
    except CatalogError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if movie is None:
        raise HTTPException(status_code=404, detail=f"Movie '{movie_id}' not found")
    return MovieOut.from_movie(movie)
