from __future__ import annotations

from pydantic import BaseModel, Field

from movielikes.catalog_client import Movie
from movielikes.user_store import User


class CreateUserRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Display name of the new user")


class UserOut(BaseModel):
    id: str
    name: str
    likes: list[str] = Field(default_factory=list)

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(id=user.id, name=user.name, likes=list(user.likes))


class LikeResult(BaseModel):
    user_id: str
    movie_id: str
    added: bool = Field(description="False when the movie was already liked")


class MovieOut(BaseModel):
    id: str
    title: str
    year: str

    @classmethod
    def from_movie(cls, movie: Movie) -> "MovieOut":
        return cls(id=movie.id, title=movie.title, year=movie.year)
