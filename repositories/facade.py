"""
repositories/facade.py
----------------------
Single handle over every repository.

Built once by the bootstrap around an open ``Database`` and shared by all
callers. It holds no mutable state of its own.
"""

from dataclasses import dataclass

from db.connection import Database
from repositories.movie_repo import MovieRepository
from repositories.user_repo import UserRepository


@dataclass(frozen=True)
class Models:
    movies: MovieRepository
    users: UserRepository


def new_models(db: Database) -> Models:
    return Models(movies=MovieRepository(db), users=UserRepository(db))
