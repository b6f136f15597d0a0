"""
services/movie_service.py
-------------------------
Business logic for the movie catalog.
Validates input and turns repository outcomes into results for the caller.
"""

from typing import Any, Optional, Sequence

from db.errors import EditConflictError
from models.filters import Filters, Metadata, validate_filters
from models.movie import SORT_SAFELIST, Movie, Runtime, validate_movie
from repositories.facade import Models
from utils.logger import get_logger
from utils.validator import Validator

logger = get_logger(__name__)

_EDITABLE_FIELDS = ("title", "year", "runtime", "genres")


class MovieService:
    """
    Handles create/update/delete/list for movies.

    Conflicts are never retried here: an `EditConflictError` is passed on so
    the caller can re-fetch or report it.
    """

    def __init__(self, models: Models):
        self.models = models

    def create(self, title: str, year: int, runtime: int, genres: Sequence[str]) -> Movie:
        """
        Raises:
            ValidationFailed: If any field is invalid.
        """
        movie = Movie(title=title, year=year, runtime=Runtime(runtime), genres=list(genres))
        v = Validator()
        validate_movie(v, movie)
        v.ensure_valid()
        return self.models.movies.insert(movie)

    def get(self, movie_id: int) -> Movie:
        return self.models.movies.get_by_id(movie_id)

    def update(
        self,
        movie_id: int,
        changes: dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> Movie:
        """
        Apply a partial update.

        Args:
            movie_id: The movie to change.
            changes: New values keyed by field name; absent fields keep their value.
            expected_version: When given, the version the caller last saw.

        Raises:
            NotFoundError: If the movie does not exist.
            EditConflictError: If `expected_version` is stale, or the movie
                changed between the read and the write.
            ValidationFailed: If a changed field is invalid.
            ValueError: If `changes` names a field that cannot be edited.
        """
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"cannot update fields: {', '.join(sorted(unknown))}")

        movie = self.models.movies.get_by_id(movie_id)
        if expected_version is not None and movie.version != expected_version:
            logger.warning(
                f"Movie #{movie_id} is at version {movie.version}, caller expected {expected_version}"
            )
            raise EditConflictError("movie", movie_id, expected_version)

        if "title" in changes:
            movie.title = changes["title"]
        if "year" in changes:
            movie.year = changes["year"]
        if "runtime" in changes:
            movie.runtime = Runtime(changes["runtime"])
        if "genres" in changes:
            movie.genres = list(changes["genres"])

        v = Validator()
        validate_movie(v, movie)
        v.ensure_valid()
        return self.models.movies.update(movie)

    def delete(self, movie_id: int) -> None:
        self.models.movies.delete(movie_id)

    def list(
        self,
        title: str = "",
        genres: Optional[Sequence[str]] = None,
        page: int = 1,
        page_size: int = 20,
        sort: str = "id",
    ) -> tuple[list[Movie], Metadata]:
        """
        Raises:
            ValidationFailed: If the pagination or sort parameters are invalid.
        """
        filters = Filters(page=page, page_size=page_size, sort=sort, sort_safelist=SORT_SAFELIST)
        v = Validator()
        validate_filters(v, filters)
        v.ensure_valid()
        return self.models.movies.get_all(filters, title=title, genres=genres)
