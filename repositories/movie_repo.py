"""
repositories/movie_repo.py
--------------------------
Data access layer for catalog movies.
All SQL queries related to the `movies` table live here.
"""

from typing import Optional, Sequence

from psycopg2 import sql

from db.connection import Database
from db.errors import NotFoundError
from models.filters import Filters, Metadata, calculate_metadata
from models.movie import Movie, Runtime
from repositories.versioning import VersionGuard
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "id, created_at, title, year, runtime, genres, version"


class MovieRepository:
    """Repository for CRUD operations on the movies table."""

    def __init__(self, db: Database):
        self._db = db
        self._guard = VersionGuard("movie", "movies", ("title", "year", "runtime", "genres"))

    # ── CREATE ────────────────────────────────────────────

    def insert(self, movie: Movie) -> Movie:
        """
        Insert a new movie.

        Args:
            movie: The Movie domain object to persist.

        Returns:
            The same Movie with `id`, `created_at` and `version` populated.
        """
        query = """
            INSERT INTO movies (title, year, runtime, genres)
            VALUES (%s, %s, %s, %s)
            RETURNING id, created_at, version;
        """
        with self._db.transaction() as cur:
            cur.execute(query, self._values(movie))
            row = cur.fetchone()
        movie.id = row["id"]
        movie.created_at = row["created_at"]
        movie.version = row["version"]
        logger.info(f"Inserted movie #{movie.id}")
        return movie

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, movie_id: int) -> Movie:
        """
        Fetch a single movie by ID.

        Raises:
            NotFoundError: If no movie has this ID.
        """
        if movie_id < 1:
            raise NotFoundError("movie", movie_id)

        query = f"SELECT {_COLUMNS} FROM movies WHERE id = %s;"
        with self._db.transaction() as cur:
            cur.execute(query, (movie_id,))
            row = cur.fetchone()
        if row is None:
            logger.debug(f"Movie #{movie_id} not found")
            raise NotFoundError("movie", movie_id)
        return self._row_to_movie(row)

    def get_all(
        self,
        filters: Filters,
        title: str = "",
        genres: Optional[Sequence[str]] = None,
    ) -> tuple[list[Movie], Metadata]:
        """
        Fetch one page of movies.

        Args:
            filters: A validated Filters instance.
            title: Case-insensitive substring of the title; empty matches all.
            genres: Genres every returned movie must have; empty matches all.

        Returns:
            The movies on the requested page and the pagination metadata.
        """
        genres = list(genres or [])
        query = sql.SQL("""
            SELECT count(*) OVER() AS total_records, {columns}
            FROM movies
            WHERE (%s = '' OR strpos(lower(title), lower(%s)) > 0)
              AND (cardinality(%s::text[]) = 0 OR genres @> %s::text[])
            ORDER BY {column} {direction}, id ASC
            LIMIT %s OFFSET %s;
        """).format(
            columns=sql.SQL(_COLUMNS),
            column=sql.Identifier(filters.sort_column()),
            direction=sql.SQL(filters.sort_direction()),
        )
        params = (title, title, genres, genres, filters.limit(), filters.offset())
        with self._db.transaction() as cur:
            cur.execute(query, params)
            rows = cur.fetchall()

        total = rows[0]["total_records"] if rows else 0
        movies = [self._row_to_movie(r) for r in rows]
        return movies, calculate_metadata(total, filters.page, filters.page_size)

    # ── UPDATE ────────────────────────────────────────────

    def update(self, movie: Movie) -> Movie:
        """
        Write every field of `movie` if its version is still current.

        Returns:
            The same Movie with its `version` advanced by one.

        Raises:
            EditConflictError: If the movie changed (or was deleted) since it was read.
        """
        with self._db.transaction() as cur:
            new_version = self._guard.update(cur, movie, self._values(movie))
        movie.version = new_version
        logger.info(f"Updated movie #{movie.id} to version {movie.version}")
        return movie

    # ── DELETE ────────────────────────────────────────────

    def delete(self, movie_id: int) -> None:
        """
        Delete a movie by ID.

        Raises:
            NotFoundError: If no movie has this ID.
        """
        if movie_id < 1:
            raise NotFoundError("movie", movie_id)

        with self._db.transaction() as cur:
            cur.execute("DELETE FROM movies WHERE id = %s;", (movie_id,))
            deleted = cur.rowcount > 0
        if not deleted:
            raise NotFoundError("movie", movie_id)
        logger.info(f"Deleted movie #{movie_id}")

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _values(movie: Movie) -> tuple:
        return (movie.title, movie.year, int(movie.runtime), list(movie.genres))

    @staticmethod
    def _row_to_movie(row: dict) -> Movie:
        """Convert a database row to a Movie domain object."""
        return Movie(
            id=row["id"],
            created_at=row["created_at"],
            title=row["title"],
            year=row["year"],
            runtime=Runtime(row["runtime"]),
            genres=list(row["genres"]),
            version=row["version"],
        )
