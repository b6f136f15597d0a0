"""
models/movie.py
---------------
Domain model for catalog movies.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from utils.validator import Validator, unique

EARLIEST_YEAR = 1888
MAX_TITLE_BYTES = 500
MAX_GENRES = 5

SORT_SAFELIST = ("id", "title", "year", "runtime", "-id", "-title", "-year", "-runtime")

_RUNTIME_RX = re.compile(r"^(\d+) mins$")


class Runtime(int):
    """Runtime in minutes, rendered as ``"<n> mins"``."""

    def __str__(self) -> str:
        return f"{int(self)} mins"

    @classmethod
    def parse(cls, text: str) -> "Runtime":
        """
        Parse the ``"<n> mins"`` form.

        Raises:
            ValueError: If ``text`` is not in that form.
        """
        match = _RUNTIME_RX.match(text)
        if match is None:
            raise ValueError(f"invalid runtime format: {text!r}")
        return cls(int(match.group(1)))


@dataclass
class Movie:
    """
    Represents a single catalog movie.

    Attributes:
        id: Database primary key (None for new records).
        title: Display title.
        year: Release year.
        runtime: Runtime in minutes.
        genres: Ordered genre names.
        version: Concurrency token, starts at 1 and grows by 1 per update.
        created_at: Timestamp when the record was created.
    """
    title: str
    year: int
    runtime: Runtime
    genres: list[str] = field(default_factory=list)
    id: Optional[int] = None
    version: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.runtime is not None and not isinstance(self.runtime, Runtime):
            self.runtime = Runtime(self.runtime)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "title": self.title,
        }
        if self.year:
            data["year"] = self.year
        if self.runtime:
            data["runtime"] = str(self.runtime)
        data["genres"] = list(self.genres)
        data["version"] = self.version
        return data

    def __str__(self) -> str:
        return f"{self.title} ({self.year}) | {self.runtime} | {', '.join(self.genres)}"


def validate_movie(v: Validator, movie: Movie) -> None:
    v.check(movie.title != "", "title", "must be provided")
    v.check(len(movie.title.encode()) <= MAX_TITLE_BYTES, "title", "must not be more than 500 bytes long")

    v.check(bool(movie.year), "year", "must be provided")
    v.check((movie.year or 0) >= EARLIEST_YEAR, "year", "must be greater than 1888")
    v.check((movie.year or 0) <= date.today().year + 1, "year", "must not be in the future")

    v.check(bool(movie.runtime), "runtime", "must be provided")
    v.check((movie.runtime or 0) > 0, "runtime", "must be a positive integer")

    v.check(movie.genres is not None and len(movie.genres) >= 1, "genres", "must contain at least 1 genre")
    v.check(movie.genres is None or len(movie.genres) <= MAX_GENRES, "genres", "must not contain more than 5 genres")
    v.check(all(g for g in movie.genres or []), "genres", "must not contain empty values")
    v.check(unique(movie.genres or []), "genres", "must not contain duplicate values")
