import json
import logging
import os
import sys
from typing import IO, Optional, Protocol, Sequence

from domain.models import CityRecord, DepartmentRecord

# Get logger for this module
logger = logging.getLogger(__name__)


class RatingsStorage(Protocol):
    """Sink receiving the result set of a crawl."""

    def persist(self, departments: Sequence[DepartmentRecord]) -> None: ...


class JSONFileStorage:
    """Write the result set as one JSON document."""

    def __init__(self, destination: str) -> None:
        self.destination = destination

    def persist(self, departments: Sequence[DepartmentRecord]) -> None:
        parent = os.path.dirname(self.destination)
        if parent:
            os.makedirs(parent, exist_ok=True)

        data = [department.to_dict() for department in departments]
        logger.debug("Writing %d departments to %s", len(data), self.destination)
        with open(self.destination, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        logger.info("Persisted ratings to %s", self.destination)


class ConsoleStorage:
    """Print the result set as readable text."""

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        self.stream = stream

    def persist(self, departments: Sequence[DepartmentRecord]) -> None:
        out = self.stream if self.stream is not None else sys.stdout
        for department in departments:
            out.write(f"{department.code} - {department.name}\n")
            for city in department.cities:
                out.write(f"  {format_city(city)}\n")
        out.flush()


def format_city(city: CityRecord) -> str:
    """One-line summary of a city and its ratings."""
    head = f"{city.name} ({city.code}) INSEE {city.insee_code}"
    if not city.ratings:
        return f"{head}: no ratings"
    values = ", ".join(
        f"{category.label}={value:g}" for category, value in city.ratings.items()
    )
    return f"{head}: {values}"


def create_storage(mode: str, destination: Optional[str] = None) -> RatingsStorage:
    """
    Pick the storage for a persistence mode.

    Args:
        mode: "file" or "console"
        destination: Output path, required for "file"

    Raises:
        ValueError: If the mode is unknown or "file" lacks a destination
    """
    if mode == "file":
        if not destination:
            raise ValueError("A destination is required for file persistence")
        return JSONFileStorage(destination)
    if mode == "console":
        return ConsoleStorage()
    raise ValueError(f"Unknown persistence mode: {mode}")
