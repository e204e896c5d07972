"""
Domain models for city ratings extraction.

This module contains the core domain entities.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

# Paris and its inner suburbs
PARIS_AND_SUBURBS: Tuple[str, ...] = ("75", "92", "93", "94")


class RatingCategory(Enum):
    """Rating dimensions scored on a city page, valued by their row label."""

    ENVIRONMENT = "Environnement"
    TRANSPORTS = "Transports"
    SAFETY = "Sécurité"
    HEALTH_CARE = "Santé"
    SPORTS_AND_LEISURE = "Sports et loisirs"
    CULTURE = "Culture"
    EDUCATION = "Enseignement"
    SHOPS = "Commerces"
    QUALITY_OF_LIFE = "Qualité de vie"

    @property
    def label(self) -> str:
        """Row label of the category in the ratings table."""
        return self.value

    @property
    def key(self) -> str:
        """Serialization key of the category."""
        return self.name.lower()


@dataclass(frozen=True)
class CityRecord:
    """Domain model representing one city and its ratings."""

    code: str
    name: str
    insee_code: str
    ratings: Mapping[RatingCategory, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        ratings = dict(self.ratings)
        if ratings and set(ratings) != set(RatingCategory):
            missing = [c.key for c in RatingCategory if c not in ratings]
            raise ValueError(f"Partial ratings for city {self.code}: missing {missing}")
        # Keep enumeration order regardless of insertion order
        ordered = {c: float(ratings[c]) for c in RatingCategory if c in ratings}
        object.__setattr__(self, "ratings", MappingProxyType(ordered))

    @property
    def has_ratings(self) -> bool:
        return bool(self.ratings)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "code": self.code,
            "name": self.name,
            "insee_code": self.insee_code,
            "ratings": {
                category.key: value for category, value in self.ratings.items()
            },
        }

    def __repr__(self) -> str:
        return (
            f"CityRecord(code={self.code}, name={self.name}, "
            f"insee_code={self.insee_code}, ratings={len(self.ratings)})"
        )


@dataclass(frozen=True)
class DepartmentRecord:
    """Domain model representing a department and its cities."""

    code: str
    name: str
    cities: Tuple[CityRecord, ...] = ()

    def __post_init__(self) -> None:
        if not self.code:
            raise ValueError("Department code must not be empty")
        object.__setattr__(self, "cities", tuple(self.cities))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "code": self.code,
            "name": self.name,
            "cities": [city.to_dict() for city in self.cities],
        }


@dataclass(frozen=True)
class DepartmentListing:
    """Code, name and ordered city links read from a department page."""

    code: str
    name: str
    city_links: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"code": self.code, "name": self.name, "city_links": list(self.city_links)}


@dataclass(frozen=True)
class ExtractionFailure:
    """A structural failure recorded while traversal errors are isolated."""

    region_code: str
    url: str
    error_type: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary representation."""
        return {
            "region_code": self.region_code,
            "url": self.url,
            "error_type": self.error_type,
            "message": self.message,
        }


ResultSet = Tuple[DepartmentRecord, ...]
