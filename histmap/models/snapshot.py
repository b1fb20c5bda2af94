"""Time-indexed snapshot of places and rivers."""

import datetime
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .place import Place
from .river import River

_DATE_PATTERN = re.compile(r"^(-?\d{1,5})(?:-(\d{1,2})(?:-(\d{1,2}))?)?$")


@dataclass(frozen=True, order=True)
class HistoricalDate:
    """A proleptic calendar date that also covers years before the common era.

    Negative years are BCE (astronomical numbering is not applied: ``-221``
    means 221 BCE). Ordering follows ``(year, month, day)``.
    """

    year: int
    month: int = 1
    day: int = 1

    def __post_init__(self):
        if self.year == 0:
            raise ValueError("There is no year 0")
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")
        if not 1 <= self.day <= 31:
            raise ValueError(f"Day out of range: {self.day}")

    @classmethod
    def parse(cls, value: Any) -> "HistoricalDate":
        """Parse ``"YYYY-MM-DD"``, ``"-YYYY"``, a bare year, a mapping or a ``datetime.date``.

        YAML loads unquoted ISO dates as ``datetime.date``, so those are
        accepted as well.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, datetime.date):
            return cls(value.year, value.month, value.day)
        if isinstance(value, bool):
            raise ValueError(f"Not a date: {value!r}")
        if isinstance(value, int):
            return cls(year=value)
        if isinstance(value, dict):
            return cls(**value)
        if isinstance(value, str):
            match = _DATE_PATTERN.match(value.strip())
            if match is None:
                raise ValueError(f"Not a date: {value!r}")
            year, month, day = match.groups()
            return cls(int(year), int(month or 1), int(day or 1))
        raise ValueError(f"Not a date: {value!r}")

    @property
    def era_label(self) -> str:
        return "BCE" if self.year < 0 else "CE"

    def __str__(self) -> str:
        sign = "-" if self.year < 0 else ""
        return f"{sign}{abs(self.year):04d}-{self.month:02d}-{self.day:02d}"


class Snapshot(BaseModel):
    """Places and rivers valid for one historical date.

    ``places`` is a read-only mapping keyed by display name. Its insertion
    order is the drawing priority: earlier places win contested label space.
    """

    model_config = ConfigDict(frozen=True)

    date: HistoricalDate
    title: Optional[str] = Field(default=None, description="Display title, e.g. the period name")
    places: Mapping[str, Place] = Field(default_factory=dict, validate_default=True)
    rivers: tuple[River, ...] = Field(default_factory=tuple)

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> HistoricalDate:
        return HistoricalDate.parse(value)

    @field_validator("places", mode="before")
    @classmethod
    def _index_places(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return value
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"places must be a list or a mapping, got {type(value).__name__}")
        indexed: dict[str, Any] = {}
        for item in value:
            if isinstance(item, Place):
                name = item.name
            elif isinstance(item, dict):
                name = item.get("name")
            else:
                raise ValueError(f"Place entries must be mappings, got {item!r}")
            if name in indexed:
                raise ValueError(f"Duplicate place name in snapshot: {name}")
            indexed[name] = item
        return indexed

    @field_validator("places")
    @classmethod
    def _freeze_places(cls, value: Mapping[str, Place]) -> Mapping[str, Place]:
        return MappingProxyType(dict(value))

    @model_validator(mode="after")
    def _check_keys(self) -> "Snapshot":
        for key, place in self.places.items():
            if key != place.name:
                raise ValueError(f"Place keyed as {key!r} is named {place.name!r}")
        return self

    @property
    def place_list(self) -> list[Place]:
        """Places in drawing-priority order."""
        return list(self.places.values())
