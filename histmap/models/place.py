"""Place model for point features on the historical map."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PlaceKind(str, Enum):
    """Administrative rank of a place, largest first."""

    CAPITAL = "capital"
    PROVINCE = "province"
    PREFECTURE = "prefecture"
    COUNTY = "county"
    TOWN = "town"


class Place(BaseModel):
    """A named point shown with a marker glyph and a text label."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Display name")
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lon: float = Field(..., ge=-180, le=180, description="Longitude")
    kind: PlaceKind = Field(default=PlaceKind.PREFECTURE, description="Rank, selects glyph and text size")
