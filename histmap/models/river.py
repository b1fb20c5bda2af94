"""River polyline model."""

from pydantic import BaseModel, ConfigDict, Field


class River(BaseModel):
    """A river drawn as a polyline.

    ``width`` is a thickness tier in ``[1, 10]`` (10 the widest), mapped to
    device pixels by the renderer. It is only an approximation of how wide
    the river is.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Optional river name")
    width: int = Field(..., ge=1, le=10, description="Stroke thickness tier")
    points: tuple[tuple[float, float], ...] = Field(
        ...,
        min_length=2,
        description="Ordered (lon, lat) vertices",
    )

    @classmethod
    def from_flat(cls, width: int, coordinates: list[float], name: str = "") -> "River":
        """Build from a flat ``[lon0, lat0, lon1, lat1, ...]`` list.

        Raises:
            ValueError: If the list has an odd number of values.
        """
        if len(coordinates) % 2 != 0:
            raise ValueError("Flat coordinate list must have an even length")
        points = tuple(zip(coordinates[0::2], coordinates[1::2]))
        return cls(name=name, width=width, points=points)
