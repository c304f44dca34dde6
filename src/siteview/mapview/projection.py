# projection.py
import math
from dataclasses import dataclass
from typing import Tuple, Protocol

from pyproj import Transformer

from siteview.model.models import ProjectedPoint


# Web Mercator stops at the latitude where the square world ends
MAX_LATITUDE = 85.0511287798


class InvalidCoordinate(ValueError):
    """Longitude/latitude outside the projection's domain."""

    def __init__(self, longitude: float, latitude: float, reason: str):
        super().__init__(f"invalid coordinate (lon={longitude}, lat={latitude}): {reason}")
        self.longitude = longitude
        self.latitude = latitude
        self.reason = reason


class Projection(Protocol):
    def project(self, lon: float, lat: float) -> ProjectedPoint: ...
    def unproject(self, x: float, y: float) -> Tuple[float, float]: ...


def check_lonlat(lon: float, lat: float) -> None:
    """Raise InvalidCoordinate unless lon in [-180, 180] and lat in [-90, 90].

    Nothing is clamped.
    """
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise InvalidCoordinate(lon, lat, "not a finite number")
    if not -180.0 <= lon <= 180.0:
        raise InvalidCoordinate(lon, lat, "longitude out of [-180, 180]")
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinate(lon, lat, "latitude out of [-90, 90]")


@dataclass(frozen=True)
class WebMercatorProjection:
    """EPSG:4326 <-> EPSG:3857"""
    def __post_init__(self):
        object.__setattr__(self, "_to_merc",
            Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True))
        object.__setattr__(self, "_to_geo",
            Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True))

    def project(self, lon: float, lat: float) -> ProjectedPoint:
        try:
            lon, lat = float(lon), float(lat)
        except (TypeError, ValueError):
            raise InvalidCoordinate(lon, lat, "not a number") from None
        check_lonlat(lon, lat)
        if abs(lat) > MAX_LATITUDE:
            raise InvalidCoordinate(lon, lat, f"beyond the EPSG:3857 limit of +/-{MAX_LATITUDE}")
        x, y = self._to_merc.transform(lon, lat)
        return ProjectedPoint(x, y)

    def unproject(self, x: float, y: float) -> Tuple[float, float]:
        return self._to_geo.transform(x, y)


_DEFAULT = WebMercatorProjection()


def from_lon_lat(lon: float, lat: float) -> ProjectedPoint:
    return _DEFAULT.project(lon, lat)


def default_projection() -> WebMercatorProjection:
    return _DEFAULT
