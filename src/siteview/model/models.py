from __future__ import annotations
from dataclasses import dataclass

from matplotlib.colors import is_color_like

# matplotlib color spec ("black", "#333", (r, g, b, a) ...)
Color = str | tuple


# --- sites --------------------------------------------------------------

@dataclass(frozen=True)
class Site:
    id: int
    latitude: float
    longitude: float
    owner: str


# --- projected geometry -------------------------------------------------

@dataclass(frozen=True)
class ProjectedPoint:
    """Point in the display projection (EPSG:3857 metres)."""
    x: float
    y: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


# --- markers ------------------------------------------------------------

@dataclass(frozen=True)
class MarkerStyle:
    """Circle glyph + text label. Sizes are in display pixels."""
    label_text: str
    glyph_radius: float = 7
    fill_color: Color = "black"
    stroke_color: Color = "white"
    stroke_width: float = 2
    label_offset_y: float = 12
    label_color: Color = "#333"
    snap_to_pixel: bool = False

    def __post_init__(self):
        for name in ("fill_color", "stroke_color", "label_color"):
            if not is_color_like(getattr(self, name)):
                raise ValueError(f"{name}: not a color: {getattr(self, name)!r}")
        if self.glyph_radius <= 0:
            raise ValueError(f"glyph_radius must be positive: {self.glyph_radius}")


@dataclass(frozen=True)
class MarkerFeature:
    point: ProjectedPoint
    style: MarkerStyle
    source_site_id: int


# --- view ---------------------------------------------------------------

@dataclass(frozen=True)
class ViewState:
    """Initial camera: center in degrees, integer zoom level."""
    center_lon: float = 5.0
    center_lat: float = 0.0
    zoom: int = 7

    def __post_init__(self):
        if isinstance(self.zoom, bool) or not isinstance(self.zoom, int):
            raise TypeError(f"zoom must be an int: {self.zoom!r}")
        if self.zoom < 0:
            raise ValueError(f"zoom must be >= 0: {self.zoom}")


__all__ = [
    "Color",
    "Site",
    "ProjectedPoint",
    "MarkerStyle",
    "MarkerFeature",
    "ViewState",
]
