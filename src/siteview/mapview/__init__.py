from .projection import InvalidCoordinate, WebMercatorProjection, from_lon_lat
from .markers import MarkerFactory, build_overlay_layer, SkippedSiteWarning, CatalogEmptyWarning
from .layers import OverlayLayer, TileLayer
from .composition import Map, compose_map, ZoomControl, RotateControl, ScaleLineControl

__all__ = [
    "InvalidCoordinate",
    "WebMercatorProjection",
    "from_lon_lat",
    "MarkerFactory",
    "build_overlay_layer",
    "SkippedSiteWarning",
    "CatalogEmptyWarning",
    "OverlayLayer",
    "TileLayer",
    "Map",
    "compose_map",
    "ZoomControl",
    "RotateControl",
    "ScaleLineControl",
]
