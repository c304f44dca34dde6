# composition.py
from dataclasses import dataclass, field
from typing import Tuple, Union

from siteview.model.models import ViewState
from siteview.model.catalog import SiteCatalog
from .projection import Projection, default_projection
from .layers import OverlayLayer, TileLayer
from .markers import MarkerFactory, build_overlay_layer


# --- controls -----------------------------------------------------------

@dataclass(frozen=True)
class ZoomControl:
    delta: int = 1


@dataclass(frozen=True)
class RotateControl:
    pass


@dataclass(frozen=True)
class ScaleLineControl:
    units: str = "metric"
    min_width: int = 64  # px

    def __post_init__(self):
        if self.units not in ("metric", "imperial"):
            raise ValueError(f"units must be 'metric' or 'imperial': {self.units!r}")


Control = Union[ZoomControl, RotateControl, ScaleLineControl]


def default_controls(scale_units: str = "metric") -> Tuple[Control, ...]:
    return (ZoomControl(), RotateControl(), ScaleLineControl(units=scale_units))


# --- map ----------------------------------------------------------------

@dataclass(frozen=True)
class Map:
    """Everything the map engine needs to display and drive the map."""
    target: str
    layers: Tuple[TileLayer, OverlayLayer]
    view: ViewState
    controls: Tuple[Control, ...] = field(default_factory=default_controls)
    projection: Projection = field(default_factory=default_projection)
    load_tiles_while_animating: bool = True
    load_tiles_while_interacting: bool = True

    @property
    def base(self) -> TileLayer:
        return self.layers[0]

    @property
    def overlay(self) -> OverlayLayer:
        return self.layers[-1]


def compose_map(
    catalog: SiteCatalog,
    view: ViewState | None = None,
    *,
    projection: Projection | None = None,
    base: TileLayer | None = None,
    target: str = "map_canvas",
    scale_units: str = "metric",
    load_tiles_while_animating: bool = True,
    load_tiles_while_interacting: bool = True,
) -> Map:
    """catalog -> overlay -> Map, in a single pass.

    The overlay is built here and sealed; the base layer always comes first.
    """
    projection = projection or default_projection()
    overlay = build_overlay_layer(catalog, MarkerFactory(projection))
    overlay.seal()
    return Map(
        target=target,
        layers=(base or TileLayer(), overlay),
        view=view or ViewState(),
        controls=default_controls(scale_units),
        projection=projection,
        load_tiles_while_animating=load_tiles_while_animating,
        load_tiles_while_interacting=load_tiles_while_interacting,
    )
