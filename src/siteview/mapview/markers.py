# markers.py
import warnings
from dataclasses import dataclass, field

from siteview.model.models import Site, MarkerStyle, MarkerFeature
from siteview.model.catalog import SiteCatalog
from .projection import Projection, InvalidCoordinate, default_projection
from .layers import OverlayLayer

GLYPH_RADIUS = 7
FILL_COLOR = "black"
STROKE_COLOR = "white"
STROKE_WIDTH = 2
LABEL_OFFSET_Y = 12  # px below the glyph center


class SkippedSiteWarning(UserWarning):
    """A site could not be turned into a marker and was left out."""


class CatalogEmptyWarning(UserWarning):
    """The catalog had no sites; the overlay is empty."""


def marker_label(site: Site) -> str:
    return f"{site.id}: {site.owner}"


@dataclass(frozen=True)
class MarkerFactory:
    projection: Projection = field(default_factory=default_projection)

    def style_for(self, site: Site) -> MarkerStyle:
        return MarkerStyle(
            label_text=marker_label(site),
            glyph_radius=GLYPH_RADIUS,
            fill_color=FILL_COLOR,
            stroke_color=STROKE_COLOR,
            stroke_width=STROKE_WIDTH,
            label_offset_y=LABEL_OFFSET_Y,
        )

    def build(self, site: Site) -> MarkerFeature:
        """Site -> MarkerFeature. InvalidCoordinate propagates."""
        point = self.projection.project(site.longitude, site.latitude)
        return MarkerFeature(point=point, style=self.style_for(site), source_site_id=site.id)


def build_overlay_layer(catalog: SiteCatalog, factory: MarkerFactory | None = None) -> OverlayLayer:
    """Build one marker per site, in catalog order.

    Sites that fail to project are skipped with a SkippedSiteWarning, so one
    bad record never blanks the map.
    """
    factory = factory or MarkerFactory()
    layer = OverlayLayer()
    sites = catalog.entries()
    if not sites:
        warnings.warn("Site catalog is empty; overlay has no markers", CatalogEmptyWarning)
        return layer

    for site in sites:
        try:
            feature = factory.build(site)
        except InvalidCoordinate as e:
            warnings.warn(f"Skipping site {site.id} ({site.owner}): {e.reason}", SkippedSiteWarning)
            continue
        layer.add_feature(feature)
    return layer
