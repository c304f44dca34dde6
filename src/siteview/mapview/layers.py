# layers.py
from dataclasses import dataclass
from typing import Iterator, List, Tuple

import numpy as np
import contextily as ctx

from siteview.model.models import MarkerFeature

INITIAL_RES = 156543.03392804097  # m/px at z=0 (3857, 256px)


class OverlayLayer:
    """Append-only marker layer drawn above the base map.

    Populated once, then sealed by the map composition. There is no
    removal or update.
    """

    def __init__(self, name: str = "sites"):
        self.name = name
        self._features: List[MarkerFeature] = []
        self._sealed = False

    def add_feature(self, feature: MarkerFeature) -> None:
        if self._sealed:
            raise RuntimeError(f"overlay layer {self.name!r} is sealed")
        self._features.append(feature)

    def features(self) -> Tuple[MarkerFeature, ...]:
        return tuple(self._features)

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def __iter__(self) -> Iterator[MarkerFeature]:
        return iter(tuple(self._features))

    def __len__(self) -> int:
        return len(self._features)


@dataclass(frozen=True)
class TileLayer:
    """Tiled base map served through contextily."""
    source: str = "OpenStreetMap.Mapnik"
    name: str = "osm"
    title: str = "OpenStreetMap"
    type: str = "base"
    max_px: int = 8192

    def resolve(self):
        if self.source.startswith(("http://", "https://")):
            return self.source
        prov = ctx.providers
        for p in self.source.split("."):
            if p: prov = getattr(prov, p)
        return prov

    def clamp_zoom(self, zoom: int, provider) -> int:
        zmin = getattr(provider, "min_zoom", 0)
        zmax = getattr(provider, "max_zoom", 22)
        return int(np.clip(zoom, zmin, zmax))

    def cap_zoom(self, xmin, ymin, xmax, ymax, zoom) -> int:
        m_per_px = INITIAL_RES / (2 ** zoom)
        w_px = (xmax - xmin) / m_per_px
        while w_px > self.max_px and zoom > 0:
            zoom -= 1; m_per_px *= 2; w_px /= 2
        return zoom

    def fetch(self, xmin, ymin, xmax, ymax, zoom: int):
        """Stitched tile image for Web Mercator bounds.

        Returns (img, extent, zoom) where extent is (xmin, xmax, ymin, ymax).
        """
        provider = self.resolve()
        z = self.clamp_zoom(zoom, provider)
        z = self.cap_zoom(xmin, ymin, xmax, ymax, z)
        img, extent_wm = ctx.bounds2img(xmin, ymin, xmax, ymax, source=provider, zoom=z, ll=False)
        return img, extent_wm, z
