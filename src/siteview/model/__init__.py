from .models import Site, ProjectedPoint, MarkerStyle, MarkerFeature, ViewState
from .catalog import SiteCatalog, SAMPLE_SITES, sample_catalog
from .loader import SiteLoader

__all__ = [
    "Site",
    "ProjectedPoint",
    "MarkerStyle",
    "MarkerFeature",
    "ViewState",
    "SiteCatalog",
    "SAMPLE_SITES",
    "sample_catalog",
    "SiteLoader",
]
