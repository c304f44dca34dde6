from __future__ import annotations
from typing import Iterable, Iterator, Tuple

from .models import Site


class SiteCatalog:
    """Read-only, ordered collection of sites.

    Iteration order is definition order. Ids are not deduplicated.
    """

    def __init__(self, sites: Iterable[Site] = ()):
        self._sites: Tuple[Site, ...] = tuple(sites)

    def entries(self) -> Tuple[Site, ...]:
        return self._sites

    def __iter__(self) -> Iterator[Site]:
        return iter(self._sites)

    def __len__(self) -> int:
        return len(self._sites)

    def __repr__(self) -> str:
        return f"SiteCatalog({len(self._sites)} sites)"


# id: (lat, lon, owner)
SAMPLE_SITES = {
    2162: (29.1551612249733, -95.0173217092621, "dbaker"),
    2512: (29.7332515409173, -95.4344386600494, "jsulak"),
    4205: (29.7559384696116, -95.411956555603, "dbaker"),
    5993: (29.7330970688128, -95.4345774650574, "karl"),
    7151: (29.781319294809, -95.6388580799103, "karl"),
    7187: (30.3556307545623, -95.2642798423767, "karl"),
    13370: (29.7511111445497, -95.3980131778717, "nugget"),
    14213: (29.8061814357023, -95.5617366763347, "cbw"),
    14408: (29.7330379101277, -95.4344265460967, "dbaker"),
    20170: (29.7502326, -95.382848, "ericcarlson"),
    24294: (29.702, -95.526, "lkowolowksi"),
    25611: (29.733032, -95.4344, "ericcarlson"),
    27732: (29.7331515041002, -95.4346116428375, "lkowolowksi"),
    27840: (29.7534129680077, -95.6198360919952, "michael179"),
    28243: (29.733032, -95.4344, "ericcarlson"),
    30139: (28.805038, -95.658935, "ashleyguinard"),
}


def sample_catalog() -> SiteCatalog:
    return SiteCatalog(
        Site(id=sid, latitude=lat, longitude=lon, owner=owner)
        for sid, (lat, lon, owner) in SAMPLE_SITES.items()
    )
