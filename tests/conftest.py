"""
Shared fixtures: headless matplotlib and an offline tile source.
"""

import json

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from siteview.model.models import Site
from siteview.model.catalog import SiteCatalog, sample_catalog


@pytest.fixture
def catalog():
    return sample_catalog()


@pytest.fixture
def site_2162():
    return Site(id=2162, latitude=29.1551612249733, longitude=-95.0173217092621, owner="dbaker")


@pytest.fixture
def catalog_with_bad_site(site_2162):
    return SiteCatalog([
        site_2162,
        Site(id=9001, latitude=200.0, longitude=-95.0, owner="nobody"),
        Site(id=2512, latitude=29.7332515409173, longitude=-95.4344386600494, owner="jsulak"),
    ])


@pytest.fixture
def fake_tiles(monkeypatch):
    """Replace contextily.bounds2img; records each requested (bounds, zoom)."""
    calls = []

    def _bounds2img(w, s, e, n, zoom="auto", source=None, ll=False, **kwargs):
        calls.append(((w, s, e, n), zoom))
        return np.zeros((256, 256, 3), dtype=np.uint8), (w, e, s, n)

    monkeypatch.setattr("contextily.bounds2img", _bounds2img)
    return calls


@pytest.fixture
def write_json(tmp_path):
    def _write(name, data):
        p = tmp_path / name
        p.write_text(json.dumps(data), encoding="utf-8")
        return p
    return _write


@pytest.fixture(autouse=True)
def close_figures():
    yield
    import matplotlib.pyplot as plt
    plt.close("all")
