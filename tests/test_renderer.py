"""
matplotlib renderer: extent math, scale line, drawing and interaction.
"""

from types import SimpleNamespace

import matplotlib.colors
import pytest
from matplotlib.backend_bases import MouseEvent

from siteview.model.models import ViewState
from siteview.mapview.composition import compose_map
from siteview.mapview.layers import INITIAL_RES, TileLayer
from siteview.mapview.projection import WebMercatorProjection
from siteview.mapview.renderer import (
    MapRenderer,
    resolution_for_zoom,
    scale_line,
    view_extent,
    zoom_for_resolution,
)

HOUSTON = ViewState(center_lon=-95.4, center_lat=29.7, zoom=10)


@pytest.fixture
def houston_map(catalog):
    return compose_map(catalog, HOUSTON)


class TestExtent:

    def test_whole_world_at_zoom_zero(self):
        xmin, ymin, xmax, ymax = view_extent(ViewState(0.0, 0.0, 0), WebMercatorProjection(), 256, 256)
        assert xmax - xmin == pytest.approx(2 * 20037508.342789244)
        assert ymax - ymin == pytest.approx(2 * 20037508.342789244)
        assert (xmin + xmax) / 2 == pytest.approx(0.0, abs=1e-6)

    def test_centered_on_view(self):
        proj = WebMercatorProjection()
        xmin, ymin, xmax, ymax = view_extent(HOUSTON, proj, 800, 600)
        c = proj.project(-95.4, 29.7)
        assert (xmin + xmax) / 2 == pytest.approx(c.x)
        assert (ymin + ymax) / 2 == pytest.approx(c.y)
        assert xmax - xmin == pytest.approx(800 * resolution_for_zoom(10))

    @pytest.mark.parametrize("zoom", [0, 3, 7, 12, 19])
    def test_zoom_resolution_inverse(self, zoom):
        assert zoom_for_resolution(resolution_for_zoom(zoom)) == zoom

    def test_resolution_at_zero(self):
        assert resolution_for_zoom(0) == INITIAL_RES


class TestScaleLine:

    def test_zoom_seven_at_equator(self):
        ground, label, width = scale_line(resolution_for_zoom(7), 0.0)
        assert label == "100 km"
        assert ground == pytest.approx(100000.0)
        assert width == 82

    def test_metres_when_zoomed_in(self):
        _, label, width = scale_line(resolution_for_zoom(18), 0.0)
        assert label.endswith(" m")
        assert width >= 64

    def test_latitude_shrinks_ground_length(self):
        g_equator, _, _ = scale_line(resolution_for_zoom(10), 0.0)
        g_north, _, _ = scale_line(resolution_for_zoom(10), 60.0)
        assert g_north < g_equator

    def test_imperial(self):
        _, label, _ = scale_line(resolution_for_zoom(7), 0.0, units="imperial")
        assert label.endswith(" mi")

    @pytest.mark.parametrize("zoom", range(0, 20))
    def test_leading_digit_and_min_width(self, zoom):
        _, label, width = scale_line(resolution_for_zoom(zoom), 29.7)
        assert width >= 64
        assert label.split()[0].lstrip("0.")[0] in "125"


class TestMapRenderer:

    def test_draws_every_marker(self, houston_map, fake_tiles):
        r = MapRenderer(houston_map, 800, 600)
        r.draw()
        assert len(r.marker_artists) == 16
        assert [a.get_text() for a in r.label_artists][0] == "2162: dbaker"

    def test_base_is_below_overlay(self, houston_map, fake_tiles):
        r = MapRenderer(houston_map, 800, 600)
        r.draw()
        assert r._base_img.get_zorder() < min(a.get_zorder() for a in r.marker_artists)

    def test_extent_matches_view(self, houston_map, fake_tiles):
        r = MapRenderer(houston_map, 800, 600)
        r.draw()
        expected = view_extent(HOUSTON, houston_map.projection, 800, 600)
        assert r.extent() == pytest.approx(expected)
        assert r.current_zoom() == 10

    def test_tiles_fetched_at_view_zoom(self, houston_map, fake_tiles):
        MapRenderer(houston_map, 800, 600).draw()
        assert len(fake_tiles) == 1
        assert fake_tiles[0][1] == 10

    def test_zoom_clamped_to_provider(self, catalog, fake_tiles):
        m = compose_map(catalog, ViewState(-95.4, 29.7, 25))
        MapRenderer(m, 400, 300).draw()
        assert fake_tiles[0][1] == TileLayer().resolve().max_zoom

    def test_marker_glyph_size(self, houston_map, fake_tiles):
        r = MapRenderer(houston_map, 800, 600, dpi=72)
        r.draw()
        glyph = r.marker_artists[0]
        assert glyph.get_markersize() == pytest.approx(14)
        assert matplotlib.colors.same_color(glyph.get_markerfacecolor(), "black")
        assert matplotlib.colors.same_color(glyph.get_markeredgecolor(), "white")

    def test_scale_line_label(self, houston_map, fake_tiles):
        r = MapRenderer(houston_map, 800, 600)
        r.draw()
        assert r.last_scale_label.endswith("km")

    def test_zoom_by_halves_extent(self, houston_map, fake_tiles):
        r = MapRenderer(houston_map, 800, 600)
        r.draw()
        xmin, ymin, xmax, ymax = r.extent()
        r.zoom_by(1)
        nxmin, nymin, nxmax, nymax = r.extent()
        assert nxmax - nxmin == pytest.approx((xmax - xmin) / 2)
        assert (nxmin + nxmax) / 2 == pytest.approx((xmin + xmax) / 2)
        assert r.current_zoom() == 11

    def test_key_zoom_reloads_tiles(self, houston_map, fake_tiles):
        r = MapRenderer(houston_map, 800, 600)
        r.draw()
        r._on_key(SimpleNamespace(key="+"), houston_map.controls[0])
        assert len(fake_tiles) == 2
        assert fake_tiles[-1][1] == 11

    def test_other_keys_ignored(self, houston_map, fake_tiles):
        r = MapRenderer(houston_map, 800, 600)
        r.draw()
        before = r.extent()
        r._on_key(SimpleNamespace(key="q"), houston_map.controls[0])
        assert r.extent() == before
        assert len(fake_tiles) == 1

    def test_scroll_waits_to_reload_when_interacting_disabled(self, catalog, fake_tiles):
        m = compose_map(catalog, HOUSTON, load_tiles_while_interacting=False)
        r = MapRenderer(m, 800, 600)
        r.draw()
        x, y = m.overlay.features()[0].point.as_tuple()
        r._on_scroll(SimpleNamespace(inaxes=r.ax, xdata=x, ydata=y, button="up"))
        assert len(fake_tiles) == 1
        assert r.current_zoom() == 11
        # the settle timer fires once scrolling stops
        r._settle._on_timer()
        assert len(fake_tiles) == 2
        assert fake_tiles[-1][1] == 11

    @pytest.mark.parametrize("interacting", [True, False])
    def test_pan_end_always_reloads(self, catalog, fake_tiles, interacting):
        m = compose_map(catalog, HOUSTON, load_tiles_while_interacting=interacting)
        r = MapRenderer(m, 800, 600)
        r.draw()
        xmin, ymin, xmax, ymax = r.extent()
        r._set_extent(xmin + 50000, ymin, xmax + 50000, ymax)
        canvas = r.fig.canvas
        canvas.callbacks.process("button_release_event",
                                 MouseEvent("button_release_event", canvas, 400, 300, button=1))
        assert len(fake_tiles) == 2
        assert fake_tiles[-1][0][0] == pytest.approx(xmin + 50000)

    def test_key_zoom_waits_when_animating_disabled(self, catalog, fake_tiles):
        m = compose_map(catalog, HOUSTON, load_tiles_while_animating=False)
        r = MapRenderer(m, 800, 600)
        r.draw()
        r._on_key(SimpleNamespace(key="+"), m.controls[0])
        assert len(fake_tiles) == 1
        assert r.current_zoom() == 11

    def test_north_indicator(self, houston_map, fake_tiles):
        r = MapRenderer(houston_map, 800, 600)
        r.draw()
        assert "N" in [t.get_text() for t in r.ax.texts]

    def test_scroll_keeps_anchor_fixed(self, houston_map, fake_tiles):
        r = MapRenderer(houston_map, 800, 600)
        r.draw()
        x, y = houston_map.overlay.features()[0].point.as_tuple()
        xmin, _, xmax, _ = r.extent()
        frac = (x - xmin) / (xmax - xmin)
        r._on_scroll(SimpleNamespace(inaxes=r.ax, xdata=x, ydata=y, button="up"))
        nxmin, _, nxmax, _ = r.extent()
        assert (x - nxmin) / (nxmax - nxmin) == pytest.approx(frac)
        assert len(fake_tiles) == 2

    def test_save(self, houston_map, fake_tiles, tmp_path):
        out = tmp_path / "map.png"
        MapRenderer(houston_map, 400, 300).save(out)
        assert out.exists() and out.stat().st_size > 0


class TestTileLayer:

    def test_url_source_passes_through(self):
        url = "https://tiles.example.com/{z}/{x}/{y}.png"
        assert TileLayer(source=url).resolve() == url

    def test_dotted_source_resolves_provider(self):
        assert TileLayer().resolve().name == "OpenStreetMap.Mapnik"

    def test_cap_zoom_keeps_image_under_max_px(self):
        layer = TileLayer(max_px=1024)
        width_m = 1_000_000.0
        z = layer.cap_zoom(0.0, 0.0, width_m, width_m, 18)
        assert z < 18
        assert width_m / resolution_for_zoom(z) <= 1024
        assert width_m / resolution_for_zoom(z + 1) > 1024

    def test_cap_zoom_leaves_small_extent_alone(self):
        assert TileLayer().cap_zoom(0.0, 0.0, 1000.0, 1000.0, 15) == 15

    def test_fetch_uses_capped_zoom(self, fake_tiles):
        _, extent, z = TileLayer(max_px=1024).fetch(0.0, 0.0, 1_000_000.0, 1_000_000.0, 18)
        assert fake_tiles[-1][1] == z
        assert 1_000_000.0 / resolution_for_zoom(z) <= 1024
        assert extent == (0.0, 1_000_000.0, 0.0, 1_000_000.0)
