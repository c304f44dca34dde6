# renderer.py
import math
from typing import List, Tuple

import numpy as np
import matplotlib.pyplot as plt
from mpl_toolkits.axes_grid1.anchored_artists import AnchoredSizeBar

from siteview.model.models import ViewState
from .projection import Projection
from .layers import INITIAL_RES
from .composition import Map, ZoomControl, RotateControl, ScaleLineControl

LEADING_DIGITS = (1, 2, 5)
LABEL_FONT_PX = 10
SETTLE_MS = 300  # quiet time after a scroll or key zoom before tiles reload

# (unit suffix, metres per unit, switch to this unit at >= metres)
_SCALE_UNITS = {
    "metric": (("m", 1.0, 0.0), ("km", 1000.0, 1000.0)),
    "imperial": (("ft", 0.3048, 0.0), ("mi", 1609.344, 1609.344)),
}


def resolution_for_zoom(zoom: float) -> float:
    """Web Mercator metres per pixel at the equator."""
    return INITIAL_RES / (2 ** zoom)


def zoom_for_resolution(resolution: float) -> int:
    return max(0, int(round(np.log2(INITIAL_RES / resolution))))


def view_extent(view: ViewState, projection: Projection,
                width_px: int, height_px: int) -> Tuple[float, float, float, float]:
    """(xmin, ymin, xmax, ymax) in EPSG:3857 visible for the view."""
    c = projection.project(view.center_lon, view.center_lat)
    res = resolution_for_zoom(view.zoom)
    hw, hh = width_px * res / 2.0, height_px * res / 2.0
    return (c.x - hw, c.y - hh, c.x + hw, c.y + hh)


def scale_line(resolution: float, center_lat: float,
               units: str = "metric", min_width: int = 64) -> Tuple[float, str, int]:
    """Pick a 1/2/5 x 10^n ground length at least min_width pixels wide.

    Returns (ground length in metres, label, width in px).
    """
    ground_res = resolution * math.cos(math.radians(center_lat))  # m/px on the ground
    nominal = min_width * ground_res
    suffix, unit_m, _ = [u for u in _SCALE_UNITS[units] if nominal >= u[2]][-1]
    unit_res = ground_res / unit_m

    i = 3 * math.floor(math.log10(min_width * unit_res))
    while True:
        count = LEADING_DIGITS[i % 3] * 10.0 ** (i // 3)
        width = round(count / unit_res)
        if width >= min_width:
            break
        i += 1
    return count * unit_m, f"{count:g} {suffix}", int(width)


class MapRenderer:
    """Draws a Map with matplotlib and keeps the base tiles in sync with pan/zoom."""

    def __init__(self, map_: Map, width_px: int = 1024, height_px: int = 768, dpi: int = 100):
        self.map = map_
        self.width_px = width_px
        self.height_px = height_px
        self.dpi = dpi
        self.fig = None
        self.ax = None
        self.marker_artists: List = []
        self.label_artists: List = []
        self._base_img = None
        self._scalebar = None
        self._scale_ctrl = None
        self.last_scale_label = None
        self._settle = None

    def _px_to_pt(self, px: float) -> float:
        return px * 72.0 / self.dpi

    # --- extent helpers --------------------------------------------------

    def extent(self) -> Tuple[float, float, float, float]:
        xmin, xmax = self.ax.get_xlim()
        ymin, ymax = self.ax.get_ylim()
        return xmin, ymin, xmax, ymax

    def current_resolution(self) -> float:
        xmin, _, xmax, _ = self.extent()
        return (xmax - xmin) / self.ax.bbox.width

    def current_zoom(self) -> int:
        return zoom_for_resolution(self.current_resolution())

    def _set_extent(self, xmin, ymin, xmax, ymax):
        self.ax.set_xlim(xmin, xmax)
        self.ax.set_ylim(ymin, ymax)

    # --- drawing ----------------------------------------------------------

    def draw(self):
        fig, ax = plt.subplots(figsize=(self.width_px / self.dpi, self.height_px / self.dpi), dpi=self.dpi)
        fig.subplots_adjust(left=0, right=1, bottom=0, top=1)
        ax.set_axis_off()
        if fig.canvas.manager is not None:
            fig.canvas.manager.set_window_title(self.map.target)
        self.fig, self.ax = fig, ax

        self._set_extent(*view_extent(self.map.view, self.map.projection, self.width_px, self.height_px))
        self.refresh_base()
        self._draw_overlay()
        self._draw_controls()
        return fig, ax

    def refresh_base(self):
        """Fetch tiles for the visible extent and (re)place the base image."""
        extent = self.extent()
        img, tile_extent, _ = self.map.base.fetch(*extent, self.current_zoom())
        if self._base_img is None:
            self._base_img = self.ax.imshow(img, extent=tile_extent, origin="upper",
                                            interpolation="bilinear", zorder=0)
        else:
            self._base_img.set_data(img)
            self._base_img.set_extent(tile_extent)
        # imshow autoscales to the image; keep the view where it was
        self._set_extent(*extent)
        self.fig.canvas.draw_idle()

    def _draw_overlay(self):
        for f in self.map.overlay:
            s = f.style
            (glyph,) = self.ax.plot(
                f.point.x, f.point.y, marker="o", linestyle="none",
                markersize=self._px_to_pt(2 * s.glyph_radius),
                mfc=s.fill_color, mec=s.stroke_color,
                mew=self._px_to_pt(s.stroke_width), zorder=6,
            )
            glyph.set_snap(s.snap_to_pixel)
            label = self.ax.annotate(
                s.label_text, (f.point.x, f.point.y),
                xytext=(0, -s.label_offset_y), textcoords="offset pixels",
                ha="center", va="center", color=s.label_color,
                fontsize=self._px_to_pt(LABEL_FONT_PX), zorder=7,
                annotation_clip=True,
            )
            self.marker_artists.append(glyph)
            self.label_artists.append(label)

    def _draw_controls(self):
        canvas = self.fig.canvas
        for ctrl in self.map.controls:
            if isinstance(ctrl, ZoomControl):
                canvas.mpl_connect("key_press_event",
                                   lambda ev, c=ctrl: self._on_key(ev, c))
                canvas.mpl_connect("scroll_event", self._on_scroll)
            elif isinstance(ctrl, RotateControl):
                self._draw_north_arrow()
            elif isinstance(ctrl, ScaleLineControl):
                self._scale_ctrl = ctrl
                self.update_scale_line()
                self.ax.callbacks.connect("xlim_changed", lambda _ax: self.update_scale_line())
                self.ax.callbacks.connect("ylim_changed", lambda _ax: self.update_scale_line())
        # a finished gesture always reloads; the flags only cover each step
        canvas.mpl_connect("button_release_event", self._on_release)
        self._settle = canvas.new_timer(interval=SETTLE_MS)
        self._settle.single_shot = True
        self._settle.add_callback(self.refresh_base)

    def _draw_north_arrow(self):
        self.ax.annotate(
            "N", xy=(0.96, 0.95), xytext=(0.96, 0.87),
            xycoords="axes fraction", textcoords="axes fraction",
            ha="center", va="center", fontsize=10, zorder=8,
            arrowprops=dict(arrowstyle="-|>", fc="black", ec="black"),
            bbox=dict(boxstyle="circle,pad=0.2", fc="white", ec="gray", alpha=0.85),
        )

    def update_scale_line(self):
        if self._scale_ctrl is None:
            return
        _, ymin, _, ymax = self.extent()
        _, center_lat = self.map.projection.unproject(0.0, (ymin + ymax) / 2.0)
        ground_m, label, _ = scale_line(self.current_resolution(), center_lat,
                                        self._scale_ctrl.units, self._scale_ctrl.min_width)
        if self._scalebar is not None:
            self._scalebar.remove()
        # bar length in projected metres
        length = ground_m / math.cos(math.radians(center_lat))
        self._scalebar = AnchoredSizeBar(self.ax.transData, length, label, loc="lower left",
                                         pad=0.4, borderpad=0.8, sep=4, frameon=True,
                                         size_vertical=0)
        self._scalebar.patch.set_alpha(0.8)
        self.ax.add_artist(self._scalebar)
        self.last_scale_label = label

    # --- interaction ------------------------------------------------------

    def zoom_by(self, delta: int, anchor: Tuple[float, float] | None = None):
        """Zoom delta levels about anchor (default: view center)."""
        xmin, ymin, xmax, ymax = self.extent()
        ax_, ay_ = anchor if anchor is not None else ((xmin + xmax) / 2.0, (ymin + ymax) / 2.0)
        f = 2.0 ** -delta
        self._set_extent(ax_ + (xmin - ax_) * f, ay_ + (ymin - ay_) * f,
                         ax_ + (xmax - ax_) * f, ay_ + (ymax - ay_) * f)

    def _on_key(self, event, ctrl: ZoomControl):
        if event.key in ("+", "="):
            self.zoom_by(ctrl.delta)
        elif event.key == "-":
            self.zoom_by(-ctrl.delta)
        else:
            return
        self._after_step(self.map.load_tiles_while_animating)

    def _on_scroll(self, event):
        if event.inaxes is not self.ax or event.xdata is None:
            return
        self.zoom_by(1 if event.button == "up" else -1, (event.xdata, event.ydata))
        self._after_step(self.map.load_tiles_while_interacting)

    def _after_step(self, load_now: bool):
        if load_now:
            self.refresh_base()
            return
        # reload once the zooming settles
        self._settle.stop()
        self._settle.start()
        self.fig.canvas.draw_idle()

    def _on_release(self, event):
        if event.inaxes is self.ax:
            self.refresh_base()

    # --- output -----------------------------------------------------------

    def show(self):
        if self.fig is None:
            self.draw()
        plt.show()

    def save(self, path):
        if self.fig is None:
            self.draw()
        self.fig.savefig(path, dpi=self.dpi)
