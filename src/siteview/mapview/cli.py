# cli.py
import argparse, sys

from jsonschema import ValidationError

from siteview.model.models import ViewState
from siteview.model.catalog import sample_catalog
from siteview.model.loader import SiteLoader
from .config import MapConfig, load_json
from .projection import InvalidCoordinate
from .layers import TileLayer
from .composition import compose_map
from .renderer import MapRenderer

def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="siteview", description="Plot labeled sites over a tiled base map.")
    p.add_argument("--config")
    p.add_argument("--catalog", help="sites.json (default: built-in sample)")
    p.add_argument("--center-lon", dest="center_lon", type=float)
    p.add_argument("--center-lat", dest="center_lat", type=float)
    p.add_argument("--zoom", type=int)
    p.add_argument("--tiles")
    p.add_argument("--scale-units", dest="scale_units", choices=["metric", "imperial"])
    p.add_argument("--output", help="write an image instead of opening a window")
    p.add_argument("--print-projected", dest="print_projected", action="store_true", default=None)
    p.add_argument("--no-validate", dest="validate_schema", action="store_false", default=None)
    return p.parse_args(argv)

def build_config(args) -> MapConfig:
    cfg_dict = load_json(args.config)
    # JSON gives the defaults, the command line overrides
    for k, v in vars(args).items():
        if k == "config": continue
        if v is not None: cfg_dict[k] = v
    return MapConfig.from_dict(cfg_dict)

def print_projected(m):
    print("# site_id,longitude,latitude,x,y,label")
    for f in m.overlay:
        lon, lat = m.projection.unproject(f.point.x, f.point.y)
        print(f"{f.source_site_id},{lon:.8f},{lat:.8f},{f.point.x:.3f},{f.point.y:.3f},{f.style.label_text}")

def main(argv=None):
    args = parse_args(argv)
    try:
        cfg = build_config(args)
        if cfg.catalog:
            catalog = SiteLoader(validate_schema=cfg.validate_schema).load_catalog(cfg.catalog)
        else:
            catalog = sample_catalog()
        view = ViewState(center_lon=cfg.center_lon, center_lat=cfg.center_lat, zoom=cfg.zoom)
        m = compose_map(
            catalog, view,
            base=TileLayer(source=cfg.tiles),
            target=cfg.target,
            scale_units=cfg.scale_units,
            load_tiles_while_animating=cfg.load_tiles_while_animating,
            load_tiles_while_interacting=cfg.load_tiles_while_interacting,
        )
    except (OSError, ValueError, TypeError, ValidationError) as e:
        print(f"siteview: {e}", file=sys.stderr)
        return 2

    print(f"{len(m.overlay)}/{len(catalog)} sites on the overlay")

    if cfg.print_projected:
        print_projected(m)

    renderer = MapRenderer(m, cfg.width, cfg.height, cfg.dpi)
    try:
        if cfg.output:
            renderer.save(cfg.output)
            print(f"wrote {cfg.output}")
        else:
            renderer.show()
    except InvalidCoordinate as e:
        print(f"siteview: view center: {e}", file=sys.stderr)
        return 2
    return 0

if __name__ == "__main__":
    sys.exit(main())
