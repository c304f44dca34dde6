# config.py
from dataclasses import dataclass, fields
from pathlib import Path
import json

@dataclass
class MapConfig:
    target: str = "map_canvas"
    catalog: str | None = None  # sites.json; None -> built-in sample
    center_lon: float = 5.0
    center_lat: float = 0.0
    zoom: int = 7
    tiles: str = "OpenStreetMap.Mapnik"
    scale_units: str = "metric"
    width: int = 1024
    height: int = 768
    dpi: int = 100
    output: str | None = None
    print_projected: bool = False
    validate_schema: bool = True
    load_tiles_while_animating: bool = True
    load_tiles_while_interacting: bool = True

    @classmethod
    def from_dict(cls, d: dict) -> "MapConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**d)

def load_json(path: str | None) -> dict:
    if not path: return {}
    p = Path(path)
    if not p.exists(): raise FileNotFoundError(path)
    with p.open("r", encoding="utf-8") as f: return json.load(f)
