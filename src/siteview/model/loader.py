from __future__ import annotations
import pathlib, json
from typing import Any, List

from jsonschema import validate

from .models import Site
from .catalog import SiteCatalog


class SiteLoader:
    """Loads a site catalog from JSON."""

    def __init__(self, validate_schema: bool = True, schema_dir: str | pathlib.Path | None = None):
        self.validate_schema = validate_schema
        # default: the schemas directory shipped with the package
        if schema_dir is None:
            self.schema_dir = pathlib.Path(__file__).parent.parent / "schemas"
        else:
            self.schema_dir = pathlib.Path(schema_dir)

    def _load_json(self, path: str | pathlib.Path) -> Any:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _validate(self, instance: Any, schema_name: str) -> None:
        if self.validate_schema:
            schema = self._load_json(self.schema_dir / schema_name)
            validate(instance=instance, schema=schema)

    # --- public API ---------------------------------------------------

    def load_sites(self, path: str | pathlib.Path) -> List[Site]:
        """sites.json -> list of Site, in file order"""
        data = self._load_json(path)
        self._validate(data, "site_catalog.schema.json")
        return [
            Site(
                id=int(item["id"]),
                latitude=float(item["latitude"]),
                longitude=float(item["longitude"]),
                owner=str(item["owner"]),
            )
            for item in data["sites"]
        ]

    def load_catalog(self, path: str | pathlib.Path) -> SiteCatalog:
        return SiteCatalog(self.load_sites(path))
