"""siteview - labeled site markers over a tiled base map."""

__version__ = "0.1.0"
