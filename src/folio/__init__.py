"""Folio - page tree resolution, routing and full-page caching."""

__version__ = "0.1.0"
