"""Permit source adapters.

The API depends on AbstractPermitSource only, so the JSON file backend can be
replaced (e.g., by a database) without touching the routes.
"""

from app.adapters.permit_source.base import AbstractPermitSource
from app.adapters.permit_source.in_memory import InMemoryPermitSource
from app.adapters.permit_source.json_file import JsonFilePermitSource

__all__ = ["AbstractPermitSource", "InMemoryPermitSource", "JsonFilePermitSource"]
