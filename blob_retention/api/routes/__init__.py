"""API route modules."""

from blob_retention.api.routes import cleanup, health

__all__ = ["cleanup", "health"]
