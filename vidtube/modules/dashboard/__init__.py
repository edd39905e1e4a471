"""Channel dashboard."""

from .service import DashboardService

__all__ = ["DashboardService"]
