"""
Raw health storage package.
"""

from .storage import MAX_REPORTS_PER_VIEW, HealthStorage, Panorama, View

__all__ = ["MAX_REPORTS_PER_VIEW", "HealthStorage", "Panorama", "View"]
