"""
app/api/routers package marker.
"""

from app.api.routers.media_data import router as media_data_router

__all__ = [
    "media_data_router",
]
