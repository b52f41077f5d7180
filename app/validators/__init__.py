"""
app/validators package marker.
"""

from app.validators.media_data_validator import MediaDataValidator, get_media_data_validator

__all__ = [
    "MediaDataValidator",
    "get_media_data_validator",
]
