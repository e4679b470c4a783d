"""
Media Module - backgrounds and ambient sounds
"""

from .media_models import Media, MediaType, DEFAULT_BACKGROUNDS, DEFAULT_SOUNDS
from .media_api_client import MediaAPIClient
from .media_manager import MediaManager

__all__ = [
    'Media',
    'MediaType',
    'DEFAULT_BACKGROUNDS',
    'DEFAULT_SOUNDS',
    'MediaAPIClient',
    'MediaManager',
]
