"""
Core Application Module
"""
from .config import config, get_config, ensure_directories
from .preferences import PreferenceStore
from .api_client import BaseAPIClient, APIError

__all__ = [
    "config",
    "get_config",
    "ensure_directories",
    "PreferenceStore",
    "BaseAPIClient",
    "APIError",
]
