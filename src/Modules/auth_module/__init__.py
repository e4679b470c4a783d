"""
Auth Module - login, registration and the current user
"""

from .auth_models import User
from .auth_api_client import AuthAPIClient

__all__ = [
    'User',
    'AuthAPIClient',
]
