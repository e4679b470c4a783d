"""
Auth Models - user account as returned by the API
"""
from datetime import datetime
from dataclasses import dataclass
from typing import Optional, Dict, Any

from ...utils.time_utils import parse_datetime_field


@dataclass
class User:
    """User account"""
    id: str
    email: str
    name: str = ""
    username: str = ""
    avatar: Optional[str] = None
    bio: Optional[str] = None
    theme: str = "light"
    sound_enabled: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'User':
        return User(
            id=str(data['id']),
            email=data.get('email', ''),
            name=data.get('name') or '',
            username=data.get('username') or '',
            avatar=data.get('avatar'),
            bio=data.get('bio'),
            theme=data.get('theme') or 'light',
            sound_enabled=bool(data.get('soundEnabled', True)),
            created_at=parse_datetime_field(data.get('createdAt')),
            updated_at=parse_datetime_field(data.get('updatedAt')),
        )
