"""
Media Models - ambient sounds and workspace backgrounds
"""
from datetime import datetime
from dataclasses import dataclass
from typing import Optional, Dict, Any, List
from enum import Enum

from ...utils.time_utils import parse_datetime_field


class MediaType(Enum):
    """Media kinds served by the API"""
    BACKGROUND = "BACKGROUND"
    SOUND = "SOUND"


@dataclass
class Media:
    """Media item (background image or sound)"""
    id: str
    name: str
    url: str
    type: MediaType
    user_id: Optional[str] = None
    is_default: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Media':
        return Media(
            id=str(data['id']),
            name=data.get('name', ''),
            url=data.get('url', ''),
            type=MediaType(data.get('type', MediaType.SOUND.value)),
            user_id=data.get('userId'),
            is_default=bool(data.get('isDefault', False)),
            created_at=parse_datetime_field(data.get('createdAt')),
            updated_at=parse_datetime_field(data.get('updatedAt')),
        )


# Built-in media used while the API has nothing to offer
DEFAULT_BACKGROUNDS: List[Media] = [
    Media(
        id="default-1",
        name="Mountain Lake",
        url="/placeholder.svg?height=300&width=400",
        type=MediaType.BACKGROUND,
        is_default=True,
    ),
]

DEFAULT_SOUNDS: List[Media] = [
    Media(
        id="sound-1",
        name="Rain",
        url="/sounds/rain.mp3",
        type=MediaType.SOUND,
        is_default=True,
    ),
]
