"""
API Client for media (backgrounds and ambient sounds)
"""

from pathlib import Path
from typing import List, Any
from loguru import logger

from ...core.api_client import BaseAPIClient, APIError
from .media_models import Media, MediaType


class MediaAPIClient(BaseAPIClient):
    """API client for the media library"""

    def get_media(self, media_type: MediaType) -> List[Media]:
        """
        Media of one type available to the current user.

        Records that cannot be parsed (no id, unknown type) are skipped.

        Raises:
            APIError: on HTTP or network failure
        """
        params = {'type': media_type.value, 'userId': self.get_user_id()}
        data = self._get('/api/media', params=params)

        if isinstance(data, dict):
            data = data.get('media') or data.get('data')
        if not isinstance(data, list):
            logger.warning(f"[MEDIA] Unexpected media payload for {media_type.value}")
            return []

        media = []
        for item in data:
            try:
                media.append(Media.from_dict(item))
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.warning(f"[MEDIA] Skipping invalid media record {item!r}: {e}")
        return media

    def upload_media(self, path: Path, media_type: MediaType) -> Media:
        """
        Uploads a background image or sound file.

        Args:
            path: Local file to upload
            media_type: BACKGROUND or SOUND

        Raises:
            FileNotFoundError: the file does not exist
            APIError: on HTTP or network failure or an unexpected response
        """
        path = Path(path)
        params = {'type': media_type.value, 'userId': self.get_user_id()}
        logger.debug(f"[MEDIA] Uploading {path.name} as {media_type.value}")

        with open(path, 'rb') as f:
            data = self._post('/api/media/upload', params=params, files={'file': (path.name, f)})

        return self._parse_media(data)

    def _parse_media(self, data: Any) -> Media:
        if isinstance(data, dict):
            for key in ('media', 'data'):
                if isinstance(data.get(key), dict):
                    data = data[key]
                    break
        try:
            return Media.from_dict(data)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise APIError(f"Unexpected media payload: {data!r}") from e
