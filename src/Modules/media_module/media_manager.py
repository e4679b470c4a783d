"""
Media Manager - media library and the user's background / sound choice.

The selection lives in the preference store so it survives restarts;
the notification emitter reads the selected sound URL from there too.
"""

from pathlib import Path
from typing import List, Optional
from loguru import logger

from ...core.api_client import APIError
from ...core.preferences import (
    PreferenceStore,
    SELECTED_BACKGROUND,
    SELECTED_BACKGROUND_URL,
    SELECTED_SOUND,
    SELECTED_SOUND_URL,
)
from .media_api_client import MediaAPIClient
from .media_models import Media, MediaType, DEFAULT_BACKGROUNDS, DEFAULT_SOUNDS


class MediaManager:
    """
    Media library state

    Responsible for:
    - Loading backgrounds and sounds from the API
    - Falling back to the built-in media
    - Remembering and restoring the user's selection
    """

    def __init__(self, api_client: Optional[MediaAPIClient], preferences: PreferenceStore):
        self.api_client = api_client
        self.preferences = preferences

        self._backgrounds: List[Media] = []
        self._sounds: List[Media] = []

        self.selected_background: str = ""
        self.selected_background_url: str = ""
        self.selected_sound: str = ""
        self.selected_sound_url: str = ""

        self.loaded = False

    # ==================== LIBRARY ====================

    @property
    def backgrounds(self) -> List[Media]:
        return list(self._backgrounds) if self._backgrounds else list(DEFAULT_BACKGROUNDS)

    @property
    def sounds(self) -> List[Media]:
        return list(self._sounds) if self._sounds else list(DEFAULT_SOUNDS)

    def load(self) -> bool:
        """
        Loads the media library and restores the saved selection.

        Returns:
            False if the API could not be reached (built-in media are used)
        """
        success = True
        if self.api_client is not None:
            try:
                backgrounds = self.api_client.get_media(MediaType.BACKGROUND)
                sounds = self.api_client.get_media(MediaType.SOUND)
            except (APIError, KeyError, ValueError, TypeError) as e:
                logger.error(f"[MEDIA] Failed to load media: {e}")
                success = False
            else:
                self._backgrounds = backgrounds
                self._sounds = sounds
                logger.info(f"[MEDIA] Loaded {len(backgrounds)} backgrounds, {len(sounds)} sounds")

        self.loaded = True
        self.restore_preferences()
        return success

    def add_background(self, background: Media):
        self._backgrounds.append(background)

    def add_sound(self, sound: Media):
        self._sounds.append(sound)

    def upload(self, path: Path, media_type: MediaType) -> Media:
        """
        Uploads a file and adds it to the library.

        Raises:
            FileNotFoundError: the file does not exist
            APIError: on HTTP or network failure, or when offline
        """
        if self.api_client is None:
            raise APIError("Media upload needs a server connection")

        media = self.api_client.upload_media(path, media_type)
        if media_type == MediaType.BACKGROUND:
            self.add_background(media)
        else:
            self.add_sound(media)
        logger.info(f"[MEDIA] Uploaded {media.name} ({media_type.value})")
        return media

    # ==================== SELECTION ====================

    def restore_preferences(self):
        """
        Re-applies the saved selection.

        - A saved background that no longer exists is replaced with the
          first available one (and that choice is saved)
        - Without a saved background the first available one is used
        - A saved sound that no longer exists is forgotten
        """
        backgrounds = self.backgrounds
        sounds = self.sounds

        saved_background = self.preferences.get(SELECTED_BACKGROUND)
        saved_background_url = self.preferences.get(SELECTED_BACKGROUND_URL)
        if saved_background and saved_background_url and any(bg.id == saved_background for bg in backgrounds):
            self.selected_background = saved_background
            self.selected_background_url = saved_background_url
        elif backgrounds:
            fallback = backgrounds[0]
            if saved_background:
                logger.info(f"[MEDIA] Saved background {saved_background} not found, using {fallback.id}")
            self._store_background(fallback.id, fallback.url)

        saved_sound = self.preferences.get(SELECTED_SOUND)
        saved_sound_url = self.preferences.get(SELECTED_SOUND_URL)
        if saved_sound and saved_sound_url:
            if any(sound.id == saved_sound for sound in sounds):
                self.selected_sound = saved_sound
                self.selected_sound_url = saved_sound_url
            else:
                logger.info(f"[MEDIA] Saved sound {saved_sound} not found, clearing selection")
                self.preferences.remove(SELECTED_SOUND)
                self.preferences.remove(SELECTED_SOUND_URL)
                self.selected_sound = ""
                self.selected_sound_url = ""

    def select_background(self, background_id: str, background_url: str):
        self._store_background(background_id, background_url)
        logger.info(f"[MEDIA] Background changed to {background_id}")

    def select_sound(self, sound_id: str, sound_url: str):
        self.selected_sound = sound_id
        self.selected_sound_url = sound_url
        self.preferences.set(SELECTED_SOUND, sound_id)
        self.preferences.set(SELECTED_SOUND_URL, sound_url)
        logger.info(f"[MEDIA] Sound changed to {sound_id}")

    def _store_background(self, background_id: str, background_url: str):
        self.selected_background = background_id
        self.selected_background_url = background_url
        self.preferences.set(SELECTED_BACKGROUND, background_id)
        self.preferences.set(SELECTED_BACKGROUND_URL, background_url)
