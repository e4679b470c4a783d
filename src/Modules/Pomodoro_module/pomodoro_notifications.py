"""
Notification Emitter - audible cue when a timer phase ends.

Plays the sound the user picked (preference store) or the bundled
default. If the picked sound cannot be played the default is tried
once; a failing default is logged and dropped. Only one cue plays at a
time: a new one stops and rewinds the previous one first.
"""

from enum import Enum
from typing import Optional, Callable
from loguru import logger

from ...core.preferences import PreferenceStore, SELECTED_SOUND_URL
from .pomodoro_logic import PhaseCompleted


class SoundKind(Enum):
    """Why a sound is played"""
    COMPLETION = "completion"
    TEST = "test"


class SoundPlayer:
    """
    Single playback handle.

    Implementations report failures that happen after play() returned
    (decode errors, missing resources) through on_error, and the end of
    playback through on_finished.
    """

    def __init__(self):
        self.on_error: Optional[Callable[[str], None]] = None
        self.on_finished: Optional[Callable[[], None]] = None

    def play(self, url: str, volume: float):
        raise NotImplementedError

    def stop(self):
        """Stops playback and rewinds to the start"""
        raise NotImplementedError

    def dispose(self):
        """Releases the underlying resources"""

    def _notify_error(self, message: str):
        if self.on_error:
            self.on_error(message)

    def _notify_finished(self):
        if self.on_finished:
            self.on_finished()


def _default_player_factory() -> SoundPlayer:
    # QtMultimedia is only loaded when a sound is actually played
    from .pomodoro_sound_player import QtSoundPlayer
    return QtSoundPlayer()


class NotificationEmitter:
    """Plays completion and test sounds, one at a time"""

    def __init__(
        self,
        preferences: Optional[PreferenceStore],
        default_sound: str,
        player_factory: Optional[Callable[[], SoundPlayer]] = None,
        volume: float = 0.7,
    ):
        """
        Args:
            preferences: Store with the user-selected sound URL
            default_sound: Bundled fallback sound (path or URL)
            player_factory: Creates a playback handle (Qt player by default)
            volume: Playback volume 0.0 - 1.0
        """
        self.preferences = preferences
        self.default_sound = default_sound
        self.player_factory = player_factory or _default_player_factory
        self.volume = volume

        self._current: Optional[SoundPlayer] = None
        self._current_url: Optional[str] = None

    @property
    def is_playing(self) -> bool:
        return self._current is not None

    @property
    def current_url(self) -> Optional[str]:
        return self._current_url

    def resolve_sound_url(self) -> str:
        """User-selected sound URL, or the default"""
        if self.preferences is not None:
            saved = self.preferences.get(SELECTED_SOUND_URL)
            if saved:
                return saved
        return self.default_sound

    def play(self, kind: SoundKind = SoundKind.COMPLETION):
        """Plays the notification sound, never raises"""
        self.stop_all()
        url = self.resolve_sound_url()
        logger.debug(f"[POMODORO] Playing {kind.value} sound: {url}")
        self._start(url, kind)

    def on_phase_completed(self, event: PhaseCompleted):
        """Completion cue, only when sounds are enabled"""
        if event.sound_enabled:
            self.play(SoundKind.COMPLETION)

    def stop_all(self):
        """Stops and rewinds the current sound, if any"""
        player = self._current
        if player is None:
            return
        try:
            player.stop()
        except Exception as e:
            logger.warning(f"[POMODORO] Error stopping sound: {e}")
        self._release(player)

    def _start(self, url: str, kind: SoundKind):
        try:
            player = self.player_factory()
        except Exception as e:
            logger.error(f"[POMODORO] Cannot create sound player: {e}")
            return

        player.on_error = lambda message, p=player: self._on_playback_error(p, url, kind, message)
        player.on_finished = lambda p=player: self._on_playback_finished(p)
        self._current = player
        self._current_url = url

        try:
            player.play(url, self.volume)
        except Exception as e:
            self._on_playback_error(player, url, kind, str(e))

    def _on_playback_error(self, player: SoundPlayer, url: str, kind: SoundKind, message: str):
        if player is not self._current:
            # Stale handle, already replaced or stopped
            return

        logger.error(f"[POMODORO] Error playing {kind.value} sound {url}: {message}")
        self._release(player)

        if url != self.default_sound:
            logger.info(f"[POMODORO] Falling back to default sound: {self.default_sound}")
            self._start(self.default_sound, kind)
        else:
            logger.warning(f"[POMODORO] Default sound failed, {kind.value} sound dropped")

    def _on_playback_finished(self, player: SoundPlayer):
        if player is self._current:
            self._release(player)

    def _release(self, player: SoundPlayer):
        player.on_error = None
        player.on_finished = None
        if player is self._current:
            self._current = None
            self._current_url = None
        try:
            player.dispose()
        except Exception as e:
            logger.warning(f"[POMODORO] Error releasing sound player: {e}")
