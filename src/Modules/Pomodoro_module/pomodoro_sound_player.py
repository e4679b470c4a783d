"""
Qt Multimedia sound player used by the notification emitter
"""
from pathlib import Path
from loguru import logger
from PyQt6.QtCore import QUrl
from PyQt6.QtMultimedia import QMediaPlayer, QAudioOutput

from .pomodoro_notifications import SoundPlayer

_URL_SCHEMES = ('http', 'https', 'qrc', 'file')


def to_qurl(source: str) -> QUrl:
    """URLs with a known scheme as-is, everything else as a local file path"""
    url = QUrl(source)
    if url.scheme() in _URL_SCHEMES:
        return url
    return QUrl.fromLocalFile(str(Path(source).expanduser()))


class QtSoundPlayer(SoundPlayer):
    """One QMediaPlayer + QAudioOutput pair"""

    def __init__(self):
        super().__init__()
        self.media_player = QMediaPlayer()
        self.audio_output = QAudioOutput()
        self.media_player.setAudioOutput(self.audio_output)

        self.media_player.errorOccurred.connect(self._on_error)
        self.media_player.mediaStatusChanged.connect(self._on_media_status)

    def play(self, url: str, volume: float):
        source = to_qurl(url)
        if source.isLocalFile() and not Path(source.toLocalFile()).exists():
            raise FileNotFoundError(f"Sound file not found: {url}")

        self.audio_output.setVolume(volume)
        self.media_player.setSource(source)
        self.media_player.play()

    def stop(self):
        self.media_player.stop()
        self.media_player.setPosition(0)

    def dispose(self):
        self.media_player.errorOccurred.disconnect(self._on_error)
        self.media_player.mediaStatusChanged.disconnect(self._on_media_status)
        self.media_player.stop()
        self.media_player.setSource(QUrl())
        self.media_player.deleteLater()
        self.audio_output.deleteLater()

    def _on_error(self, error, error_string: str):
        if error == QMediaPlayer.Error.NoError:
            return
        self._notify_error(error_string or error.name)

    def _on_media_status(self, status):
        if status == QMediaPlayer.MediaStatus.EndOfMedia:
            logger.debug("[POMODORO] Sound finished")
            self._notify_finished()
        elif status == QMediaPlayer.MediaStatus.InvalidMedia:
            self._notify_error("Invalid media")
