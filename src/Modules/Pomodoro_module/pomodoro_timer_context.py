"""
Timer Context - the timer object handed to the UI
=================================================
Owns the Pomodoro state machine and the 1 s QTimer that drives it, and
publishes phase completions to the session coordinator and the
notification emitter, which subscribe independently.

One context per application session: created with default (or saved)
settings, released with close() or by leaving a `with` block. Closing
stops the tick timer, stops any playing sound and shuts the coordinator
down.
"""

from typing import Optional
from loguru import logger
from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ...core.config import config
from ...core.preferences import PreferenceStore
from .pomodoro_api_client import PomodoroAPIClient
from .pomodoro_logic import (
    PomodoroTimer,
    TimerSettings,
    TimerState,
    PhaseCompleted,
    SessionRef,
    InvalidSettingsError,
)
from .pomodoro_notifications import NotificationEmitter, SoundKind
from .pomodoro_session_coordinator import SessionCoordinator


class TimerContext(QObject):
    """
    Pomodoro timer exposed to the UI.

    Signals:
        state_changed: (TimerState) after every change of the timer state
        phase_completed: (PhaseCompleted) once per phase expiry
        settings_rejected: (message) a settings update was invalid
        session_failed: (message) the server session could not be opened
    """

    state_changed = pyqtSignal(object)
    phase_completed = pyqtSignal(object)
    settings_rejected = pyqtSignal(str)
    session_failed = pyqtSignal(str)

    def __init__(
        self,
        coordinator: Optional[SessionCoordinator] = None,
        notifier: Optional[NotificationEmitter] = None,
        settings: Optional[TimerSettings] = None,
        tick_interval_ms: int = 1000,
        parent: Optional[QObject] = None,
    ):
        """
        Args:
            coordinator: Session coordinator (no server mirroring when None)
            notifier: Notification emitter (silent when None)
            settings: Initial settings (defaults when None)
            tick_interval_ms: Tick period, one second in production
            parent: Qt parent
        """
        super().__init__(parent)
        self._timer = PomodoroTimer(settings)
        self._coordinator = coordinator
        self._notifier = notifier
        self._closed = False

        self._ticker = QTimer(self)
        self._ticker.setInterval(tick_interval_ms)
        self._ticker.timeout.connect(self._on_timer_tick)

        if coordinator is not None:
            coordinator.session_opened.connect(self._on_session_opened)
            coordinator.session_failed.connect(self.session_failed)
            self.phase_completed.connect(coordinator.on_phase_completed)
        if notifier is not None:
            self.phase_completed.connect(notifier.on_phase_completed)

        logger.info("[POMODORO] Timer context initialized")

    # ==================== READ ACCESS ====================

    @property
    def state(self) -> TimerState:
        return self._timer.state

    @property
    def settings(self) -> TimerSettings:
        return self._timer.settings

    @property
    def session_count(self) -> int:
        return self._timer.session_count

    @property
    def is_ticking(self) -> bool:
        return self._ticker.isActive()

    @property
    def closed(self) -> bool:
        return self._closed

    # ==================== CONTROL ====================

    def start(self, task_id: Optional[str] = None):
        """Starts or resumes the countdown (never waits for the server)"""
        if self._closed:
            logger.warning("[POMODORO] start() on a closed timer context")
            return

        request = self._timer.start(task_id)
        if request is not None:
            if self._coordinator is not None:
                self._coordinator.request_open(request)
            else:
                self._timer.attach_session(None, request.epoch)

        logger.debug(f"[POMODORO] Timer started ({self._timer.state.phase.value})")
        self._sync_ticker(restart=True)
        self._emit_state()

    def pause(self):
        if self._closed:
            return
        self._timer.pause()
        self._sync_ticker()
        self._emit_state()

    def reset(self):
        if self._closed:
            return
        self._timer.reset()
        self._sync_ticker()
        self._emit_state()

    def skip(self):
        """Ends the current phase; completion runs on the next event-loop turn"""
        if self._closed:
            return
        self._timer.skip()
        self._sync_ticker()
        self._emit_state()
        QTimer.singleShot(0, self._evaluate)

    def update_settings(self, **patch) -> bool:
        """
        Applies a partial settings update.

        Returns:
            False if the update was rejected (nothing changed)
        """
        if self._closed:
            return False
        try:
            self._timer.update_settings(**patch)
        except InvalidSettingsError as e:
            logger.warning(f"[POMODORO] Settings rejected: {e}")
            self.settings_rejected.emit(str(e))
            return False

        logger.debug(f"[POMODORO] Settings updated: {patch}")
        self._sync_ticker()
        self._emit_state()
        return True

    def play_test_sound(self):
        if self._notifier is not None:
            self._notifier.play(SoundKind.TEST)

    def stop_all_audio(self):
        if self._notifier is not None:
            self._notifier.stop_all()

    # ==================== TICKING ====================

    def _on_timer_tick(self):
        """Countdown tick"""
        if self._timer.tick():
            state = self._timer.state
            if state.time_left % 60 == 0:
                logger.debug(f"[POMODORO] Timer: {state.time_left // 60:02d}:00 remaining")
            self._emit_state()
        self._evaluate()

    def _evaluate(self):
        """Runs phase completion if the current phase expired"""
        if self._closed:
            return

        event = self._timer.process_expiry()
        if event is None:
            self._sync_ticker()
            return

        logger.info(
            f"[POMODORO] {event.completed_phase.value} completed → {event.next_phase.value} "
            f"(sessions: {event.session_count})"
        )
        if event.session_request is not None and self._coordinator is None:
            self._timer.attach_session(None, event.session_request.epoch)
        self.phase_completed.emit(event)
        self._sync_ticker(restart=True)
        self._emit_state()

    def _sync_ticker(self, restart: bool = False):
        """Runs the QTimer only while the countdown can progress"""
        state = self._timer.state
        should_run = state.is_running and state.time_left > 0
        if not should_run:
            if self._ticker.isActive():
                self._ticker.stop()
        elif restart or not self._ticker.isActive():
            # start() on an active QTimer restarts it
            self._ticker.start()

    def _emit_state(self):
        self.state_changed.emit(self._timer.state)

    # ==================== SESSIONS ====================

    def _on_session_opened(self, ref: Optional[SessionRef], epoch: int):
        if self._closed:
            if ref is not None:
                logger.warning(f"[POMODORO] Session {ref.id} opened after close, left open")
            return

        late = self._timer.attach_session(ref, epoch)
        if late is not None and self._coordinator is not None:
            logger.info(f"[POMODORO] Session {late.id} opened after its work phase, completing it")
            self._coordinator.request_close(late)
        self._emit_state()

    # ==================== LIFECYCLE ====================

    def close(self):
        """Stops ticking, stops audio and shuts the coordinator down"""
        if self._closed:
            return
        self._closed = True
        self._ticker.stop()

        if self._notifier is not None:
            self._notifier.stop_all()
        if self._coordinator is not None:
            self._coordinator.shutdown()

        logger.info("[POMODORO] Timer context closed")

    def __enter__(self) -> 'TimerContext':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def build_timer_context(
    preferences: Optional[PreferenceStore] = None,
    api_client: Optional[PomodoroAPIClient] = None,
    settings: Optional[TimerSettings] = None,
    parent: Optional[QObject] = None,
) -> TimerContext:
    """
    Creates a TimerContext wired with the configured defaults.

    Args:
        preferences: Preference store (selected sound, auth token)
        api_client: Pomodoro API client (no server mirroring when None)
        settings: Initial timer settings
        parent: Qt parent
    """
    coordinator = SessionCoordinator(api_client) if api_client is not None else None
    notifier = NotificationEmitter(
        preferences,
        default_sound=config.DEFAULT_SOUND,
        volume=config.SOUND_VOLUME,
    )
    return TimerContext(
        coordinator=coordinator,
        notifier=notifier,
        settings=settings,
        tick_interval_ms=config.TICK_INTERVAL_MS,
        parent=parent,
    )
