"""
Pomodoro Logic - countdown state machine for the Pomodoro cycle
===============================================================
Keeps the timer state (phase, time left, running flag, linked server
session) and performs phase transitions.

Main responsibilities:
- Countdown ticks (one second per tick)
- Phase cycle (work → short_break → work → ... → long_break)
- Auto-start rules for breaks and work phases
- Settings validation and application
- Producing "phase completed" events for the side-effecting listeners

Pure Python, no Qt and no network: the timer context drives it and the
session coordinator / notification emitter react to its events.
"""

from enum import Enum
from typing import Optional
from dataclasses import dataclass, fields, replace


class TimerPhase(Enum):
    """Timer phases"""
    WORK = "work"
    SHORT_BREAK = "break"
    LONG_BREAK = "longBreak"

    @property
    def is_break(self) -> bool:
        return self is not TimerPhase.WORK


class InvalidSettingsError(ValueError):
    """Raised when a settings update would produce an unusable configuration"""


_DURATION_FIELDS = ('work_duration', 'short_break_duration', 'long_break_duration')
_FLAG_FIELDS = ('auto_start_breaks', 'auto_start_pomodoros', 'sound_enabled', 'notifications_enabled')


@dataclass(frozen=True)
class TimerSettings:
    """Timer settings (durations in SECONDS)"""
    work_duration: int = 25 * 60
    short_break_duration: int = 5 * 60
    long_break_duration: int = 15 * 60
    sessions_until_long_break: int = 4
    auto_start_breaks: bool = False
    auto_start_pomodoros: bool = False
    sound_enabled: bool = True
    notifications_enabled: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self):
        """
        Check every field.

        Raises:
            InvalidSettingsError: on a non-integer or non-positive duration,
                sessions_until_long_break < 1 or a non-bool flag
        """
        for name in _DURATION_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidSettingsError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidSettingsError(f"{name} must be positive, got {value}")

        count = self.sessions_until_long_break
        if isinstance(count, bool) or not isinstance(count, int):
            raise InvalidSettingsError(f"sessions_until_long_break must be an integer, got {count!r}")
        if count < 1:
            raise InvalidSettingsError(f"sessions_until_long_break must be at least 1, got {count}")

        for name in _FLAG_FIELDS:
            if not isinstance(getattr(self, name), bool):
                raise InvalidSettingsError(f"{name} must be a bool, got {getattr(self, name)!r}")

    def get_duration(self, phase: TimerPhase) -> int:
        """Returns the configured duration of a phase (seconds)"""
        if phase == TimerPhase.SHORT_BREAK:
            return self.short_break_duration
        if phase == TimerPhase.LONG_BREAK:
            return self.long_break_duration
        return self.work_duration

    def merged(self, **patch) -> 'TimerSettings':
        """
        Returns a copy with the patch applied.

        Raises:
            InvalidSettingsError: on unknown keys or invalid values
        """
        known = {f.name for f in fields(self)}
        unknown = set(patch) - known
        if unknown:
            raise InvalidSettingsError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return replace(self, **patch)


@dataclass(frozen=True)
class SessionRef:
    """Server-side session record linked to the current work phase"""
    id: str
    task_id: Optional[str] = None


@dataclass(frozen=True)
class SessionRequest:
    """Request to open a server session, returned by PomodoroTimer.start()"""
    duration_minutes: int
    task_id: Optional[str] = None
    epoch: int = 0


@dataclass(frozen=True)
class PhaseCompleted:
    """Event produced once per phase expiry"""
    completed_phase: TimerPhase
    next_phase: TimerPhase
    session_count: int
    closed_session: Optional[SessionRef] = None
    session_request: Optional[SessionRequest] = None
    sound_enabled: bool = True


@dataclass
class TimerState:
    """
    Current timer state.

    Invariant: 0 <= time_left <= total_time and total_time > 0.
    """
    is_running: bool = False
    time_left: int = 25 * 60
    total_time: int = 25 * 60
    phase: TimerPhase = TimerPhase.WORK
    active_session: Optional[SessionRef] = None

    @property
    def progress(self) -> float:
        """Elapsed fraction of the current phase (0.0 - 1.0)"""
        if self.total_time <= 0:
            return 0.0
        return (self.total_time - self.time_left) / self.total_time


def normalize_task_id(task_id: Optional[str]) -> Optional[str]:
    """Blank ids and the picker's "none" entry mean "no task" """
    if task_id is None:
        return None
    task_id = str(task_id).strip()
    if not task_id or task_id == "none":
        return None
    return task_id


class PomodoroTimer:
    """
    Pomodoro countdown state machine

    Responsible for:
    - Owning and mutating TimerState
    - Ticking and phase transitions
    - Counting completed work phases (long break trigger)
    - Deciding when a server session has to be opened

    It never performs I/O. start() hands out a SessionRequest and
    process_expiry() a PhaseCompleted event; the caller dispatches them.
    """

    def __init__(self, settings: Optional[TimerSettings] = None):
        """
        Args:
            settings: Timer settings (defaults when None)
        """
        self._settings = settings or TimerSettings()
        duration = self._settings.work_duration
        self._state = TimerState(time_left=duration, total_time=duration)

        # Completed work phases since process start
        self.session_count = 0

        # Bumped on every phase transition, ties open requests to their work phase
        self._epoch = 0
        self._session_pending = False

        # Task of the last started work phase, reused by auto-started ones
        self._task_id: Optional[str] = None

    # ==================== READ ACCESS ====================

    @property
    def state(self) -> TimerState:
        """Snapshot of the current state"""
        return replace(self._state)

    @property
    def settings(self) -> TimerSettings:
        return self._settings

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def session_pending(self) -> bool:
        return self._session_pending

    # ==================== CONTROL ====================

    def start(self, task_id: Optional[str] = None) -> Optional[SessionRequest]:
        """
        Starts (or resumes) the countdown.

        Args:
            task_id: Task to link the work session with (optional)

        Returns:
            SessionRequest when a server session should be opened, else None
        """
        request = None
        if (self._state.phase == TimerPhase.WORK
                and self._state.active_session is None
                and not self._session_pending):
            self._task_id = normalize_task_id(task_id)
            request = self._request_session()

        self._state.is_running = True
        return request

    def pause(self):
        """Stops ticking, time left is kept"""
        self._state.is_running = False

    def reset(self):
        """Restores the full duration of the current phase and stops the timer"""
        duration = self._settings.get_duration(self._state.phase)
        self._state.time_left = duration
        self._state.total_time = duration
        self._state.is_running = False

    def skip(self):
        """Forces completion of the current phase on the next evaluation"""
        self._state.time_left = 0

    def tick(self) -> bool:
        """
        One periodic callback.

        Returns:
            True if time_left was decremented
        """
        if not self._state.is_running or self._state.time_left <= 0:
            return False
        self._state.time_left -= 1
        return True

    # ==================== SESSIONS ====================

    def _request_session(self) -> SessionRequest:
        self._session_pending = True
        return SessionRequest(
            duration_minutes=self._state.total_time // 60,
            task_id=self._task_id,
            epoch=self._epoch,
        )

    def attach_session(self, ref: Optional[SessionRef], epoch: int) -> Optional[SessionRef]:
        """
        Handles the result of an open-session request.

        Args:
            ref: Session created on the server (None when the request failed)
            epoch: Epoch carried by the originating SessionRequest

        Returns:
            The ref back when its work phase is already over and the session
            should be closed right away, else None
        """
        if epoch != self._epoch:
            # Work phase already completed, the late session belongs to it
            return ref

        self._session_pending = False
        if ref is not None:
            self._state.active_session = ref
        return None

    # ==================== PHASE COMPLETION ====================

    def process_expiry(self) -> Optional[PhaseCompleted]:
        """
        Completes the current phase if its time ran out.

        Runs at most once per expiry: the transition restores a positive
        time_left, so repeated calls return None.

        Returns:
            PhaseCompleted event or None when nothing expired
        """
        if self._state.time_left > 0:
            return None

        completed = self._state.phase
        closed_session = None

        if completed == TimerPhase.WORK:
            self.session_count += 1
            closed_session = self._state.active_session
            is_long_break = self.session_count % self._settings.sessions_until_long_break == 0
            next_phase = TimerPhase.LONG_BREAK if is_long_break else TimerPhase.SHORT_BREAK
            auto_start = self._settings.auto_start_breaks
        else:
            next_phase = TimerPhase.WORK
            auto_start = self._settings.auto_start_pomodoros

        duration = self._settings.get_duration(next_phase)
        self._state = TimerState(
            is_running=auto_start,
            time_left=duration,
            total_time=duration,
            phase=next_phase,
            active_session=None,
        )
        self._epoch += 1
        self._session_pending = False

        session_request = None
        if next_phase == TimerPhase.WORK and auto_start:
            session_request = self._request_session()

        return PhaseCompleted(
            completed_phase=completed,
            next_phase=next_phase,
            session_count=self.session_count,
            closed_session=closed_session,
            session_request=session_request,
            sound_enabled=self._settings.sound_enabled,
        )

    # ==================== SETTINGS ====================

    def update_settings(self, **patch) -> TimerSettings:
        """
        Applies a partial settings update.

        A paused timer is resized to the new duration of its current phase;
        a running timer keeps its current phase length.

        Returns:
            The new settings

        Raises:
            InvalidSettingsError: if the patch is invalid (nothing is applied)
        """
        new_settings = self._settings.merged(**patch)
        self._settings = new_settings

        if not self._state.is_running:
            duration = new_settings.get_duration(self._state.phase)
            self._state.time_left = duration
            self._state.total_time = duration

        return new_settings
