"""
Pomodoro Module - Pomodoro timer with server session log
========================================================
"""

from .pomodoro_logic import (
    PomodoroTimer,
    TimerPhase,
    TimerSettings,
    TimerState,
    SessionRef,
    SessionRequest,
    PhaseCompleted,
    InvalidSettingsError,
)

from .pomodoro_models import (
    PomodoroSession,
    PomodoroStats,
    UserStats,
)

from .pomodoro_api_client import PomodoroAPIClient

from .pomodoro_session_coordinator import SessionCoordinator

from .pomodoro_notifications import (
    NotificationEmitter,
    SoundKind,
    SoundPlayer,
)

from .pomodoro_timer_context import TimerContext, build_timer_context

__all__ = [
    # Logic
    'PomodoroTimer',
    'TimerPhase',
    'TimerSettings',
    'TimerState',
    'SessionRef',
    'SessionRequest',
    'PhaseCompleted',
    'InvalidSettingsError',

    # Models
    'PomodoroSession',
    'PomodoroStats',
    'UserStats',

    # API Client
    'PomodoroAPIClient',

    # Coordination
    'SessionCoordinator',
    'NotificationEmitter',
    'SoundKind',
    'SoundPlayer',
    'TimerContext',
    'build_timer_context',
]
