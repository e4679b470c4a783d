"""
Pomodoro Models - server-side records returned by the Pomodoro API
"""
from datetime import datetime
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from ...utils.time_utils import parse_datetime_field
from .pomodoro_logic import SessionRef


@dataclass
class PomodoroSession:
    """
    Pomodoro session record kept by the server.

    duration is in MINUTES (as sent when the session was opened).
    """
    id: str
    duration: int
    user_id: Optional[str] = None
    task_id: Optional[str] = None
    task_title: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def to_ref(self) -> SessionRef:
        """Reference kept by the timer while the work phase runs"""
        return SessionRef(id=self.id, task_id=self.task_id)

    @staticmethod
    def from_dict(data: dict) -> 'PomodoroSession':
        task = data.get('task') or {}
        return PomodoroSession(
            id=str(data['id']),
            duration=int(data.get('duration', 0)),
            user_id=data.get('userId'),
            task_id=data.get('taskId') or task.get('id'),
            task_title=task.get('title'),
            completed_at=parse_datetime_field(data.get('completedAt')),
            created_at=parse_datetime_field(data.get('createdAt')),
            updated_at=parse_datetime_field(data.get('updatedAt')),
        )


@dataclass
class DailyStat:
    """Sessions and focus time of a single day"""
    date: str
    sessions: int = 0
    focus_time: int = 0


@dataclass
class PomodoroStats:
    """Aggregated Pomodoro statistics"""
    total_sessions: int = 0
    total_focus_time: int = 0
    average_session_length: float = 0.0
    sessions_this_week: int = 0
    focus_time_this_week: int = 0
    daily_stats: List[DailyStat] = field(default_factory=list)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'PomodoroStats':
        return PomodoroStats(
            total_sessions=data.get('totalSessions', 0),
            total_focus_time=data.get('totalFocusTime', 0),
            average_session_length=data.get('averageSessionLength', 0.0),
            sessions_this_week=data.get('sessionsThisWeek', 0),
            focus_time_this_week=data.get('focusTimeThisWeek', 0),
            daily_stats=[
                DailyStat(
                    date=item.get('date', ''),
                    sessions=item.get('sessions', 0),
                    focus_time=item.get('focusTime', 0),
                )
                for item in data.get('dailyStats', [])
            ],
        )


@dataclass
class UserStats:
    """Dashboard statistics of the current user"""
    total_tasks: int = 0
    completed_tasks: int = 0
    total_pomodoro_sessions: int = 0
    total_focus_time: int = 0
    streak_days: int = 0
    today_tasks: int = 0
    today_completed_tasks: int = 0
    today_pomodoro_sessions: int = 0
    today_focus_time: int = 0

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'UserStats':
        return UserStats(
            total_tasks=data.get('totalTasks', 0),
            completed_tasks=data.get('completedTasks', 0),
            total_pomodoro_sessions=data.get('totalPomodoroSessions', 0),
            total_focus_time=data.get('totalFocusTime', 0),
            streak_days=data.get('streakDays', 0),
            today_tasks=data.get('todayTasks', 0),
            today_completed_tasks=data.get('todayCompletedTasks', 0),
            today_pomodoro_sessions=data.get('todayPomodoroSessions', 0),
            today_focus_time=data.get('todayFocusTime', 0),
        )
