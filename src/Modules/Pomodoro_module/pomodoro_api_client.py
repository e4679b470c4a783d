"""
API Client for Pomodoro sessions.

Talks to the backend's /api/pomodoro endpoints:
- Opening a session when a work phase starts
- Marking a session complete
- Fetching session history and statistics
"""

from typing import Optional, List, Any
from loguru import logger

from ...core.api_client import BaseAPIClient, APIError
from .pomodoro_models import PomodoroSession, PomodoroStats, UserStats


class PomodoroAPIClient(BaseAPIClient):
    """API client for Pomodoro sessions and statistics"""

    def start_session(self, duration: int, task_id: Optional[str] = None) -> PomodoroSession:
        """
        Opens a session record on the server.

        Args:
            duration: Planned work duration in MINUTES
            task_id: Task the session works on (optional)

        Returns:
            Created session

        Raises:
            APIError: on HTTP or network failure
        """
        payload: dict = {'duration': duration}
        if task_id:
            payload['taskId'] = task_id

        logger.debug(f"[POMODORO] Starting session ({duration} min, task={task_id})")
        data = self._post('/api/pomodoro', json=payload)
        return self._parse_session(data)

    def complete_session(self, session_id: str) -> Optional[PomodoroSession]:
        """
        Marks a session complete.

        Raises:
            APIError: on HTTP or network failure
        """
        logger.debug(f"[POMODORO] Completing session {session_id}")
        data = self._patch(f'/api/pomodoro/{session_id}/complete')
        if not data:
            return None
        return self._parse_session(data)

    def get_sessions(self) -> List[PomodoroSession]:
        """Session history of the current user"""
        data = self._get('/api/pomodoro')
        if isinstance(data, dict):
            data = data.get('sessions', [])
        return [PomodoroSession.from_dict(item) for item in data or []]

    def get_stats(self) -> PomodoroStats:
        """Aggregated Pomodoro statistics"""
        data = self._get('/api/pomodoro/stats')
        return PomodoroStats.from_dict(data or {})

    def get_user_stats(self) -> UserStats:
        """Dashboard statistics (tasks and sessions)"""
        data = self._get('/api/users/stats')
        return UserStats.from_dict(data or {})

    def _parse_session(self, data: Any) -> PomodoroSession:
        # Some backends wrap the record: {"session": {...}} / {"data": {...}}
        if isinstance(data, dict):
            for key in ('session', 'data'):
                if isinstance(data.get(key), dict):
                    data = data[key]
                    break
        if not isinstance(data, dict) or 'id' not in data:
            raise APIError(f"Unexpected session payload: {data!r}")
        return PomodoroSession.from_dict(data)
