"""
API Client for Tasks.

Handles HTTP communication with the backend's /api/tasks endpoints:
- Listing tasks
- Create / update / toggle / delete
"""

from datetime import datetime
from typing import Optional, List, Any
from loguru import logger

from ...core.api_client import BaseAPIClient
from .tasks_models import Task, TaskPriority, build_task_payload

# Keyword arguments accepted by update_task()
UPDATABLE_FIELDS = ('title', 'description', 'priority', 'due_date')


class TasksAPIClient(BaseAPIClient):
    """API client for the task list"""

    def get_tasks(self) -> List[Task]:
        """
        All tasks of the current user.

        The backend answers either with a bare list or with {"tasks": [...]};
        anything else is treated as an empty list.
        """
        data = self._get('/api/tasks')

        if isinstance(data, dict):
            data = data.get('tasks')
        if not isinstance(data, list):
            logger.warning(f"[TASKS] Unexpected task list payload: {type(data).__name__}")
            return []

        return [Task.from_dict(item) for item in data]

    def get_pending_tasks(self) -> List[Task]:
        """Tasks that are not done yet (task picker of the timer)"""
        return [task for task in self.get_tasks() if not task.done]

    def create_task(
        self,
        title: str,
        description: Optional[str] = None,
        priority: Optional[TaskPriority] = None,
        due_date: Optional[datetime] = None,
    ) -> Task:
        """
        Creates a task.

        Raises:
            ValueError: blank title
            APIError: on HTTP or network failure
        """
        payload = build_task_payload(title, description, priority, due_date)
        logger.debug(f"[TASKS] Creating task '{payload['title']}'")
        return self._parse_task(self._post('/api/tasks', json=payload))

    def update_task(self, task_id: str, **changes: Any) -> Task:
        """
        Updates task fields (title, description, priority, due_date).

        Use toggle_task() for the done flag.

        Raises:
            ValueError: unknown field, no fields at all or blank title
            APIError: on HTTP or network failure
        """
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown task fields: {', '.join(sorted(unknown))}")

        payload = build_task_payload(**changes)
        if not payload:
            raise ValueError("No task fields to update")

        logger.debug(f"[TASKS] Updating task {task_id}: {list(payload)}")
        return self._parse_task(self._patch(f'/api/tasks/{task_id}', json=payload))

    def toggle_task(self, task_id: str) -> Task:
        """Flips the done flag"""
        logger.debug(f"[TASKS] Toggling task {task_id}")
        return self._parse_task(self._patch(f'/api/tasks/{task_id}/toggle'))

    def delete_task(self, task_id: str) -> None:
        logger.debug(f"[TASKS] Deleting task {task_id}")
        self._delete(f'/api/tasks/{task_id}')

    def _parse_task(self, data: Any) -> Task:
        if isinstance(data, dict) and isinstance(data.get('task'), dict):
            data = data['task']
        return Task.from_dict(data)
