"""
Task Module - task list stored on the server
"""

from .tasks_models import Task, TaskPriority, build_task_payload
from .tasks_api_client import TasksAPIClient

__all__ = [
    'Task',
    'TaskPriority',
    'build_task_payload',
    'TasksAPIClient',
]
