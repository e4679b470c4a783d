"""
Tasks Models - task records exchanged with the API
"""
from datetime import datetime
from dataclasses import dataclass
from typing import Optional, Dict, Any
from enum import Enum

from ...utils.time_utils import parse_datetime_field


class TaskPriority(Enum):
    """Task priority"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass
class Task:
    """Task model - compatible with the API (camelCase on the wire)"""
    id: str
    title: str
    description: Optional[str] = None
    done: bool = False
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Task':
        """Create from an API record"""
        # Older backends send 'completed' instead of 'done'
        done = data.get('done', data.get('completed', False))

        priority = str(data.get('priority') or TaskPriority.MEDIUM.value).upper()
        try:
            priority_value = TaskPriority(priority)
        except ValueError:
            priority_value = TaskPriority.MEDIUM

        return Task(
            id=str(data['id']),
            title=data.get('title', ''),
            description=data.get('description'),
            done=bool(done),
            priority=priority_value,
            due_date=parse_datetime_field(data.get('dueDate')),
            user_id=data.get('userId'),
            created_at=parse_datetime_field(data.get('createdAt')),
            updated_at=parse_datetime_field(data.get('updatedAt')),
        )


def build_task_payload(
    title: Optional[str] = None,
    description: Optional[str] = None,
    priority: Optional[TaskPriority] = None,
    due_date: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Request body for create/update with only the given fields.

    An empty description is sent as "" so an update can clear it.

    Raises:
        ValueError: if the title is given but blank
    """
    payload: Dict[str, Any] = {}
    if title is not None:
        title = title.strip()
        if not title:
            raise ValueError("Task title cannot be empty")
        payload['title'] = title
    if description is not None:
        payload['description'] = description.strip()
    if priority is not None:
        payload['priority'] = priority.value
    if due_date is not None:
        payload['dueDate'] = due_date.isoformat()
    return payload
