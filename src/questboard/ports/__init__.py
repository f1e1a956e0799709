"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskRepository
from .clock import Clock

__all__ = [
    "TaskRepository",
    "Clock",
]
