"""Model modules."""
from taskboard.models.task import TaskRecord

__all__ = ["TaskRecord"]
