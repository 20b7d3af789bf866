"""Domain entities and aggregates.

Pure domain models; no ORM or persistence concerns.
"""

from app.domain.entities.task import StatusChange, TaskEntity

__all__ = ["StatusChange", "TaskEntity"]
