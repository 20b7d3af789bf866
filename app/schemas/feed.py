"""Org feed and personal inbox schemas."""

from pydantic import BaseModel

from app.schemas.task import TaskResponse


class OrgFeedResponse(BaseModel):
    items: list[TaskResponse]


class InboxResponse(BaseModel):
    tasks: list[TaskResponse]
    pending_handoffs: list[TaskResponse]
