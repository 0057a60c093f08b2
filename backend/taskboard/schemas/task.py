from pydantic import BaseModel
from typing import Optional

from taskboard.schemas.ids import EntityId


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    status_id: EntityId

    class Config:
        extra = "forbid"
        strict = True


class TaskOut(TaskCreate):
    id: int

    class Config:
        from_attributes = True
        strict = False
