from pydantic import BaseModel

from taskboard.schemas.ids import EntityId


class AssignmentCreate(BaseModel):
    user_id: EntityId
    task_id: EntityId

    class Config:
        extra = "forbid"
        strict = True


class AssignmentOut(AssignmentCreate):
    id: int

    class Config:
        from_attributes = True
        strict = False
