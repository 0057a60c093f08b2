from dataclasses import dataclass, field
from typing import Type

from pydantic import BaseModel

from taskboard.database.base import Base
from taskboard.database.crud import CrudStore
from taskboard.models import Assignment, Status, Task, User
from taskboard.schemas.assignment import AssignmentCreate, AssignmentOut
from taskboard.schemas.status import StatusCreate, StatusOut
from taskboard.schemas.task import TaskCreate, TaskOut
from taskboard.schemas.user import UserCreate, UserOut


@dataclass(frozen=True)
class EntityResource:
    name: str
    path: str
    model: Type[Base]
    create_schema: Type[BaseModel]
    out_schema: Type[BaseModel]
    store: CrudStore = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "store", CrudStore(self.model))


USERS = EntityResource("users", "/users", User, UserCreate, UserOut)
TASKS = EntityResource("tasks", "/tasks", Task, TaskCreate, TaskOut)
STATUSES = EntityResource("statuses", "/statuses", Status, StatusCreate, StatusOut)
ASSIGNMENTS = EntityResource("assignments", "/user-tasks", Assignment, AssignmentCreate, AssignmentOut)

RESOURCES = (USERS, TASKS, STATUSES, ASSIGNMENTS)
