from taskboard.models.assignment import Assignment  # noqa: F401
from taskboard.models.status import Status  # noqa: F401
from taskboard.models.task import Task  # noqa: F401
from taskboard.models.user import User  # noqa: F401
