from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint

from taskboard.database.base import Base
from taskboard.models.constraints import ON_DELETE


class Assignment(Base):
    __tablename__ = "assignments"
    __table_args__ = (
        UniqueConstraint("user_id", "task_id", name="uq_assignment_user_task"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete=ON_DELETE), nullable=False)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete=ON_DELETE), nullable=False)
