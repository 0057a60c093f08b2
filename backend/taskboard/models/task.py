from sqlalchemy import Column, ForeignKey, Integer, String

from taskboard.database.base import Base
from taskboard.models.constraints import ON_DELETE


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    status_id = Column(Integer, ForeignKey("statuses.id", ondelete=ON_DELETE), nullable=False)
