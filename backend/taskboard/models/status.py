from sqlalchemy import Column, Integer, String

from taskboard.database.base import Base


class Status(Base):
    __tablename__ = "statuses"

    id = Column(Integer, primary_key=True, index=True)
    label = Column(String, nullable=False)
