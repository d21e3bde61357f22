from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from tasktracker.database.base import Base
from tasktracker.models.common import new_id
from tasktracker.utils.dates import utcnow

class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=new_id)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="planning", index=True)

    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    budget = Column(Numeric(10, 2), nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # No delete cascade: deleting a project nulls project_id on its tasks
    tasks = relationship("Task", back_populates="project")
    team = relationship("Team", back_populates="projects")
