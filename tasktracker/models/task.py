from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Date, JSON
from sqlalchemy.orm import relationship
from tasktracker.database.base import Base
from tasktracker.models.common import new_id
from tasktracker.utils.dates import utcnow

class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=new_id)
    team_id = Column(
        String(36),
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    status = Column(String(20), nullable=False, default="todo")
    priority = Column(String(20), nullable=True)
    due_date = Column(Date, nullable=True)
    estimated_time_minutes = Column(Integer, nullable=True)

    assignee_id = Column(String(36), ForeignKey("profiles.user_id"), nullable=True, index=True)
    creator_id = Column(String(36), ForeignKey("profiles.user_id"), nullable=True)

    project_id = Column(
        String(36),
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    project = relationship("Project", back_populates="tasks")

    # Children live and die with their task
    time_entries = relationship(
        "TimeEntry",
        back_populates="task",
        cascade="all, delete-orphan"
    )
    comments = relationship(
        "Comment",
        back_populates="task",
        cascade="all, delete-orphan"
    )

class TimeEntry(Base):
    __tablename__ = "time_entries"

    id = Column(String(36), primary_key=True, default=new_id)
    task_id = Column(String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("profiles.user_id", ondelete="SET NULL"), nullable=True, index=True)

    minutes = Column(Integer, nullable=False)
    entry_date = Column("date", Date, nullable=False)

    created_at = Column(DateTime, default=utcnow, index=True)

    task = relationship("Task", back_populates="time_entries")

class Comment(Base):
    __tablename__ = "task_comments"

    id = Column(String(36), primary_key=True, default=new_id)
    task_id = Column(String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    # Null once the author's profile is gone
    user_id = Column(String(36), ForeignKey("profiles.user_id", ondelete="SET NULL"), nullable=True)

    content = Column(Text, nullable=True)
    attachments = Column(JSON, nullable=True)  # [{url, name, type, size}]

    created_at = Column(DateTime, default=utcnow)

    task = relationship("Task", back_populates="comments")
