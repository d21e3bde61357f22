from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from tasktracker.database.base import Base
from tasktracker.models.common import new_id
from tasktracker.utils.dates import utcnow

class Team(Base):
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=utcnow)

    memberships = relationship("TeamMembership", back_populates="team", cascade="all, delete-orphan")
    projects = relationship("Project", back_populates="team", cascade="all, delete-orphan")

class TeamMembership(Base):
    """
    One row per (team, member) pair.
    The only place a member's role is recorded.
    """
    __tablename__ = "team_members"

    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("profiles.user_id", ondelete="CASCADE"), primary_key=True)
    role = Column(String(20), nullable=False, default="member")
    created_at = Column(DateTime, default=utcnow)

    team = relationship("Team", back_populates="memberships")
    profile = relationship("Profile")

class Profile(Base):
    __tablename__ = "profiles"

    user_id = Column(String(36), primary_key=True, default=new_id)
    full_name = Column(String(255), nullable=True)
    avatar_url = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utcnow)
