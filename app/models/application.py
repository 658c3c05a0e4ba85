from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from app.core.database import Base


class Application(Base):
    """A user's request to join a project.

    Managed by the applications API; the swipe core only reads it as an
    affinity signal when picking users for a project owner.
    """

    __tablename__ = "applications"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id = Column(UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)

    blurb = Column(Text)
    status = Column(String(20), nullable=False, default="pending", index=True)
    # Values: pending, accepted, rejected

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Relationships
    user = relationship("User")
    project = relationship("Project")

    __table_args__ = (UniqueConstraint('user_id', 'project_id', name='unique_user_project_application'),)

    def __repr__(self):
        return f"<Application(user_id={self.user_id}, project_id={self.project_id}, status={self.status})>"
