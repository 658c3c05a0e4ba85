from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum
import uuid
from app.core.database import Base


class SwipeDirection(str, enum.Enum):
    LIKE = "like"
    PASS = "pass"


class Swipe(Base):
    """One like/pass decision by a user about a project or about another user.

    Exactly one of ``target_project_id`` / ``target_user_id`` is set. Rows are
    append-only; the unique constraints make the store reject a second
    decision on the same target.
    """

    __tablename__ = "swipes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    swiper_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    target_project_id = Column(UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=True, index=True)
    target_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    direction = Column(String(10), nullable=False)  # like or pass

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Relationships
    swiper = relationship("User", foreign_keys=[swiper_id])
    target_project = relationship("Project", foreign_keys=[target_project_id])
    target_user = relationship("User", foreign_keys=[target_user_id])

    __table_args__ = (
        # One decision per swiper per target
        UniqueConstraint('swiper_id', 'target_project_id', name='unique_swiper_project_swipe'),
        UniqueConstraint('swiper_id', 'target_user_id', name='unique_swiper_user_swipe'),
        CheckConstraint(
            '(target_project_id IS NOT NULL AND target_user_id IS NULL) OR '
            '(target_project_id IS NULL AND target_user_id IS NOT NULL)',
            name='check_swipe_single_target'
        ),
        CheckConstraint("direction IN ('like', 'pass')", name='check_swipe_direction'),
    )

    def __repr__(self):
        target = self.target_project_id or self.target_user_id
        return f"<Swipe(swiper_id={self.swiper_id}, target={target}, direction={self.direction})>"
