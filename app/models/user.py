from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
import uuid
from app.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(50), unique=True, index=True, nullable=False)

    # Public profile
    role = Column(String(100))  # e.g. "Backend developer", "Designer"
    experience = Column(String(50))  # beginner, intermediate, advanced
    time_commitment = Column(String(50))  # hours per week, free text
    tech_tags = Column(JSON)  # List of technologies

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"
