from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
import uuid
from app.schemas.user import OwnerSummary


class ProjectSummary(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    looking_for: Optional[List[str]] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProjectCandidate(ProjectSummary):
    """Project offered to a user for swiping, with its owner's public fields"""
    owner: Optional[OwnerSummary] = None
