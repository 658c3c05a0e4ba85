from pydantic import BaseModel
from typing import Optional, List
import uuid


class OwnerSummary(BaseModel):
    """Owner fields attached to a project candidate"""
    username: str
    role: Optional[str] = None
    experience: Optional[str] = None

    class Config:
        from_attributes = True


class UserPublic(BaseModel):
    """Public profile shown to project owners and in matches"""
    id: uuid.UUID
    username: str
    role: Optional[str] = None
    experience: Optional[str] = None
    time_commitment: Optional[str] = None
    tech_tags: Optional[List[str]] = None

    class Config:
        from_attributes = True
