"""
Problem schemas.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime

from leetcoach.models.enums import Difficulty
from leetcoach.schemas.card import CardResponse


class ProblemCreateRequest(BaseModel):
    """Request to add a problem (and its card)."""
    url: str = Field(..., description="Problem URL")
    title: str = Field(..., min_length=1, description="Problem title")
    difficulty: Difficulty = Field(..., description="Easy, Medium or Hard")
    tags: List[str] = Field(default_factory=list, description="Free-text tags, e.g. 'Graph'")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        v = v.strip()
        if not (v.startswith('http://') or v.startswith('https://')) or len(v.split('://', 1)[1]) == 0:
            raise ValueError("url must be an absolute http(s) URL")
        return v

    @field_validator('tags')
    @classmethod
    def strip_tags(cls, v: List[str]) -> List[str]:
        """Drop blank tags and surrounding whitespace."""
        return [tag.strip() for tag in v if tag and tag.strip()]

    class Config:
        json_schema_extra = {
            "example": {
                "url": "https://leetcode.com/problems/course-schedule/",
                "title": "Course Schedule",
                "difficulty": "Medium",
                "tags": ["Graph", "Topological Sort"]
            }
        }


class ProblemResponse(BaseModel):
    """Problem response schema."""
    id: int
    source: str
    slug: str
    url: str
    title: str
    difficulty: str
    tags: List[str] = []
    created_at: datetime
    card: Optional[CardResponse] = None

    class Config:
        from_attributes = True


class ProblemListResponse(BaseModel):
    """List of the user's problems, newest first."""
    problems: List[ProblemResponse]
