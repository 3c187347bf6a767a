"""
Learning-path models.

LearningStep / ParsedResponse are what the response parser produces.
SessionStep / LearningSummary are the presentation model built on top of
them: synthetic step ids, per-step completion and overall progress.
"""

from datetime import datetime
from typing import List
from pydantic import BaseModel, ConfigDict, Field


class LearningStep(BaseModel):
    """One lesson in a learning path"""
    title: str
    content: str  # Markdown, may embed ```mermaid blocks


class ParsedResponse(BaseModel):
    """Structured result of parsing a model reply. `steps` is never empty."""
    steps: List[LearningStep]
    related_topics: List[str] = Field(default_factory=list, alias="relatedTopics")

    model_config = ConfigDict(populate_by_name=True)


class SessionStep(LearningStep):
    """A step as tracked by a learning session"""
    id: str
    completed: bool = False


class SessionRequest(ParsedResponse):
    """Parsed learning path plus the topic it was generated for"""
    topic: str = Field(..., min_length=1)


class LearningSession(BaseModel):
    """Presentation model for a freshly generated learning path"""
    topic: str
    steps: List[SessionStep]
    related_topics: List[str] = Field(default_factory=list, alias="relatedTopics")
    progress: int = 0

    model_config = ConfigDict(populate_by_name=True)


class LearningSummary(BaseModel):
    """Saved snapshot of a learning session"""
    id: str = Field(..., min_length=1)
    topic: str
    date: datetime
    steps: List[SessionStep] = Field(default_factory=list)
    progress: int = Field(ge=0, le=100, default=0)
