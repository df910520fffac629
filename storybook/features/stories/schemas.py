# storybook/features/stories/schemas.py
from pydantic import BaseModel
from typing import List

class TemplateSummary(BaseModel):
    title: str
    pages: int

class BracketSummary(BaseModel):
    key: str
    lower: int
    upper: int
    universal: List[TemplateSummary]
    boy: List[TemplateSummary]
    girl: List[TemplateSummary]

class StoriesResponse(BaseModel):
    brackets: List[BracketSummary]

class SelectedStory(BaseModel):
    bracket: str
    variant: str
    title: str
    pages: int
    content: List[str]
