# storybook/features/stories/router.py
from typing import List, Literal, Optional

from fastapi import APIRouter, Query

from storybook.lib.catalog import StoryTemplate, Variant, get_catalog
from .schemas import BracketSummary, SelectedStory, StoriesResponse, TemplateSummary

router = APIRouter(prefix="/api", tags=["stories"])

def _summaries(templates) -> List[TemplateSummary]:
    return [TemplateSummary(title=t.title, pages=t.page_count) for t in templates]

def _personalize(template: StoryTemplate, name: Optional[str]) -> tuple[str, List[str]]:
    if not name:
        return template.title, list(template.content)
    return template.title_for(name), [p.replace("{name}", name) for p in template.content]

@router.get("/stories", response_model=StoriesResponse)
async def list_stories():
    catalog = get_catalog()
    return StoriesResponse(brackets=[
        BracketSummary(
            key=b.key,
            lower=b.lower,
            upper=b.upper,
            universal=_summaries(catalog.templates(b.key, Variant.UNIVERSAL)),
            boy=_summaries(catalog.templates(b.key, Variant.BOY)),
            girl=_summaries(catalog.templates(b.key, Variant.GIRL)),
        )
        for b in catalog.brackets
    ])

@router.get("/stories/select", response_model=SelectedStory)
async def select_story(
    age: int = Query(..., ge=0, le=12),
    gender: Optional[Literal["Boy", "Girl"]] = None,
    name: Optional[str] = Query(None, max_length=80),
):
    """Preview the story /api/create-pdf would use for this child."""
    bracket, variant, template = get_catalog().resolve(age, gender)
    title, content = _personalize(template, name.strip() if name else None)
    return SelectedStory(
        bracket=bracket.key,
        variant=variant.value,
        title=title,
        pages=template.page_count,
        content=content,
    )
