# storybook/features/create_pdf/schemas.py
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from storybook.config import config

class CreatePdfRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    child_name: str = Field(..., alias="childName", max_length=80, description="Child's name, substituted for {name}")
    child_age: int = Field(..., alias="childAge", ge=0, le=12)
    gender: Optional[Literal["Boy", "Girl"]] = None
    photos: List[str] = Field(
        default_factory=list,
        validate_default=True,
        description="Data URLs (data:<mime>;base64,<payload>). Only the first photo is used.",
    )

    @field_validator("child_name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("childName is required")
        return v

    @field_validator("photos")
    @classmethod
    def photo_count(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("at least one photo is required")
        if len(v) > config.max_photos:
            raise ValueError(f"no more than {config.max_photos} photos")
        if not all(isinstance(p, str) and p.strip() for p in v):
            raise ValueError("photos must be non-empty data URLs")
        return v
