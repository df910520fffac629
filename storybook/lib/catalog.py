# storybook/lib/catalog.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from storybook.config import config
from storybook.errors import CatalogError, NoTemplateAvailable, ValidationError
from storybook.logger import get_logger

log = get_logger(__name__)

AGE_MIN = 0
AGE_MAX = 12
NAME_TOKEN = "{name}"

_BRACKET_KEY_RE = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*$")


class Variant(str, Enum):
    UNIVERSAL = "universal"
    BOY = "boy"
    GIRL = "girl"

    @classmethod
    def from_gender(cls, gender: Optional[str]) -> Optional["Variant"]:
        if not gender:
            return None
        try:
            v = cls(gender.strip().lower())
        except ValueError:
            raise ValidationError("Invalid gender", f"expected 'Boy' or 'Girl', got {gender!r}")
        return None if v is cls.UNIVERSAL else v


class StoryTemplate(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    content: Tuple[str, ...]
    page_count: int = Field(..., alias="pages", ge=1)

    @field_validator("content", mode="before")
    @classmethod
    def _content_as_paragraphs(cls, v: Union[str, Sequence[str]]):
        if isinstance(v, str):
            v = [v]
        v = tuple(v)
        if not v:
            raise ValueError("content must have at least one paragraph")
        return v

    def title_for(self, child_name: str) -> str:
        return self.title.replace(NAME_TOKEN, child_name)

    def text_for_page(self, index: int, child_name: str) -> str:
        """Paragraph for page `index`; short content falls back to the first paragraph."""
        text = self.content[index] if index < len(self.content) else self.content[0]
        return text.replace(NAME_TOKEN, child_name)


class _Bucket(BaseModel):
    universal: List[StoryTemplate] = Field(default_factory=list)
    boy: List[StoryTemplate] = Field(default_factory=list)
    girl: List[StoryTemplate] = Field(default_factory=list)


class _CatalogFile(BaseModel):
    stories: Dict[str, _Bucket]


@dataclass(frozen=True)
class AgeBracket:
    key: str
    lower: int
    upper: int


CatalogKey = Tuple[str, Variant]


class StoryCatalog:
    """
    Read-only story templates keyed by (age bracket, variant).

    Brackets are sorted ascending and must tile [AGE_MIN, AGE_MAX] with each
    bracket starting where the previous one ends. An age belongs to the first
    bracket whose upper bound is >= age, so shared boundaries go to the lower
    bracket (age 2 -> "0-2").
    """

    def __init__(self, brackets: Sequence[AgeBracket], templates: Mapping[CatalogKey, Sequence[StoryTemplate]]):
        self._brackets = tuple(sorted(brackets, key=lambda b: b.lower))
        _check_partition(self._brackets)
        self._templates = MappingProxyType({k: tuple(v) for k, v in templates.items()})

    @property
    def brackets(self) -> Tuple[AgeBracket, ...]:
        return self._brackets

    def templates(self, bracket_key: str, variant: Variant) -> Tuple[StoryTemplate, ...]:
        return self._templates.get((bracket_key, variant), ())

    def bracket_for(self, age: int) -> AgeBracket:
        if age < AGE_MIN or age > AGE_MAX:
            raise ValidationError("Invalid age", f"childAge must be between {AGE_MIN} and {AGE_MAX}, got {age}")
        for b in self._brackets:
            if age <= b.upper:
                return b
        # unreachable after _check_partition
        raise CatalogError("No age bracket covers age", str(age))

    @staticmethod
    def lookup_keys(bracket: AgeBracket, variant: Optional[Variant]) -> List[CatalogKey]:
        keys: List[CatalogKey] = []
        if variant is not None and variant is not Variant.UNIVERSAL:
            keys.append((bracket.key, variant))
        keys.append((bracket.key, Variant.UNIVERSAL))
        return keys

    def resolve(self, age: int, gender: Optional[str] = None) -> Tuple[AgeBracket, Variant, StoryTemplate]:
        """Returns the bracket, the variant list the template came from, and the template."""
        bracket = self.bracket_for(age)
        variant = Variant.from_gender(gender)
        for key in self.lookup_keys(bracket, variant):
            pool = self.templates(*key)
            if pool:
                log.debug(f"selected template from {key[0]}/{key[1].value}: {pool[0].title!r}")
                return bracket, key[1], pool[0]
        raise NoTemplateAvailable("No backup story available", f"age bracket {bracket.key} has no templates")

    def select(self, age: int, gender: Optional[str] = None) -> StoryTemplate:
        return self.resolve(age, gender)[2]

    @classmethod
    def from_dict(cls, data: dict) -> "StoryCatalog":
        try:
            parsed = _CatalogFile.model_validate(data)
        except PydanticValidationError as e:
            raise CatalogError("Invalid story catalog", str(e))

        brackets: List[AgeBracket] = []
        templates: Dict[CatalogKey, List[StoryTemplate]] = {}
        for key, bucket in parsed.stories.items():
            m = _BRACKET_KEY_RE.match(key)
            if not m:
                raise CatalogError("Invalid story catalog", f"bad age bracket key {key!r}")
            lower, upper = int(m.group(1)), int(m.group(2))
            if lower >= upper:
                raise CatalogError("Invalid story catalog", f"empty age bracket {key!r}")
            bracket = AgeBracket(key=key, lower=lower, upper=upper)
            brackets.append(bracket)
            templates[(key, Variant.UNIVERSAL)] = bucket.universal
            templates[(key, Variant.BOY)] = bucket.boy
            templates[(key, Variant.GIRL)] = bucket.girl
        return cls(brackets, templates)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "StoryCatalog":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError("Could not read story catalog", f"{path}: {e}")
        return cls.from_dict(data)


def _check_partition(brackets: Sequence[AgeBracket]) -> None:
    if not brackets:
        raise CatalogError("Invalid story catalog", "no age brackets defined")
    if brackets[0].lower != AGE_MIN or brackets[-1].upper != AGE_MAX:
        raise CatalogError(
            "Invalid story catalog",
            f"age brackets must cover {AGE_MIN}-{AGE_MAX}, got {brackets[0].lower}-{brackets[-1].upper}",
        )
    for prev, nxt in zip(brackets, brackets[1:]):
        if prev.upper != nxt.lower:
            raise CatalogError(
                "Invalid story catalog",
                f"age brackets {prev.key!r} and {nxt.key!r} must be contiguous",
            )


@lru_cache(maxsize=1)
def get_catalog() -> StoryCatalog:
    """Load the catalog from config.catalog_path once per process."""
    catalog = StoryCatalog.from_file(config.catalog_path)
    log.info(f"Loaded story catalog from {config.catalog_path} ({len(catalog.brackets)} age brackets)")
    return catalog
