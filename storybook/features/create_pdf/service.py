# storybook/features/create_pdf/service.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import quote

from storybook.config import config
from storybook.features.create_pdf.schemas import CreatePdfRequest
from storybook.lib.catalog import StoryCatalog, StoryTemplate, get_catalog
from storybook.lib.imaging import decode_photo
from storybook.lib.layout import LayoutSettings, PagePlan, plan_pages
from storybook.lib.pdf import make_pdf
from storybook.logger import get_logger

log = get_logger(__name__)

_UNSAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9 ._-]+")


@dataclass(frozen=True)
class Storybook:
    filename: str
    template: StoryTemplate
    plans: List[PagePlan]
    pdf: bytes


def storybook_filename(child_name: str) -> str:
    return f"{child_name}-storybook.pdf"

def content_disposition(child_name: str) -> str:
    """
    attachment; filename="<name>-storybook.pdf"

    Header values must be latin-1 and the quoted form can't carry quotes, so
    unusual names get a sanitized filename plus an RFC 5987 filename*.
    """
    filename = storybook_filename(child_name)
    safe = _UNSAFE_FILENAME_RE.sub("_", child_name).strip() or "child"
    safe_filename = storybook_filename(safe)
    if safe_filename == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{safe_filename}\"; filename*=UTF-8''{quote(filename)}"

def create_storybook(
    req: CreatePdfRequest,
    *,
    catalog: Optional[StoryCatalog] = None,
    settings: Optional[LayoutSettings] = None,
) -> Storybook:
    """
    Select a story for the child, lay out every page around the first photo
    and serialize the PDF. Raises a StorybookError subclass on any failure.
    """
    catalog = catalog or get_catalog()
    settings = settings or LayoutSettings.from_config()

    template = catalog.select(req.child_age, req.gender)
    log.info(f"storybook for age={req.child_age} gender={req.gender or '-'}: {template.title!r} ({template.page_count} pages)")

    # only the first photo is used; the rest are accepted and ignored
    photo = decode_photo(req.photos[0], max_embed_pixels=config.max_embed_pixels)

    plans = plan_pages(template, req.child_name, photo.natural_width, photo.natural_height, settings)
    pdf = make_pdf(
        plans,
        photo,
        settings,
        title=template.title_for(req.child_name),
        author=config.pdf_author,
        invariant=config.pdf_invariant,
    )
    log.info(f"storybook ready: {len(plans)} pages, {len(pdf)} bytes")
    return Storybook(filename=storybook_filename(req.child_name), template=template, plans=plans, pdf=pdf)
