# storybook/lib/layout.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from storybook.config import Config, config
from storybook.lib.catalog import StoryTemplate
from storybook.lib.imaging import fit_image
from storybook.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class LayoutSettings:
    page_width: float = 400
    page_height: float = 600
    image_max_width: float = 280
    image_max_height: float = 180
    image_top_margin: float = 20
    text_x: float = 30
    max_line_length: int = 50
    line_height: float = 14
    bottom_margin: float = 50
    # fixed typography
    title_font_size: float = 18
    title_line_height: float = 22
    title_max_line_length: int = 30
    title_gap: float = 40           # image bottom -> first title baseline
    text_gap_after_title: float = 20
    text_gap: float = 30            # image bottom -> first text baseline (no title)
    body_font_size: float = 12
    footer_font_size: float = 10
    footer_y: float = 25

    @classmethod
    def from_config(cls, cfg: Config = config) -> "LayoutSettings":
        return cls(
            page_width=cfg.page_width,
            page_height=cfg.page_height,
            image_max_width=cfg.image_max_width,
            image_max_height=cfg.image_max_height,
            image_top_margin=cfg.image_top_margin,
            text_x=cfg.text_x,
            max_line_length=cfg.max_line_length,
            line_height=cfg.line_height,
            bottom_margin=cfg.bottom_margin,
        )


@dataclass(frozen=True)
class PageLayout:
    image_x: float
    image_y: float
    image_width: float
    image_height: float
    text_start_y: float
    line_height: float


@dataclass(frozen=True)
class PagePlan:
    index: int
    layout: PageLayout
    title_lines: Tuple[str, ...]
    title_ys: Tuple[float, ...]
    lines: Tuple[str, ...]
    line_ys: Tuple[float, ...]
    footer: str
    truncated: bool

    @property
    def title(self) -> Optional[str]:
        return " ".join(self.title_lines) if self.title_lines else None


def wrap_text(text: str, max_line_length: int) -> List[str]:
    """
    Greedy word wrap by character count.

    Words are joined by single spaces; a word longer than max_line_length is
    placed alone on its own line rather than split.
    """
    lines: List[str] = []
    line = ""
    for word in text.split():
        candidate = f"{line} {word}" if line else word
        if line and len(candidate) > max_line_length:
            lines.append(line)
            line = word
        else:
            line = candidate
    if line:
        lines.append(line)
    return lines


def place_lines(
    lines: List[str], *, start_y: float, line_height: float, bottom_margin: float
) -> Tuple[Tuple[str, ...], Tuple[float, ...], bool]:
    """
    Assign baselines top-down from start_y. Lines whose baseline would fall
    below bottom_margin are dropped. Returns (kept, baselines, truncated).
    """
    kept: List[str] = []
    ys: List[float] = []
    y = start_y
    for line in lines:
        if y < bottom_margin:
            break
        kept.append(line)
        ys.append(y)
        y -= line_height
    return tuple(kept), tuple(ys), len(kept) < len(lines)


def image_geometry(natural_width: float, natural_height: float, settings: LayoutSettings) -> Tuple[float, float, float, float]:
    """Returns (x, y, width, height): fitted, horizontally centered, below the top margin."""
    w, h = fit_image(
        natural_width,
        natural_height,
        max_width=settings.image_max_width,
        max_height=settings.image_max_height,
    )
    x = (settings.page_width - w) / 2
    y = settings.page_height - settings.image_top_margin - h
    return x, y, w, h


def plan_pages(
    template: StoryTemplate,
    child_name: str,
    natural_width: float,
    natural_height: float,
    settings: Optional[LayoutSettings] = None,
) -> List[PagePlan]:
    """Lay out every page of `template` for one child. Pure; draws nothing."""
    settings = settings or LayoutSettings.from_config()
    x, y, w, h = image_geometry(natural_width, natural_height, settings)

    plans: List[PagePlan] = []
    total = template.page_count
    for i in range(total):
        title_lines: Tuple[str, ...] = ()
        title_ys: Tuple[float, ...] = ()
        if i == 0:
            title_lines = tuple(wrap_text(template.title_for(child_name), settings.title_max_line_length))
            title_ys = tuple(y - settings.title_gap - n * settings.title_line_height for n in range(len(title_lines)))
        if title_ys:
            text_start_y = title_ys[-1] - settings.text_gap_after_title
        else:
            text_start_y = y - settings.text_gap

        layout = PageLayout(
            image_x=x,
            image_y=y,
            image_width=w,
            image_height=h,
            text_start_y=text_start_y,
            line_height=settings.line_height,
        )
        wrapped = wrap_text(template.text_for_page(i, child_name), settings.max_line_length)
        lines, line_ys, truncated = place_lines(
            wrapped,
            start_y=text_start_y,
            line_height=settings.line_height,
            bottom_margin=settings.bottom_margin,
        )
        if truncated:
            log.debug(f"page {i + 1}: dropped {len(wrapped) - len(lines)} of {len(wrapped)} lines below bottom margin")

        plans.append(PagePlan(
            index=i,
            layout=layout,
            title_lines=title_lines,
            title_ys=title_ys,
            lines=lines,
            line_ys=line_ys,
            footer=f"Page {i + 1} of {total}",
            truncated=truncated,
        ))
    return plans
