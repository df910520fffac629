# storybook/lib/pdf.py
import io
from typing import Optional, Sequence

from reportlab.lib.colors import black
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from storybook import logger
from storybook.errors import SerializationError
from storybook.lib.imaging import PreparedImage
from storybook.lib.layout import LayoutSettings, PagePlan

log = logger.get_logger(__name__)

TITLE_FONT = "Helvetica-Bold"
BODY_FONT = "Helvetica"


def _draw_page(c: canvas.Canvas, plan: PagePlan, photo: ImageReader, settings: LayoutSettings) -> None:
    lay = plan.layout
    c.drawImage(photo, lay.image_x, lay.image_y, width=lay.image_width, height=lay.image_height)

    c.setFillColor(black)
    if plan.title_lines:
        c.setFont(TITLE_FONT, settings.title_font_size)
        for line, y in zip(plan.title_lines, plan.title_ys):
            c.drawString(settings.text_x, y, line)

    c.setFont(BODY_FONT, settings.body_font_size)
    for line, y in zip(plan.lines, plan.line_ys):
        c.drawString(settings.text_x, y, line)

    c.setFont(BODY_FONT, settings.footer_font_size)
    c.drawCentredString(settings.page_width / 2, settings.footer_y, plan.footer)


def make_pdf(
    plans: Sequence[PagePlan],
    photo: PreparedImage,
    settings: LayoutSettings,
    *,
    title: Optional[str] = None,
    author: Optional[str] = None,
    invariant: bool = True,
) -> bytes:
    """Draw every planned page on a fresh canvas and return the serialized PDF."""
    if not plans:
        raise SerializationError("Failed to generate PDF", "story has no pages")
    log.info(f"Composing {len(plans)} pages into PDF")
    buf = io.BytesIO()
    try:
        c = canvas.Canvas(
            buf,
            pagesize=(settings.page_width, settings.page_height),
            invariant=1 if invariant else 0,
        )
        if title:
            c.setTitle(title)
        if author:
            c.setAuthor(author)
        # one reader for all pages so the photo is embedded once
        reader = ImageReader(photo.image)
        for plan in plans:
            _draw_page(c, plan, reader, settings)
            c.showPage()
        c.save()
    except Exception as e:
        log.exception("PDF composition failed")
        raise SerializationError("Failed to generate PDF", str(e)) from e
    return buf.getvalue()
