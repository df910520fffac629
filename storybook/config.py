# storybook/config.py
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

def _env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}

def _env_csv(name: str, default: str = "*") -> List[str]:
    raw = os.getenv(name, default)
    return [x.strip() for x in raw.split(",") if x.strip()]

def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)

@dataclass(frozen=True)
class Config:
    # API / CORS
    allowed_origins: List[str]
    # Logging
    log_level: str
    # Story catalog (read once at startup)
    catalog_path: Path
    # Page canvas, in layout units (PDF points)
    page_width: float
    page_height: float
    # Photo bounding box
    image_max_width: float
    image_max_height: float
    image_top_margin: float
    # Text block
    text_x: float
    max_line_length: int                    # character count, not glyph width
    line_height: float
    bottom_margin: float
    # Uploads
    max_embed_pixels: int                   # longest side after downsampling
    max_photos: int
    # Output
    pdf_author: str
    pdf_invariant: bool                     # fixed timestamps/ids -> reproducible bytes

def load_config() -> Config:
    return Config(
        allowed_origins = _env_csv("ALLOWED_ORIGINS", "*"),
        log_level = os.getenv("LOG_LEVEL", "INFO"),
        catalog_path = Path(os.getenv(
            "STORY_CATALOG_PATH",
            str(Path(__file__).resolve().parent / "data" / "stories.json"),
        )),
        page_width = _env_float("PAGE_WIDTH", 400),
        page_height = _env_float("PAGE_HEIGHT", 600),
        image_max_width = _env_float("IMAGE_MAX_WIDTH", 280),
        image_max_height = _env_float("IMAGE_MAX_HEIGHT", 180),
        image_top_margin = _env_float("IMAGE_TOP_MARGIN", 20),
        text_x = _env_float("TEXT_X", 30),
        max_line_length = int(os.getenv("MAX_LINE_LENGTH", "50")),
        line_height = _env_float("LINE_HEIGHT", 14),
        bottom_margin = _env_float("BOTTOM_MARGIN", 50),
        max_embed_pixels = int(os.getenv("MAX_EMBED_PIXELS", "1200")),
        max_photos = int(os.getenv("MAX_PHOTOS", "2")),
        pdf_author = os.getenv("PDF_AUTHOR", "Storybook"),
        pdf_invariant = _env_bool("PDF_INVARIANT", True),
    )

# Load once
config = load_config()
