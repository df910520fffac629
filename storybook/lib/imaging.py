from __future__ import annotations
import base64
import binascii
import io
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from storybook import logger
from storybook.errors import ImageDecodeError

log = logger.get_logger(__name__)

SUPPORTED_FORMATS = {"PNG", "JPEG"}

_DATAURL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w=.-]+)*;base64,(?P<b64>.*)$", re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class PreparedImage:
    image: Image.Image
    format: str                 # "PNG" | "JPEG"
    natural_width: int
    natural_height: int


def _sniff_format(data: bytes) -> str:
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "PNG"
    if data.startswith(b"\xff\xd8"):
        return "JPEG"
    if data.startswith(b"GIF87a") or data.startswith(b"GIF89a"):
        return "GIF"
    # WEBP: RIFF....WEBP
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "WEBP"
    return ""

def _format_from_mime(mime: Optional[str]) -> str:
    if not mime:
        return ""
    mime = mime.lower()
    if mime.endswith("png"):
        return "PNG"
    if mime.endswith("jpeg") or mime.endswith("jpg"):
        return "JPEG"
    return mime

def split_data_url(ref: str) -> Tuple[Optional[str], str]:
    """
    Returns (mime, base64 payload). Accepts 'data:image/png;base64,...' or raw base64,
    in which case mime is None.
    """
    s = ref.strip()
    m = _DATAURL_RE.match(s)
    if m:
        return m.group("mime"), m.group("b64")
    if s.startswith("data:"):
        raise ImageDecodeError("Invalid photo", "data URL must be of the form data:<mime>;base64,<payload>")
    return None, s

def _b64decode(payload: str) -> bytes:
    b64 = "".join(payload.split())
    missing_padding = (-len(b64)) % 4
    if missing_padding:
        b64 += "=" * missing_padding
    try:
        return base64.b64decode(b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError("Invalid photo", f"base64 payload could not be decoded: {e}")

def decode_photo(ref: str, *, max_embed_pixels: Optional[int] = None) -> PreparedImage:
    """
    Decode a photo data URL into a Pillow image ready for embedding.

    The MIME prefix is only a hint: the bytes are sniffed and win on disagreement.
    Only PNG and JPEG are accepted. Natural dimensions are measured after EXIF
    orientation is applied and before any downsampling.
    """
    if not ref or not ref.strip():
        raise ImageDecodeError("Invalid photo", "empty image data")

    mime, payload = split_data_url(ref)
    data = _b64decode(payload)
    if not data:
        raise ImageDecodeError("Invalid photo", "empty image data")

    hinted = _format_from_mime(mime)
    sniffed = _sniff_format(data)
    if hinted and sniffed and hinted != sniffed:
        log.warning(f"photo declared as {mime} but bytes look like {sniffed}; using {sniffed}")
    fmt = sniffed or hinted
    if fmt not in SUPPORTED_FORMATS:
        raise ImageDecodeError("Unsupported image format", f"only PNG or JPEG are supported, got {fmt or 'unknown'}")

    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageDecodeError("Invalid photo", f"could not decode {fmt} image: {e}")
    if img.format and img.format not in SUPPORTED_FORMATS:
        raise ImageDecodeError("Unsupported image format", f"only PNG or JPEG are supported, got {img.format}")
    fmt = img.format or fmt

    img = ImageOps.exif_transpose(img)
    natural_width, natural_height = img.size
    if natural_width <= 0 or natural_height <= 0:
        raise ImageDecodeError("Invalid photo", f"image has no pixels ({natural_width}x{natural_height})")

    # PDF pages take RGB or greyscale
    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    if max_embed_pixels and max(natural_width, natural_height) > max_embed_pixels:
        img.thumbnail((max_embed_pixels, max_embed_pixels), Image.Resampling.LANCZOS)
        log.debug(f"downsampled photo {natural_width}x{natural_height} -> {img.width}x{img.height}")

    return PreparedImage(image=img, format=fmt, natural_width=natural_width, natural_height=natural_height)

def fit_scale(natural_width: float, natural_height: float, *, max_width: float, max_height: float) -> float:
    """Uniform scale that fits the image inside max_width x max_height without distortion."""
    if natural_width <= 0 or natural_height <= 0:
        raise ImageDecodeError("Invalid photo", f"image has no pixels ({natural_width}x{natural_height})")
    return min(max_height / natural_height, max_width / natural_width)

def fit_image(natural_width: float, natural_height: float, *, max_width: float, max_height: float) -> Tuple[float, float]:
    """Returns (final_width, final_height) of the fitted image."""
    s = fit_scale(natural_width, natural_height, max_width=max_width, max_height=max_height)
    return natural_width * s, natural_height * s
