# tests/conftest.py
import base64
import re
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from storybook.main import app
from storybook.lib.catalog import StoryCatalog

# -------- Test client --------
@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c

# -------- Utilities --------
def _image_bytes(w: int = 64, h: int = 48, fmt: str = "PNG", mode: str = "RGB") -> bytes:
    color = (123, 45, 67, 200) if mode == "RGBA" else (123, 45, 67)
    im = Image.new(mode, (w, h), color)
    buf = BytesIO()
    im.save(buf, format=fmt)
    return buf.getvalue()

def _data_url(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"

@pytest.fixture
def image_bytes():
    return _image_bytes

@pytest.fixture
def make_data_url():
    """make_data_url(w, h, fmt="PNG", mime=None, mode="RGB") -> data URL string."""
    def _make(w: int = 64, h: int = 48, fmt: str = "PNG", mime: str = None, mode: str = "RGB") -> str:
        mime = mime or f"image/{fmt.lower()}"
        return _data_url(_image_bytes(w, h, fmt, mode), mime)
    return _make

@pytest.fixture
def png_data_url(make_data_url):
    return make_data_url(64, 48, "PNG")

@pytest.fixture
def jpeg_data_url(make_data_url):
    return make_data_url(640, 480, "JPEG")

@pytest.fixture
def pdf_page_count():
    """Counts /Type /Page objects (not /Pages) in a serialized PDF."""
    def _count(data: bytes) -> int:
        return len(re.findall(rb"/Type\s*/Page\b", data))
    return _count

# -------- Catalogs --------
def _template(title: str, content, pages: int) -> dict:
    return {"title": title, "content": content, "pages": pages}

@pytest.fixture
def catalog_data():
    return {
        "stories": {
            "0-6": {
                "universal": [
                    _template("{name}'s First Tale", ["One for {name}.", "Two for {name}."], 2),
                    _template("Never Chosen", "unused", 1),
                ],
                "boy": [_template("Boy Tale for {name}", "A single paragraph about {name}.", 3)],
                "girl": [],
            },
            "6-12": {
                "universal": [],
                "boy": [],
                "girl": [_template("Girl Tale", ["Only girls get this."], 1)],
            },
        }
    }

@pytest.fixture
def small_catalog(catalog_data):
    return StoryCatalog.from_dict(catalog_data)
