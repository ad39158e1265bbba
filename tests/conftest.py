import io

import pytest
from PIL import Image, ImageDraw
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas


def _pdf(pages: list[list[str]]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    for lines in pages:
        y = 800
        for line in lines:
            c.drawString(40, y, line)
            y -= 14
        c.showPage()
    c.save()
    return buf.getvalue()


def _png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _pdf([["Hello PDF World"]])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _pdf([["Page one content"], ["Page two content"]])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _pdf([[]])


@pytest.fixture()
def council_pdf_bytes() -> bytes:
    """Two pages of ASCII-only council minutes with a healthy text layer."""
    ascii_paragraph = (
        "Rada Miejska na sesji w dniu 15.01.2024 podjela uchwale w sprawie zmiany "
        "budzetu gminy oraz w sprawie programu dla organizacji. Przewodniczacy rady "
        "otworzyl obrady i stwierdzil quorum. Burmistrz przedstawil projekt uchwaly, "
        "a komisja wydala opinie do projektu. Radni przyjeli porzadek obrad bez zmian."
    )
    words = ascii_paragraph.split()
    lines = [" ".join(words[i : i + 10]) for i in range(0, len(words), 10)]
    return _pdf([lines, lines])


@pytest.fixture()
def document_image() -> Image.Image:
    """A white page with dark text-like bars and real glyphs."""
    image = Image.new("L", (400, 300), 255)
    draw = ImageDraw.Draw(image)
    for row in range(8):
        y = 20 + row * 34
        draw.rectangle((20, y, 360, y + 10), fill=20)
        draw.text((20, y + 14), "Sesja Rady Miejskiej nr 5", fill=0)
    return image


@pytest.fixture()
def document_image_bytes(document_image: Image.Image) -> bytes:
    return _png(document_image)


@pytest.fixture()
def blank_image_bytes() -> bytes:
    return _png(Image.new("L", (200, 200), 255))
