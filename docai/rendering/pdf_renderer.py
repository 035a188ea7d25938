"""Rendering of summary text into a PDF document.

Lays plain text out as paragraphs with reportlab's platypus engine.
Blank lines separate paragraphs; single newlines become line breaks.
"""

import io
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from docai.utils.logger import get_logger

logger = get_logger(__name__)

_PAGE_SIZES: dict[str, tuple[float, float]] = {"A4": A4, "LETTER": LETTER}


def _paragraphs(text: str) -> list[str]:
    blocks = [block.strip() for block in text.replace("\r\n", "\n").split("\n\n")]
    return [escape(block).replace("\n", "<br/>") for block in blocks if block]


def render_text_to_pdf(
    text: str,
    title: str | None = None,
    page_size: str = "A4",
    font_size: float = 11.0,
) -> bytes:
    """Render text into a PDF.

    Empty text still produces a valid single-page document.

    Args:
        text: Plain text to render.
        title: Optional heading placed above the text.
        page_size: ``"A4"`` or ``"LETTER"``.
        font_size: Body font size in points.

    Returns:
        The PDF file as bytes.

    Raises:
        ValueError: If ``page_size`` is not supported.
    """
    if page_size not in _PAGE_SIZES:
        raise ValueError(f"Unsupported page size: {page_size}")

    styles = getSampleStyleSheet()
    body_style = ParagraphStyle(
        "SummaryBody",
        parent=styles["BodyText"],
        fontSize=font_size,
        leading=font_size * 1.3,
        spaceAfter=8,
    )

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=_PAGE_SIZES[page_size],
        leftMargin=0.8 * inch,
        rightMargin=0.8 * inch,
        topMargin=0.8 * inch,
        bottomMargin=0.8 * inch,
        title=title or "",
    )

    story = []
    if title:
        story.append(Paragraph(escape(title), styles["Heading1"]))
        story.append(Spacer(1, 12))
    story.extend(Paragraph(block, body_style) for block in _paragraphs(text))
    if not story:
        story.append(Spacer(1, 1))

    doc.build(story)
    pdf_bytes = buffer.getvalue()
    logger.info("Rendered %d characters into a %d byte PDF", len(text), len(pdf_bytes))
    return pdf_bytes
