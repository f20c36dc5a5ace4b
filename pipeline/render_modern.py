"""Modern renderer — DocumentOutline to a ``.docx`` package via python-docx.

Every image is resolved to raw bytes before it is placed in the package.
Failure policy per image:
  - letterhead / logo: omitted
  - signature:         blank space, the rest of the signature stays
"""
import io
import logging
from datetime import datetime

from docx import Document
from docx.document import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Emu, Inches, Pt, RGBColor
from docx.text.paragraph import Paragraph

from models.design import DocumentDesign
from models.outline import DocumentOutline, ImageElement, ImageRole, TextElement
from pipeline.assets import AssetResolver, prefetch_images

logger = logging.getLogger(__name__)

# 96 dpi screen pixels to English Metric Units
_EMU_PER_PX = 9525

_BLACK = RGBColor(0, 0, 0)

# role → (alignment, bold, italic, underline)
_TEXT_FORMATS = {
    "company_name":       (WD_ALIGN_PARAGRAPH.CENTER, True, False, False),
    "address":            (WD_ALIGN_PARAGRAPH.CENTER, False, False, False),
    "contact":            (WD_ALIGN_PARAGRAPH.CENTER, False, False, False),
    "rule":               (WD_ALIGN_PARAGRAPH.CENTER, False, False, False),
    "date":               (WD_ALIGN_PARAGRAPH.RIGHT, False, False, False),
    "greeting":           (None, False, False, False),
    "recipient":          (None, True, False, False),
    "location":           (None, False, False, False),
    "memo_line":          (None, True, False, False),
    "subject":            (None, True, False, False),
    "title":              (WD_ALIGN_PARAGRAPH.CENTER, True, False, False),
    "paragraph":          (WD_ALIGN_PARAGRAPH.JUSTIFY, False, False, False),
    "heading":            (None, True, False, False),
    "list_item":          (None, False, False, False),
    "quote":              (WD_ALIGN_PARAGRAPH.CENTER, False, True, False),
    "closing":            (WD_ALIGN_PARAGRAPH.RIGHT, False, False, False),
    "signature_name":     (WD_ALIGN_PARAGRAPH.RIGHT, True, False, True),
    "signature_position": (WD_ALIGN_PARAGRAPH.RIGHT, False, False, False),
}

_RULE_TEXT = "_" * 79


async def render(
    outline: DocumentOutline,
    resolver: AssetResolver,
    design: DocumentDesign | None = None,
    max_concurrent_fetches: int = 4,
    created: datetime | None = None,
) -> bytes:
    """Resolve every image in the outline, then build and serialise the package."""
    design = design or DocumentDesign()
    images = await prefetch_images(outline.images(), resolver, limit=max_concurrent_fetches)
    doc = build_document(outline, design, images, created=created)
    stream = io.BytesIO()
    doc.save(stream)
    return stream.getvalue()


def build_document(
    outline: DocumentOutline,
    design: DocumentDesign,
    images: dict[ImageRole, bytes | None],
    created: datetime | None = None,
) -> DocxDocument:
    doc = Document()
    _apply_page_setup(doc, design)
    doc.core_properties.title = outline.title
    if created is not None:
        doc.core_properties.created = created

    for section in outline.sections:
        for element in section.elements:
            if isinstance(element, TextElement):
                _add_text(doc, element, design)
            elif isinstance(element, ImageElement):
                data = images.get(element.role)
                if data is not None:
                    _add_image(doc, element, data, design)
                elif element.role == "signature":
                    _add_blank_space(doc, design)
            else:
                _add_blank_space(doc, design)
    return doc


def _apply_page_setup(doc: DocxDocument, design: DocumentDesign) -> None:
    margins = design.margins
    for section in doc.sections:
        section.top_margin = Inches(margins.top_in)
        section.right_margin = Inches(margins.right_in)
        section.bottom_margin = Inches(margins.bottom_in)
        section.left_margin = Inches(margins.left_in)
    normal = doc.styles["Normal"]
    normal.font.name = design.font_family
    normal.font.size = Pt(design.fonts.body_pt)


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

def _add_text(doc: DocxDocument, element: TextElement, design: DocumentDesign) -> Paragraph:
    alignment, bold, italic, underline = _TEXT_FORMATS[element.role]
    paragraph = doc.add_paragraph(style=_paragraph_style(element))
    if alignment is not None:
        paragraph.alignment = alignment

    text = element.text
    if element.role == "quote":
        text = f'"{text}"'
    elif element.role == "rule":
        text = _RULE_TEXT

    run = paragraph.add_run(text)
    run.bold = bold
    run.italic = italic
    run.underline = underline
    run.font.size = Pt(_font_size(element, design))
    if element.role in ("title", "heading"):
        run.font.color.rgb = _BLACK

    _apply_spacing(paragraph, element, design)
    return paragraph


def _paragraph_style(element: TextElement) -> str | None:
    if element.role == "title":
        return "Title"
    if element.role == "heading":
        return f"Heading {element.level or 2}"
    return None


def _font_size(element: TextElement, design: DocumentDesign) -> float:
    fonts = design.fonts
    if element.role == "title":
        return fonts.title_pt
    if element.role == "heading":
        return fonts.heading(element.level or 2)
    return {
        "company_name": fonts.company_name_pt,
        "address": fonts.address_pt,
        "contact": fonts.contact_pt,
        "rule": fonts.rule_pt,
    }.get(element.role, fonts.body_pt)


def _apply_spacing(paragraph: Paragraph, element: TextElement, design: DocumentDesign) -> None:
    spacing = design.spacing
    fmt = paragraph.paragraph_format
    role = element.role
    if role in ("paragraph", "quote"):
        fmt.space_after = Pt(spacing.block_after_pt)
    elif role == "heading":
        fmt.space_before = Pt(spacing.heading_before_pt)
        fmt.space_after = Pt(spacing.block_after_pt)
    elif role in ("date", "title", "rule", "location"):
        fmt.space_after = Pt(spacing.section_after_pt)
    elif role == "closing":
        fmt.space_before = Pt(spacing.closing_before_pt)
        fmt.space_after = Pt(spacing.block_after_pt)
    else:
        fmt.space_after = Pt(spacing.line_after_pt)

    if role == "list_item":
        fmt.left_indent = Pt(spacing.indent_pt)
    elif role == "quote":
        fmt.left_indent = Pt(spacing.indent_pt)
        fmt.right_indent = Pt(spacing.indent_pt)


# ---------------------------------------------------------------------------
# Images and blank space
# ---------------------------------------------------------------------------

def _add_image(doc: DocxDocument, element: ImageElement, data: bytes, design: DocumentDesign) -> None:
    box = design.images.get(element.role)
    paragraph = doc.add_paragraph()
    paragraph.alignment = (
        WD_ALIGN_PARAGRAPH.RIGHT if element.role == "signature" else WD_ALIGN_PARAGRAPH.CENTER
    )
    paragraph.paragraph_format.space_after = Pt(
        design.spacing.section_after_pt if element.role == "letterhead" else design.spacing.block_after_pt
    )
    paragraph.add_run().add_picture(
        io.BytesIO(data),
        width=Emu(box.width_px * _EMU_PER_PX),
        height=Emu(box.height_px * _EMU_PER_PX),
    )


def _add_blank_space(doc: DocxDocument, design: DocumentDesign) -> None:
    """Room for a handwritten signature: two empty lines."""
    paragraph = doc.add_paragraph()
    paragraph.alignment = WD_ALIGN_PARAGRAPH.RIGHT
    paragraph.paragraph_format.space_after = Pt(design.spacing.block_after_pt)
    run = paragraph.add_run()
    run.font.size = Pt(design.fonts.body_pt)
    run.add_break()
    run.add_break()

