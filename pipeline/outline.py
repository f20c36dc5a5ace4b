"""Outline walk — turn metadata and a block snapshot into a DocumentOutline.

Section order is fixed: letterhead, date, addressing, title, body, signature.
Every section is always present (possibly empty) so both renderers emit the
same structure for the same input.

Skip rules:
  - paragraph / heading / quote: skipped when blank
  - list: each blank item skipped; numbering follows the item's position
  - image: not rendered
  - no blocks at all: the plain-text ``content`` is split on blank lines
"""
import logging
from collections.abc import Sequence

from models.blocks import Block, HeadingBlock, ImageBlock, ListBlock, ParagraphBlock, QuoteBlock
from models.document import DocumentMetadata, ManualLetterhead, Signature, UploadedLetterhead
from models.labels import LabelTable
from models.outline import DocumentOutline, Element, ImageElement, Section, SpacerElement, TextElement
from utils.dates import format_long_date, format_short_date

logger = logging.getLogger(__name__)


def build_outline(
    metadata: DocumentMetadata,
    blocks: Sequence[Block],
    labels: LabelTable | None = None,
) -> DocumentOutline:
    labels = labels or LabelTable()
    sections = [
        Section(name="letterhead", elements=_letterhead(metadata, labels)),
        Section(name="date", elements=[
            TextElement(role="date", text=format_long_date(metadata.date, labels.calendar)),
        ]),
        Section(name="addressing", elements=_addressing(metadata, labels)),
        Section(name="title", elements=[TextElement(role="title", text=metadata.title)]),
        Section(name="body", elements=_body(metadata, blocks)),
        Section(name="signature", elements=_signature(metadata.signature, labels)),
    ]
    return DocumentOutline(title=metadata.title, sections=sections)


# ---------------------------------------------------------------------------
# Letterhead
# ---------------------------------------------------------------------------

def _letterhead(metadata: DocumentMetadata, labels: LabelTable) -> list[Element]:
    letterhead = metadata.letterhead
    if isinstance(letterhead, UploadedLetterhead):
        if not letterhead.image_url:
            return []
        return [ImageElement(role="letterhead", source=letterhead.image_url)]
    if isinstance(letterhead, ManualLetterhead):
        return _manual_letterhead(letterhead, labels)
    return []


def _manual_letterhead(letterhead: ManualLetterhead, labels: LabelTable) -> list[Element]:
    elements: list[Element] = []
    if letterhead.logo_base64:
        elements.append(ImageElement(role="logo", source=letterhead.logo_base64))
    # Company name line is always present, even when empty
    elements.append(TextElement(role="company_name", text=letterhead.company_name or ""))
    if letterhead.address:
        elements.append(TextElement(role="address", text=letterhead.address))

    contact = labels.contact
    parts = [
        f"{prefix} {value}"
        for prefix, value in (
            (contact.phone, letterhead.phone),
            (contact.email, letterhead.email),
            (contact.website, letterhead.website),
        )
        if value
    ]
    if parts:
        elements.append(TextElement(role="contact", text=contact.separator.join(parts)))
    elements.append(TextElement(role="rule", text=""))
    return elements


# ---------------------------------------------------------------------------
# Recipient / subject
# ---------------------------------------------------------------------------

def _addressing(metadata: DocumentMetadata, labels: LabelTable) -> list[Element]:
    addressing = labels.addressing
    template = metadata.template.type
    elements: list[Element] = []

    if template == "letter" and metadata.recipient:
        elements += [
            TextElement(role="greeting", text=addressing.letter_greeting),
            TextElement(role="recipient", text=metadata.recipient),
            TextElement(role="location", text=addressing.letter_location),
        ]

    if template == "memo" and metadata.recipient:
        elements += [
            TextElement(role="memo_line", text=f"{addressing.memo_recipient} {metadata.recipient}"),
            TextElement(role="memo_line", text=addressing.memo_sender),
            TextElement(role="memo_line", text=f"{addressing.memo_date} {format_short_date(metadata.date)}"),
        ]
        if metadata.subject:
            elements.append(TextElement(role="subject", text=f"{addressing.subject} {metadata.subject}"))

    if template == "letter" and metadata.subject:
        elements.append(TextElement(role="subject", text=f"{addressing.subject} {metadata.subject}"))

    return elements


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------

def _body(metadata: DocumentMetadata, blocks: Sequence[Block]) -> list[Element]:
    if not blocks:
        return [
            TextElement(role="paragraph", text=segment.strip())
            for segment in metadata.content.split("\n\n")
            if segment.strip()
        ]

    elements: list[Element] = []
    for block in blocks:
        elements.extend(_block_elements(block))
    return elements


def _block_elements(block: Block) -> list[Element]:
    if isinstance(block, ParagraphBlock):
        if not block.content.strip():
            return []
        return [TextElement(role="paragraph", text=block.content)]

    if isinstance(block, HeadingBlock):
        if not block.content.strip():
            return []
        return [TextElement(role="heading", text=block.content, level=block.level)]

    if isinstance(block, ListBlock):
        return [
            TextElement(role="list_item", text=f"{position}. {item}")
            for position, item in enumerate(block.items, start=1)
            if item.strip()
        ]

    if isinstance(block, QuoteBlock):
        if not block.content.strip():
            return []
        return [TextElement(role="quote", text=block.content)]

    if isinstance(block, ImageBlock):
        logger.debug("Image block %s is not rendered", block.id)
        return []

    raise TypeError(f"Unknown block type: {type(block).__name__}")


# ---------------------------------------------------------------------------
# Signature
# ---------------------------------------------------------------------------

def _signature(signature: Signature | None, labels: LabelTable) -> list[Element]:
    if signature is None or not signature.has_content:
        return []
    elements: list[Element] = [TextElement(role="closing", text=labels.closing)]
    if signature.signature_image:
        elements.append(ImageElement(role="signature", source=signature.signature_image))
    else:
        elements.append(SpacerElement())
    name = (signature.name or "").strip()
    position = (signature.position or "").strip()
    if name:
        elements.append(TextElement(role="signature_name", text=name))
    if position:
        elements.append(TextElement(role="signature_position", text=position))
    return elements
