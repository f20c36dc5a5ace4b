"""Tests for the shared outline walk (section order and skip rules)."""
from datetime import date

import pytest

from models.blocks import HeadingBlock, ImageBlock, ListBlock, ParagraphBlock, QuoteBlock
from models.document import DocumentMetadata, ManualLetterhead, Signature, TemplateInfo, UploadedLetterhead
from models.labels import ContactLabels, LabelTable
from models.outline import ImageElement, SpacerElement, TextElement
from pipeline.outline import build_outline


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _meta(**kwargs) -> DocumentMetadata:
    defaults = dict(title="Surat Edaran", date=date(2026, 10, 19))
    return DocumentMetadata(**{**defaults, **kwargs})


def _texts(outline, section: str) -> list[str]:
    return [e.text for e in outline.section(section).elements if isinstance(e, TextElement)]


def _roles(outline, section: str) -> list[str]:
    return [e.role for e in outline.section(section).elements]


# ---------------------------------------------------------------------------
# Section order
# ---------------------------------------------------------------------------

class TestSectionOrder:
    def test_fixed_order(self, scenario_blocks):
        outline = build_outline(_meta(), scenario_blocks)
        assert [s.name for s in outline.sections] == [
            "letterhead", "date", "addressing", "title", "body", "signature",
        ]

    def test_deterministic(self, scenario_blocks):
        meta = _meta(signature=Signature(name="Budi"))
        first = build_outline(meta, scenario_blocks)
        second = build_outline(meta, scenario_blocks)
        assert first == second

    def test_title_section(self):
        outline = build_outline(_meta(title="Undangan"), ())
        assert _texts(outline, "title") == ["Undangan"]

    def test_long_date(self):
        outline = build_outline(_meta(), ())
        assert _texts(outline, "date") == ["Senin, 19 Oktober 2026"]


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------

class TestBody:
    def test_scenario_blocks(self, scenario_blocks):
        outline = build_outline(_meta(), scenario_blocks)
        body = outline.section("body").elements
        assert [(e.role, e.text) for e in body] == [
            ("paragraph", "Hello"),
            ("heading", "Title"),
            ("list_item", "1. a"),
            ("quote", "wise words"),
        ]
        assert body[1].level == 1

    @pytest.mark.parametrize("block", [
        ParagraphBlock(content="   "),
        HeadingBlock(content=""),
        QuoteBlock(content="\n\t"),
        ListBlock(items=("", " ")),
        ImageBlock(image_url="https://example.com/x.png"),
    ])
    def test_blank_blocks_skipped(self, block):
        outline = build_outline(_meta(), (block,))
        assert outline.section("body").elements == []

    def test_list_numbering_follows_item_position(self):
        outline = build_outline(_meta(), (ListBlock(items=("a", "", "c")),))
        assert _texts(outline, "body") == ["1. a", "3. c"]

    def test_plain_content_fallback(self):
        outline = build_outline(_meta(content="Para one\n\nPara two"), ())
        assert _roles(outline, "body") == ["paragraph", "paragraph"]
        assert _texts(outline, "body") == ["Para one", "Para two"]

    def test_fallback_skips_blank_segments(self):
        outline = build_outline(_meta(content="\n\nOne\n\n   \n\nTwo\n\n"), ())
        assert _texts(outline, "body") == ["One", "Two"]

    def test_blocks_win_over_plain_content(self):
        outline = build_outline(_meta(content="ignored"), (ParagraphBlock(content="used"),))
        assert _texts(outline, "body") == ["used"]

    def test_unknown_block_object_raises(self):
        with pytest.raises(TypeError):
            build_outline(_meta(), ({"type": "paragraph", "content": "x"},))


# ---------------------------------------------------------------------------
# Letterhead
# ---------------------------------------------------------------------------

class TestLetterhead:
    def test_none(self):
        assert build_outline(_meta(), ()).section("letterhead").elements == []

    def test_uploaded_is_single_image(self):
        outline = build_outline(_meta(letterhead=UploadedLetterhead(image_url="https://x/kop.png")), ())
        elements = outline.section("letterhead").elements
        assert len(elements) == 1
        assert isinstance(elements[0], ImageElement)
        assert elements[0].role == "letterhead"

    def test_manual_company_name_only(self):
        outline = build_outline(_meta(letterhead=ManualLetterhead(company_name="PT Maju")), ())
        assert _roles(outline, "letterhead") == ["company_name", "rule"]
        assert _texts(outline, "letterhead")[0] == "PT Maju"

    def test_manual_company_name_rendered_even_when_absent(self):
        outline = build_outline(_meta(letterhead=ManualLetterhead(address="Jl. Merdeka 1")), ())
        assert _roles(outline, "letterhead") == ["company_name", "address", "rule"]
        assert _texts(outline, "letterhead")[0] == ""

    def test_manual_full(self):
        letterhead = ManualLetterhead(
            logo_base64="data:image/png;base64,AAAA",
            company_name="PT Maju",
            address="Jl. Merdeka 1",
            phone="021-555",
            email="info@maju.id",
            website="maju.id",
        )
        outline = build_outline(_meta(letterhead=letterhead), ())
        assert _roles(outline, "letterhead") == ["logo", "company_name", "address", "contact", "rule"]
        assert "Tel: 021-555 | Email: info@maju.id | Web: maju.id" in _texts(outline, "letterhead")

    def test_contact_line_only_present_items(self):
        outline = build_outline(_meta(letterhead=ManualLetterhead(company_name="X", email="a@b.c")), ())
        assert "Email: a@b.c" in _texts(outline, "letterhead")

    def test_contact_labels_are_configurable(self):
        labels = LabelTable(contact=ContactLabels(phone="Phone:", separator=" / "))
        outline = build_outline(
            _meta(letterhead=ManualLetterhead(phone="1", email="e")), (), labels,
        )
        assert "Phone: 1 / Email: e" in _texts(outline, "letterhead")


# ---------------------------------------------------------------------------
# Recipient / subject
# ---------------------------------------------------------------------------

class TestAddressing:
    def test_letter_with_recipient(self):
        outline = build_outline(_meta(template=TemplateInfo(type="letter"), recipient="Bapak Andi"), ())
        assert _roles(outline, "addressing") == ["greeting", "recipient", "location"]
        assert _texts(outline, "addressing") == ["Kepada Yth.", "Bapak Andi", "Di tempat"]

    def test_letter_subject_without_recipient(self):
        outline = build_outline(_meta(template=TemplateInfo(type="letter"), subject="Undangan Rapat"), ())
        assert _texts(outline, "addressing") == ["Perihal: Undangan Rapat"]

    def test_letter_recipient_and_subject(self):
        outline = build_outline(
            _meta(template=TemplateInfo(type="letter"), recipient="Ibu Sari", subject="Rapat"), (),
        )
        assert _roles(outline, "addressing") == ["greeting", "recipient", "location", "subject"]

    def test_memo_with_recipient_and_subject(self):
        outline = build_outline(
            _meta(template=TemplateInfo(type="memo"), recipient="Tim IT", subject="Libur"), (),
        )
        assert _texts(outline, "addressing") == [
            "Kepada: Tim IT",
            "Dari: Manajemen",
            "Tanggal: 19/10/2026",
            "Perihal: Libur",
        ]

    def test_memo_without_recipient_has_no_header(self):
        outline = build_outline(_meta(template=TemplateInfo(type="memo"), subject="Libur"), ())
        assert outline.section("addressing").elements == []

    def test_other_template_ignores_recipient(self):
        outline = build_outline(_meta(recipient="X", subject="Y"), ())
        assert outline.section("addressing").elements == []


# ---------------------------------------------------------------------------
# Signature
# ---------------------------------------------------------------------------

class TestSignature:
    def test_absent(self):
        assert build_outline(_meta(), ()).section("signature").elements == []

    def test_image_only_is_not_rendered(self):
        outline = build_outline(_meta(signature=Signature(signature_image="data:image/png;base64,AA")), ())
        assert outline.section("signature").elements == []

    def test_position_only(self):
        outline = build_outline(_meta(signature=Signature(position="Direktur")), ())
        elements = outline.section("signature").elements
        assert [e.role for e in elements] == ["closing", "signature_space", "signature_position"]
        assert isinstance(elements[1], SpacerElement)
        assert elements[0].text == "Hormat kami,"

    def test_blank_name_is_not_rendered(self):
        outline = build_outline(_meta(signature=Signature(name="   ", position="Direktur")), ())
        assert _roles(outline, "signature") == ["closing", "signature_space", "signature_position"]

    def test_name_and_position_are_trimmed(self):
        outline = build_outline(_meta(signature=Signature(name=" Budi ", position="Direktur ")), ())
        texts = [e.text for e in outline.section("signature").elements if isinstance(e, TextElement)]
        assert texts == ["Hormat kami,", "Budi", "Direktur"]

    def test_name_and_image(self):
        outline = build_outline(
            _meta(signature=Signature(name="Budi", signature_image="https://x/ttd.png")), (),
        )
        assert _roles(outline, "signature") == ["closing", "signature", "signature_name"]

    def test_images_listing(self):
        meta = _meta(
            letterhead=UploadedLetterhead(image_url="https://x/kop.png"),
            signature=Signature(name="Budi", signature_image="https://x/ttd.png"),
        )
        outline = build_outline(meta, ())
        assert [e.role for e in outline.images()] == ["letterhead", "signature"]


# ---------------------------------------------------------------------------
# Metadata input
# ---------------------------------------------------------------------------

class TestMetadataInput:
    def test_template_carries_only_its_kind(self):
        template = TemplateInfo.model_validate({"type": "letter", "name": "Surat Resmi"})
        assert template.model_dump() == {"type": "letter"}

    def test_camel_case_letterhead(self):
        meta = DocumentMetadata.model_validate({
            "title": "X",
            "date": "2026-10-19",
            "letterhead": {"type": "manual", "companyName": "PT Maju", "phone": "021"},
        })
        outline = build_outline(meta, ())
        texts = [e.text for e in outline.section("letterhead").elements]
        assert texts[:2] == ["PT Maju", "Tel: 021"]
