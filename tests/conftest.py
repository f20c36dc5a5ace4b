from datetime import date
from pathlib import Path

import pytest

from helpers import data_uri, make_png
from models.blocks import HeadingBlock, ListBlock, ParagraphBlock, QuoteBlock
from models.document import DocumentMetadata, TemplateInfo
from settings import Settings


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def png_data_uri(png_bytes: bytes) -> str:
    return data_uri(png_bytes)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at an empty config directory, so built-in defaults apply."""
    return Settings(config_dir=tmp_path / "config")


@pytest.fixture
def metadata() -> DocumentMetadata:
    return DocumentMetadata(
        title="Laporan Bulanan",
        date=date(2026, 10, 19),
        template=TemplateInfo(type="other"),
    )


@pytest.fixture
def scenario_blocks():
    """Paragraph, H1, list with one blank item, quote."""
    return (
        ParagraphBlock(content="Hello", order=0),
        HeadingBlock(content="Title", level=1, order=1),
        ListBlock(items=("a", ""), order=2),
        QuoteBlock(content="wise words", order=3),
    )
