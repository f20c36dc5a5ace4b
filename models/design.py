"""Document design — typed representation of design.yaml.

Page margins, font sizes, spacing and image boxes used by both renderers.
The relative order title > H1 > H2 > H3 > body is enforced on load.
"""
from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class PageMargins(BaseModel):
    top_in: float = 1.0
    right_in: float = 1.0
    bottom_in: float = 1.0
    left_in: float = 1.0


class FontSizes(BaseModel):
    title_pt: float = 16.0
    heading1_pt: float = 14.0
    heading2_pt: float = 13.0
    heading3_pt: float = 12.0
    body_pt: float = 11.0
    company_name_pt: float = 16.0
    address_pt: float = 10.0
    contact_pt: float = 9.0
    rule_pt: float = 8.0

    @model_validator(mode="after")
    def title_outranks_headings(self) -> "FontSizes":
        ranked = [self.title_pt, self.heading1_pt, self.heading2_pt, self.heading3_pt, self.body_pt]
        if any(larger <= smaller for larger, smaller in zip(ranked, ranked[1:])):
            raise ValueError("font sizes must satisfy title > heading1 > heading2 > heading3 > body")
        return self

    def heading(self, level: int) -> float:
        return {1: self.heading1_pt, 2: self.heading2_pt}.get(level, self.heading3_pt)


class ImageBox(BaseModel):
    width_px: int = Field(gt=0)
    height_px: int = Field(gt=0)


class ImageBoxes(BaseModel):
    letterhead: ImageBox = Field(default_factory=lambda: ImageBox(width_px=600, height_px=150))
    logo: ImageBox = Field(default_factory=lambda: ImageBox(width_px=80, height_px=80))
    signature: ImageBox = Field(default_factory=lambda: ImageBox(width_px=120, height_px=60))

    def get(self, role: str) -> ImageBox:
        return getattr(self, role, self.logo)


class Spacing(BaseModel):
    """Paragraph spacing and indents, in points."""

    block_after_pt: float = 10.0
    section_after_pt: float = 20.0
    line_after_pt: float = 5.0
    heading_before_pt: float = 15.0
    closing_before_pt: float = 30.0
    indent_pt: float = 20.0


class DocumentDesign(BaseModel):
    """Complete design loaded from design.yaml.

    Every field has a default so the design is usable when design.yaml is
    absent or partially specified.
    """
    margins: PageMargins = Field(default_factory=PageMargins)
    fonts: FontSizes = Field(default_factory=FontSizes)
    spacing: Spacing = Field(default_factory=Spacing)
    images: ImageBoxes = Field(default_factory=ImageBoxes)
    font_family: str = "Times New Roman"

    @classmethod
    def load(cls, path: Path) -> "DocumentDesign":
        """Load from a YAML file. Missing fields use Pydantic defaults.

        Raises FileNotFoundError if path does not exist.
        """
        import yaml  # lazy — only needed at load time
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls.model_validate(data)

    @classmethod
    def load_or_default(cls, path: Path | None) -> "DocumentDesign":
        """Load from path if it exists, otherwise return the default design."""
        if path is not None and path.exists():
            return cls.load(path)
        return cls()
