"""Document outline — the format-neutral result of walking metadata and blocks.

Both renderers consume the same outline, so skip rules and section order are
decided once. Roles name what an element is; each renderer decides how it
looks.
"""
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

SectionName = Literal["letterhead", "date", "addressing", "title", "body", "signature"]

TextRole = Literal[
    "company_name",
    "address",
    "contact",
    "rule",
    "date",
    "greeting",
    "recipient",
    "location",
    "memo_line",
    "subject",
    "title",
    "paragraph",
    "heading",
    "list_item",
    "quote",
    "closing",
    "signature_name",
    "signature_position",
]

ImageRole = Literal["letterhead", "logo", "signature"]


class TextElement(BaseModel):
    kind: Literal["text"] = "text"
    role: TextRole
    text: str
    level: int | None = None  # heading level, only for role="heading"


class ImageElement(BaseModel):
    kind: Literal["image"] = "image"
    role: ImageRole
    source: str  # URL or data: URI


class SpacerElement(BaseModel):
    """Blank vertical space, e.g. room for a handwritten signature."""

    kind: Literal["spacer"] = "spacer"
    role: Literal["signature_space"] = "signature_space"


Element = Annotated[
    Union[TextElement, ImageElement, SpacerElement],
    Field(discriminator="kind"),
]


class Section(BaseModel):
    name: SectionName
    elements: list[Element] = Field(default_factory=list)


class DocumentOutline(BaseModel):
    title: str
    sections: list[Section] = Field(default_factory=list)

    def section(self, name: SectionName) -> Section | None:
        for section in self.sections:
            if section.name == name:
                return section
        return None

    def images(self) -> list[ImageElement]:
        return [
            element
            for section in self.sections
            for element in section.elements
            if isinstance(element, ImageElement)
        ]
