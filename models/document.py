"""Document metadata supplied alongside the block snapshot on every export.

These fields come from the composer's form state (title, date, template,
addressing, letterhead, signature). Renderers treat them as read-only.
"""
from datetime import date
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TemplateType = Literal["letter", "memo", "other"]


class _SnapshotModel(BaseModel):
    # The editor sends camelCase keys (companyName, signatureImage)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TemplateInfo(_SnapshotModel):
    type: TemplateType = "other"


class UploadedLetterhead(_SnapshotModel):
    type: Literal["uploaded"] = "uploaded"
    image_url: str


class ManualLetterhead(_SnapshotModel):
    """Company details typed in by the user. Every field is optional."""

    type: Literal["manual"] = "manual"
    logo_base64: str | None = None  # data: URI
    company_name: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None


Letterhead = Annotated[
    Union[UploadedLetterhead, ManualLetterhead],
    Field(discriminator="type"),
]


class Signature(_SnapshotModel):
    name: str | None = None
    position: str | None = None
    signature_image: str | None = None  # data: URI or fetchable URL

    @property
    def has_content(self) -> bool:
        """The signature block is only rendered when a name or position is set."""
        return bool((self.name or "").strip() or (self.position or "").strip())


class DocumentMetadata(_SnapshotModel):
    title: str = ""
    date: date
    template: TemplateInfo = Field(default_factory=TemplateInfo)
    recipient: str | None = None
    subject: str | None = None
    # Plain-text body used when the document has no blocks
    content: str = ""
    letterhead: Letterhead | None = None
    signature: Signature | None = None
